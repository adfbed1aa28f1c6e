from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .errors import InvalidProcess


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class Process:
    pid: int
    arrival_time: int
    burst_time: int

    def __post_init__(self) -> None:
        if not _is_int(self.pid) or self.pid <= 0:
            raise InvalidProcess(f"pid must be a positive integer, got {self.pid!r}")
        if not _is_int(self.arrival_time) or self.arrival_time < 0:
            raise InvalidProcess(
                f"P{self.pid}: arrival_time must be a non-negative integer, got {self.arrival_time!r}"
            )
        if not _is_int(self.burst_time) or self.burst_time <= 0:
            raise InvalidProcess(
                f"P{self.pid}: burst_time must be a positive integer, got {self.burst_time!r}"
            )


def validate_processes(processes: Iterable[Process]) -> List[Process]:
    """
    Check a batch before simulation: non-empty, only Process records, unique pids.
    """
    batch = list(processes)
    if not batch:
        raise InvalidProcess("At least one process is required")

    seen: set[int] = set()
    for p in batch:
        if not isinstance(p, Process):
            raise InvalidProcess(f"Expected a Process, got {type(p).__name__}")
        if p.pid in seen:
            raise InvalidProcess(f"Duplicate pid {p.pid} in workload")
        seen.add(p.pid)
    return batch


@dataclass
class RunningState:
    """
    Mutable per-process bookkeeping owned by a single simulation run.
    """

    process: Process
    remaining: int
    level: int = 1
    finish_time: Optional[int] = None

    @property
    def finished(self) -> bool:
        return self.remaining == 0


@dataclass(frozen=True)
class TimelineUnit:
    pid: int
    level: int

    @property
    def idle(self) -> bool:
        return self.pid == 0


IDLE = TimelineUnit(pid=0, level=0)


@dataclass(frozen=True)
class ScheduleSegment:
    """
    One maximal contiguous run of a process at one priority level.
    """

    pid: int
    start_time: int
    end_time: int

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass(frozen=True)
class ProcessResult:
    pid: int
    arrival_time: int
    burst_time: int
    finish_time: int

    @property
    def turnaround_time(self) -> int:
        return self.finish_time - self.arrival_time

    @property
    def waiting_time(self) -> int:
        return self.turnaround_time - self.burst_time


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    makespan: int
    throughput: float
    cpu_utilization: float


@dataclass
class SimulationResult:
    algorithm: str
    quantum: Optional[int]
    segments: List[List[ScheduleSegment]] = field(default_factory=list)
    results: List[ProcessResult] = field(default_factory=list)
    total_time: int = 0
    system: Optional[SystemMetrics] = None

    @property
    def levels(self) -> int:
        return len(self.segments)
