"""
CPU scheduling simulator.

Runs FIFO, SJF, STCF, Round Robin and MLFQ policies over a set of processes
and reports, per policy, the execution timeline and per-process finish times.
"""

from .algorithms import ALGORITHMS, make_policy, run_algorithm, run_algorithms
from .engine import simulate
from .errors import (
    InvalidProcess,
    InvalidQuantum,
    SchedulerError,
    SimulationBoundExceeded,
    SimulationInvariantViolation,
)
from .models import Process, ProcessResult, ScheduleSegment, SimulationResult

__all__ = [
    "ALGORITHMS",
    "InvalidProcess",
    "InvalidQuantum",
    "Process",
    "ProcessResult",
    "ScheduleSegment",
    "SchedulerError",
    "SimulationBoundExceeded",
    "SimulationInvariantViolation",
    "SimulationResult",
    "make_policy",
    "run_algorithm",
    "run_algorithms",
    "simulate",
]
