"""
Scheduling policies.

A policy owns the ready structure(s) of one simulation run and decides which
process runs next and for how long. The engine drives every policy through
the same four calls:

- ``admit``: a process has arrived and becomes ready.
- ``has_ready``: is anything waiting for the CPU?
- ``select_next``: remove and return ``(index, quantum)`` for the next dispatch.
- ``on_slice_end``: the dispatched process used its slice without finishing.

Policies only ever hold indices into the engine's ``RunningState`` arena, so
a decrement or a demotion made through one reference is seen everywhere.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import deque
from typing import Deque, List, Optional, Sequence, Tuple

from .config import MLFQ_LEVELS
from .errors import InvalidQuantum, SimulationInvariantViolation
from .models import RunningState

log = logging.getLogger(__name__)


def _tie_break(state: RunningState) -> Tuple[int, int]:
    return (state.process.arrival_time, state.process.pid)


def check_quantum(quantum) -> int:
    if isinstance(quantum, bool) or not isinstance(quantum, int) or quantum <= 0:
        raise InvalidQuantum(f"Time quantum must be a positive integer, got {quantum!r}")
    return quantum


class Policy(ABC):
    name: str = ""
    levels: int = 1

    def __init__(self, quantum: Optional[int] = None) -> None:
        self.quantum = quantum
        self.reset()

    @abstractmethod
    def reset(self) -> None:
        """Drop all ready state so the policy can drive a fresh run."""

    @abstractmethod
    def admit(self, index: int, states: Sequence[RunningState]) -> None: ...

    @abstractmethod
    def has_ready(self) -> bool: ...

    @abstractmethod
    def select_next(self, states: Sequence[RunningState]) -> Tuple[int, int]: ...

    @abstractmethod
    def on_slice_end(self, index: int, states: Sequence[RunningState]) -> None: ...

    def __repr__(self) -> str:
        if self.quantum is None:
            return f"{type(self).__name__}()"
        return f"{type(self).__name__}(quantum={self.quantum})"


class FIFOPolicy(Policy):
    """
    First-In First-Out (non-preemptive). Processes run to completion in
    admission order, which the engine guarantees is (arrival, pid).
    """

    name = "FIFO"

    def reset(self) -> None:
        self._queue: Deque[int] = deque()

    def admit(self, index: int, states: Sequence[RunningState]) -> None:
        self._queue.append(index)

    def has_ready(self) -> bool:
        return bool(self._queue)

    def select_next(self, states: Sequence[RunningState]) -> Tuple[int, int]:
        index = self._queue.popleft()
        return index, states[index].remaining

    def on_slice_end(self, index: int, states: Sequence[RunningState]) -> None:
        # FIFO slices always cover the full remaining time.
        raise SimulationInvariantViolation(
            f"FIFO preempted P{states[index].process.pid} with {states[index].remaining} unit(s) left"
        )


class _ReadySetPolicy(Policy):
    """
    Shared base for policies that pick the minimum of an unordered ready set.
    """

    def reset(self) -> None:
        self._ready: List[int] = []

    def admit(self, index: int, states: Sequence[RunningState]) -> None:
        self._ready.append(index)

    def has_ready(self) -> bool:
        return bool(self._ready)

    def on_slice_end(self, index: int, states: Sequence[RunningState]) -> None:
        self._ready.append(index)

    @abstractmethod
    def _key(self, state: RunningState) -> int: ...

    def _pop_best(self, states: Sequence[RunningState]) -> int:
        index = min(self._ready, key=lambda i: (self._key(states[i]),) + _tie_break(states[i]))
        self._ready.remove(index)
        return index


class SJFPolicy(_ReadySetPolicy):
    """
    Shortest Job First (non-preemptive).

    Among ready processes, choose the one with the smallest original burst
    time (tie-breaker: earlier arrival, then PID) and run it to completion.
    """

    name = "SJF"

    def _key(self, state: RunningState) -> int:
        return state.process.burst_time

    def select_next(self, states: Sequence[RunningState]) -> Tuple[int, int]:
        index = self._pop_best(states)
        return index, states[index].remaining


class STCFPolicy(_ReadySetPolicy):
    """
    Shortest Time-to-Completion First (preemptive SJF).

    The decision is revisited after every time unit, so a newly arrived
    process with less remaining work takes the CPU on the next unit.
    """

    name = "STCF"

    def _key(self, state: RunningState) -> int:
        return state.remaining

    def select_next(self, states: Sequence[RunningState]) -> Tuple[int, int]:
        return self._pop_best(states), 1


class RoundRobinPolicy(Policy):
    """
    Round Robin with a fixed time quantum.

    The engine admits processes that arrived during a slice before calling
    ``on_slice_end``, so they queue ahead of the preempted process.
    """

    name = "RR"

    def __init__(self, quantum: Optional[int] = None) -> None:
        super().__init__(check_quantum(quantum))

    def reset(self) -> None:
        self._queue: Deque[int] = deque()

    def admit(self, index: int, states: Sequence[RunningState]) -> None:
        self._queue.append(index)

    def has_ready(self) -> bool:
        return bool(self._queue)

    def select_next(self, states: Sequence[RunningState]) -> Tuple[int, int]:
        return self._queue.popleft(), self.quantum

    def on_slice_end(self, index: int, states: Sequence[RunningState]) -> None:
        self._queue.append(index)


class MLFQPolicy(Policy):
    """
    Multi-Level Feedback Queue with 3 levels and increasing quanta.

    - New arrivals enter the highest-priority queue (level 1).
    - Each queue is round robin; level n uses quantum * 2 ** (n - 1).
    - A process that uses its entire quantum without finishing is demoted to
      the next lower queue, and stays at the tail of level 3 once there.
    """

    name = "MLFQ"
    levels = MLFQ_LEVELS

    def __init__(self, quantum: Optional[int] = None) -> None:
        super().__init__(check_quantum(quantum))

    def reset(self) -> None:
        self._queues: List[Deque[int]] = [deque() for _ in range(self.levels)]

    def quantum_for(self, level: int) -> int:
        return self.quantum * 2 ** (level - 1)

    def admit(self, index: int, states: Sequence[RunningState]) -> None:
        states[index].level = 1
        self._queues[0].append(index)

    def has_ready(self) -> bool:
        return any(self._queues)

    def select_next(self, states: Sequence[RunningState]) -> Tuple[int, int]:
        for level, queue in enumerate(self._queues, start=1):
            if queue:
                return queue.popleft(), self.quantum_for(level)
        raise IndexError("select_next called with every queue empty")

    def on_slice_end(self, index: int, states: Sequence[RunningState]) -> None:
        state = states[index]
        new_level = min(state.level + 1, self.levels)
        if new_level != state.level:
            log.debug("MLFQ: demoted P%d from Q%d to Q%d", state.process.pid, state.level, new_level)
        state.level = new_level
        self._queues[new_level - 1].append(index)
