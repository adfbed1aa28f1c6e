"""
Discrete-time simulation engine shared by every scheduling policy.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from .config import DEFAULT_BOUND_FACTOR
from .errors import SimulationBoundExceeded, SimulationInvariantViolation
from .metrics import collect_results, compute_system_metrics
from .models import IDLE, Process, RunningState, SimulationResult, TimelineUnit, validate_processes
from .policies import Policy
from .timeline import compress

log = logging.getLogger(__name__)


def default_time_bound(processes: Iterable[Process], factor: int = DEFAULT_BOUND_FACTOR) -> int:
    processes = list(processes)
    if not processes:
        return 0
    return max(p.arrival_time for p in processes) + factor * sum(p.burst_time for p in processes)


def run_trace(
    processes: Iterable[Process],
    policy: Policy,
    max_time: Optional[int] = None,
) -> tuple[List[TimelineUnit], List[RunningState]]:
    """
    Step the policy to completion and return the raw per-unit trace along
    with the final running state of every process.

    States are indexed by the process's position in (arrival, pid) order;
    that is also the order in which processes are admitted.
    """
    batch = validate_processes(processes)
    bound = default_time_bound(batch) if max_time is None else max_time

    ordered = sorted(batch, key=lambda p: (p.arrival_time, p.pid))
    states = [RunningState(process=p, remaining=p.burst_time) for p in ordered]

    policy.reset()
    trace: List[TimelineUnit] = []
    time = 0
    next_arrival = 0
    unfinished = len(states)

    def admit_arrivals(current_time: int) -> None:
        nonlocal next_arrival
        while next_arrival < len(states) and states[next_arrival].process.arrival_time <= current_time:
            policy.admit(next_arrival, states)
            next_arrival += 1

    while unfinished:
        admit_arrivals(time)

        if not policy.has_ready():
            trace.append(IDLE)
            time += 1
            if time > bound:
                raise SimulationBoundExceeded(bound, time)
            continue

        index, quantum = policy.select_next(states)
        state = states[index]
        run_time = min(quantum, state.remaining)
        if run_time <= 0:
            raise SimulationInvariantViolation(
                f"{policy.name} dispatched P{state.process.pid} for {run_time} units"
            )

        trace.extend([TimelineUnit(pid=state.process.pid, level=state.level)] * run_time)
        time += run_time
        state.remaining -= run_time
        log.debug("t=%d: P%d ran %d unit(s) at level %d", time, state.process.pid, run_time, state.level)

        if time > bound:
            raise SimulationBoundExceeded(bound, time)

        if state.remaining == 0:
            state.finish_time = time
            unfinished -= 1
            log.debug("t=%d: P%d finished", time, state.process.pid)
        else:
            # Arrivals during the slice queue ahead of the preempted process.
            admit_arrivals(time)
            policy.on_slice_end(index, states)

    if len(trace) != time:
        raise SimulationInvariantViolation(f"Trace length {len(trace)} does not match total time {time}")

    return trace, states


def simulate(
    processes: Iterable[Process],
    policy: Policy,
    max_time: Optional[int] = None,
) -> SimulationResult:
    """
    Run ``policy`` over ``processes`` and build the compressed result.
    """
    trace, states = run_trace(processes, policy, max_time=max_time)

    result = SimulationResult(
        algorithm=policy.name,
        quantum=policy.quantum,
        segments=compress(trace, policy.levels),
        results=collect_results(states),
        total_time=len(trace),
    )
    compute_system_metrics(result)
    log.info(
        "%s finished %d process(es) in %d time unit(s)",
        policy.name,
        len(result.results),
        result.total_time,
    )
    return result
