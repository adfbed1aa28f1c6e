from __future__ import annotations

from typing import Dict, List, Sequence

from .errors import SimulationInvariantViolation
from .models import ProcessResult, RunningState, SimulationResult, SystemMetrics
from .timeline import segments_for_pid


def collect_results(states: Sequence[RunningState]) -> List[ProcessResult]:
    """
    Build one ProcessResult per process, in ascending PID order, from the
    finish times the engine recorded.
    """
    results: List[ProcessResult] = []
    for state in sorted(states, key=lambda s: s.process.pid):
        p = state.process
        if state.finish_time is None:
            raise SimulationInvariantViolation(f"P{p.pid} has no recorded finish time")
        results.append(
            ProcessResult(
                pid=p.pid,
                arrival_time=p.arrival_time,
                burst_time=p.burst_time,
                finish_time=state.finish_time,
            )
        )
    return results


def compute_system_metrics(result: SimulationResult) -> SystemMetrics:
    """
    Compute throughput and CPU utilization given populated per-process
    results and segment streams.
    """
    makespan = result.total_time
    cpu_busy_time = sum(s.duration for stream in result.segments for s in stream)

    throughput = len(result.results) / makespan if makespan > 0 else 0.0
    cpu_utilization = cpu_busy_time / makespan if makespan > 0 else 0.0

    system = SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        makespan=makespan,
        throughput=throughput,
        cpu_utilization=cpu_utilization,
    )
    result.system = system
    return system


def response_times(result: SimulationResult) -> Dict[int, int]:
    """
    Time from arrival to first dispatch, per PID.
    """
    return {
        r.pid: segments_for_pid(result.segments, r.pid)[0].start_time - r.arrival_time
        for r in result.results
    }


def summarize_results(result: SimulationResult) -> dict:
    """
    Return averages of the key per-process metrics for quick comparison.
    """
    processes: List[ProcessResult] = result.results
    if not processes:
        return {"avg_finish": 0.0, "avg_turnaround": 0.0, "avg_waiting": 0.0, "avg_response": 0.0}

    n = len(processes)
    responses = response_times(result)
    return {
        "avg_finish": sum(p.finish_time for p in processes) / n,
        "avg_turnaround": sum(p.turnaround_time for p in processes) / n,
        "avg_waiting": sum(p.waiting_time for p in processes) / n,
        "avg_response": sum(responses.values()) / n,
    }
