"""
Default settings shared by the library and the command-line interface.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_QUANTUM = 4
DEFAULT_NUM_PROCESSES = 5

# Random workload ranges, inclusive.
MIN_BURST_TIME = 1
MAX_BURST_TIME = 10
MIN_ARRIVAL_TIME = 0
MAX_ARRIVAL_TIME = 9

# Simulated-time cap is max(arrival) + DEFAULT_BOUND_FACTOR * sum(burst).
DEFAULT_BOUND_FACTOR = 1000

MLFQ_LEVELS = 3

ALGORITHM_ORDER = ("fifo", "sjf", "stcf", "rr", "mlfq")
QUANTUM_ALGORITHMS = frozenset({"rr", "mlfq"})


@dataclass(frozen=True)
class SimulationConfig:
    quantum: int = DEFAULT_QUANTUM
    max_time: Optional[int] = None
    parallel: bool = True
