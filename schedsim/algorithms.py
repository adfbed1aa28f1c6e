from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional, Sequence, Type

from .config import ALGORITHM_ORDER, QUANTUM_ALGORITHMS, SimulationConfig
from .engine import simulate
from .models import Process, SimulationResult, validate_processes
from .policies import FIFOPolicy, MLFQPolicy, Policy, RoundRobinPolicy, SJFPolicy, STCFPolicy

log = logging.getLogger(__name__)


ALGORITHMS: Dict[str, Type[Policy]] = {
    "fifo": FIFOPolicy,
    "sjf": SJFPolicy,
    "stcf": STCFPolicy,
    "rr": RoundRobinPolicy,
    "mlfq": MLFQPolicy,
}


def make_policy(name: str, quantum: Optional[int] = None) -> Policy:
    """
    Build a fresh policy instance. Quantum is only passed to RR and MLFQ.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHM_ORDER)})")

    cls = ALGORITHMS[name]
    if name in QUANTUM_ALGORITHMS:
        return cls(quantum)
    return cls()


def run_algorithm(
    name: str,
    processes: Iterable[Process],
    quantum: Optional[int] = None,
    max_time: Optional[int] = None,
) -> SimulationResult:
    """
    Dispatch to the requested algorithm.
    """
    policy = make_policy(name, quantum)
    return simulate(processes, policy, max_time=max_time)


def sort_algorithms(names: Iterable[str]) -> List[str]:
    """
    Normalise and de-duplicate algorithm names into canonical display order.
    """
    wanted = []
    for name in names:
        name = name.lower()
        if name not in ALGORITHMS:
            raise ValueError(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHM_ORDER)})")
        if name not in wanted:
            wanted.append(name)
    return sorted(wanted, key=ALGORITHM_ORDER.index)


def run_algorithms(
    names: Sequence[str],
    processes: Iterable[Process],
    config: SimulationConfig = SimulationConfig(),
) -> Dict[str, SimulationResult]:
    """
    Run several algorithms over the same workload.

    Runs share nothing mutable, so with ``config.parallel`` each one gets its
    own worker. Results come back keyed by name in canonical order.
    """
    names = sort_algorithms(names)
    batch = validate_processes(processes)
    # Build every policy up front so a bad quantum fails before any run starts.
    policies = {name: make_policy(name, config.quantum) for name in names}

    if config.parallel and len(policies) > 1:
        log.debug("Running %s in parallel", ", ".join(names))
        with ThreadPoolExecutor(max_workers=len(policies)) as pool:
            futures = {
                name: pool.submit(simulate, batch, policy, config.max_time)
                for name, policy in policies.items()
            }
            return {name: futures[name].result() for name in names}

    return {name: simulate(batch, policy, config.max_time) for name, policy in policies.items()}
