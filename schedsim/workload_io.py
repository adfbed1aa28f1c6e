from __future__ import annotations

import csv
import json
import random
from pathlib import Path
from typing import Iterable, List, Optional

from .config import MAX_ARRIVAL_TIME, MAX_BURST_TIME, MIN_ARRIVAL_TIME, MIN_BURST_TIME
from .models import Process

_ALIASES = {
    "arrival_time": ("arrival_time", "arrivalTime"),
    "burst_time": ("burst_time", "burstTime"),
}


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        return _load_json(path)
    if suffix == ".csv":
        return _load_csv(path)

    raise ValueError(f"Unsupported workload format: {suffix} (use .json or .csv)")


def save_workload(processes: Iterable[Process], path: str | Path) -> Path:
    path = Path(path)
    data = [
        {"pid": p.pid, "arrival_time": p.arrival_time, "burst_time": p.burst_time}
        for p in processes
    ]
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")
    return path


def generate_processes(count: int, seed: Optional[int] = None) -> List[Process]:
    """
    Generate ``count`` random processes.

    Burst times fall in 1..10 and arrival times in 0..9. Processes are sorted
    by arrival time and PIDs are then assigned 1..count in that order.
    """
    if count <= 0:
        raise ValueError(f"Process count must be positive, got {count}")

    rng = random.Random(seed)
    drafts = [
        (rng.randint(MIN_ARRIVAL_TIME, MAX_ARRIVAL_TIME), rng.randint(MIN_BURST_TIME, MAX_BURST_TIME))
        for _ in range(count)
    ]
    drafts.sort(key=lambda d: d[0])

    return [
        Process(pid=index, arrival_time=arrival, burst_time=burst)
        for index, (arrival, burst) in enumerate(drafts, start=1)
    ]


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, list):
        raise ValueError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            processes.append(_process_from_mapping(row))
    return processes


def _lookup(mapping, field: str):
    for key in _ALIASES.get(field, (field,)):
        if key in mapping and mapping[key] not in (None, ""):
            return mapping[key]
    raise KeyError(field)


def _as_int(value):
    # CSV cells are strings; any other value reaches Process unchanged.
    if isinstance(value, str):
        return int(value.strip())
    return value


def _process_from_mapping(mapping) -> Process:
    try:
        pid = _as_int(_lookup(mapping, "pid"))
        arrival_time = _as_int(_lookup(mapping, "arrival_time"))
        burst_time = _as_int(_lookup(mapping, "burst_time"))
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid process entry: {mapping!r}") from exc

    return Process(pid=pid, arrival_time=arrival_time, burst_time=burst_time)
