import json
from pathlib import Path

import pytest

from schedsim.errors import InvalidProcess
from schedsim.models import Process
from schedsim.workload_io import generate_processes, load_workload, save_workload


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":1,"arrival_time":0,"burst_time":3},'
                 '{"pid":2,"arrival_time":1,"burst_time":2}]')
    procs = load_workload(p)
    assert isinstance(procs[0], Process)
    assert procs[1] == Process(2, arrival_time=1, burst_time=2)


def test_load_json_camel_case_keys(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":1,"arrivalTime":4,"burstTime":6}]')
    assert load_workload(p) == [Process(1, arrival_time=4, burst_time=6)]


def test_load_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time\n1,0,3\n2,1,2\n")
    procs = load_workload(p)
    assert procs[0].pid == 1
    assert procs[1].burst_time == 2


def test_load_rejects_unknown_suffix(tmp_path: Path):
    p = tmp_path / "w.txt"
    p.write_text("")
    with pytest.raises(ValueError, match="Unsupported workload format"):
        load_workload(p)


def test_load_rejects_missing_field(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time\n1,0\n")
    with pytest.raises(ValueError, match="Invalid process entry"):
        load_workload(p)


def test_load_rejects_non_list_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('{"pid": 1}')
    with pytest.raises(ValueError, match="must be a list"):
        load_workload(p)


def test_load_rejects_zero_burst(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time\n1,0,0\n")
    with pytest.raises(InvalidProcess):
        load_workload(p)


def test_save_then_load(tmp_path: Path):
    procs = [Process(1, arrival_time=0, burst_time=3), Process(2, arrival_time=5, burst_time=1)]
    path = save_workload(procs, tmp_path / "out.json")
    assert json.loads(path.read_text())[1] == {"pid": 2, "arrival_time": 5, "burst_time": 1}
    assert load_workload(path) == procs


def test_generate_processes_ranges_and_pids():
    procs = generate_processes(50, seed=7)
    assert [p.pid for p in procs] == list(range(1, 51))
    assert all(1 <= p.burst_time <= 10 for p in procs)
    assert all(0 <= p.arrival_time <= 9 for p in procs)
    arrivals = [p.arrival_time for p in procs]
    assert arrivals == sorted(arrivals)


def test_generate_processes_is_seeded():
    assert generate_processes(8, seed=42) == generate_processes(8, seed=42)


def test_generate_processes_rejects_non_positive_count():
    with pytest.raises(ValueError):
        generate_processes(0)


@pytest.mark.parametrize(
    "entry",
    [
        '{"pid":1,"arrival_time":0.9,"burst_time":2.7}',
        '{"pid":true,"arrival_time":0,"burst_time":3}',
        '{"pid":1,"arrival_time":0,"burst_time":"2.7"}',
    ],
)
def test_load_json_rejects_non_integer_values(tmp_path: Path, entry):
    p = tmp_path / "w.json"
    p.write_text(f"[{entry}]")
    with pytest.raises(ValueError):
        load_workload(p)


def test_load_json_accepts_integer_strings(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":"1","arrival_time":" 2","burst_time":"3"}]')
    assert load_workload(p) == [Process(1, arrival_time=2, burst_time=3)]
