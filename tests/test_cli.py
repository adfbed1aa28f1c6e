import json
from pathlib import Path

from schedsim.cli import build_parser, main


def _workload(tmp_path: Path) -> Path:
    p = tmp_path / "w.json"
    p.write_text(json.dumps([
        {"pid": 1, "arrival_time": 0, "burst_time": 5},
        {"pid": 2, "arrival_time": 1, "burst_time": 3},
        {"pid": 3, "arrival_time": 2, "burst_time": 1},
    ]))
    return p


def test_parser_defaults():
    args = build_parser().parse_args(["compare", "-n", "4"])
    assert args.algorithms == ["fifo", "sjf", "stcf", "rr", "mlfq"]
    assert args.quantum == 4
    assert args.processes == 4
    assert not args.sequential


def test_run_plain(tmp_path: Path, capsys):
    assert main(["run", "-a", "fifo", "-w", str(_workload(tmp_path)), "--plain"]) == 0
    out = capsys.readouterr().out
    assert "Algorithm: FIFO" in out
    assert "Gantt Chart:" in out
    assert "Per-process metrics" in out


def test_run_mlfq_rich(tmp_path: Path, capsys):
    assert main(["run", "-a", "mlfq", "-q", "1", "-w", str(_workload(tmp_path))]) == 0
    out = capsys.readouterr().out
    assert "MLFQ Gantt Chart" in out
    assert "Queue 3 (Lowest Priority)" in out


def test_run_generated_workload(capsys):
    assert main(["run", "-a", "stcf", "-n", "6", "--seed", "3"]) == 0
    assert "Workload" in capsys.readouterr().out


def test_run_with_step(tmp_path: Path, capsys):
    assert main(["run", "-a", "rr", "-q", "2", "-w", str(_workload(tmp_path)), "--step", "--step-delay", "0"]) == 0
    out = capsys.readouterr().out
    assert "Simulating RR" in out
    assert "t= 0: P1" in out


def test_compare(tmp_path: Path, capsys):
    assert main(["compare", "-w", str(_workload(tmp_path)), "-q", "2", "--sequential"]) == 0
    out = capsys.readouterr().out
    assert "Algorithm comparison" in out
    for name in ("FIFO", "SJF", "STCF", "RR", "MLFQ"):
        assert name in out


def test_invalid_quantum_reports_error(tmp_path: Path, capsys):
    assert main(["run", "-a", "rr", "-q", "0", "-w", str(_workload(tmp_path))]) == 1
    assert "Error:" in capsys.readouterr().out


def test_time_bound_reports_error(tmp_path: Path, capsys):
    assert main(["run", "-a", "fifo", "--max-time", "3", "-w", str(_workload(tmp_path))]) == 1
    assert "time bound" in capsys.readouterr().out


def test_generate_writes_workload(tmp_path: Path, capsys):
    out_path = tmp_path / "gen.json"
    assert main(["generate", "-n", "7", "--seed", "1", "-o", str(out_path)]) == 0
    data = json.loads(out_path.read_text())
    assert [entry["pid"] for entry in data] == list(range(1, 8))
