from schedsim.algorithms import run_algorithm
from schedsim.gantt import build_rich_gantt, level_title, render_gantt, time_axis
from schedsim.models import IDLE, Process, ScheduleSegment, TimelineUnit
from schedsim.timeline import compress, compress_level, merge_streams, segments_for_pid


def _units(*pairs):
    return [TimelineUnit(pid=pid, level=level) if pid else IDLE for pid, level in pairs]


def test_compress_merges_consecutive_units():
    trace = _units((1, 1), (1, 1), (2, 1), (2, 1), (2, 1), (1, 1))
    assert compress(trace) == [[
        ScheduleSegment(1, 0, 2),
        ScheduleSegment(2, 2, 5),
        ScheduleSegment(1, 5, 6),
    ]]


def test_idle_units_split_segments_and_produce_none():
    trace = _units((0, 0), (1, 1), (0, 0), (1, 1), (0, 0))
    assert compress_level(trace, 1) == [ScheduleSegment(1, 1, 2), ScheduleSegment(1, 3, 4)]


def test_level_change_splits_same_pid():
    trace = _units((1, 1), (1, 2), (1, 2), (1, 3))
    assert compress(trace, levels=3) == [
        [ScheduleSegment(1, 0, 1)],
        [ScheduleSegment(1, 1, 3)],
        [ScheduleSegment(1, 3, 4)],
    ]


def test_empty_trace():
    assert compress([], levels=3) == [[], [], []]


def test_merge_streams_and_segments_for_pid():
    streams = [
        [ScheduleSegment(1, 0, 2), ScheduleSegment(2, 6, 8)],
        [ScheduleSegment(1, 2, 6)],
        [ScheduleSegment(1, 8, 12)],
    ]
    assert [s.start_time for s in merge_streams(streams)] == [0, 2, 6, 8]
    assert [s.duration for s in segments_for_pid(streams, 1)] == [2, 4, 4]


def test_level_titles():
    assert level_title(1, 1) == "CPU"
    assert level_title(1, 3) == "Queue 1 (Highest Priority)"
    assert level_title(2, 3) == "Queue 2"
    assert level_title(3, 3) == "Queue 3 (Lowest Priority)"


def test_time_axis():
    assert time_axis(3) == "0  1  2  3"


def test_render_gantt_plain():
    res = run_algorithm("fifo", [Process(1, 0, 2), Process(2, 3, 1)])
    chart = render_gantt(res.segments, res.total_time)
    assert chart.splitlines() == [
        "Gantt Chart:",
        "CPU |P1==== . P2=|",
        "    0  1  2  3  4",
    ]


def test_render_gantt_one_row_per_level():
    res = run_algorithm("mlfq", [Process(1, 0, 4)], quantum=1)
    rows = render_gantt(res.segments, res.total_time).splitlines()
    assert len(rows) == 5
    assert rows[1].startswith("Queue 1 (Highest Priority) |P1=")
    assert rows[3].startswith("Queue 3 (Lowest Priority)  |")


def test_render_gantt_without_execution():
    assert render_gantt([[]], 0) == "(no execution)"


def test_build_rich_gantt():
    res = run_algorithm("rr", [Process(1, 0, 4), Process(2, 1, 2)], quantum=2)
    panel, marks = build_rich_gantt(res)
    assert panel.title == "RR Gantt Chart"
    assert marks == time_axis(6)
