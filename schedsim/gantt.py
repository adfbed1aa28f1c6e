from __future__ import annotations

from typing import Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduleSegment, SimulationResult

COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]


def level_title(level: int, levels: int) -> str:
    if levels == 1:
        return "CPU"
    if level == 1:
        return f"Queue {level} (Highest Priority)"
    if level == levels:
        return f"Queue {level} (Lowest Priority)"
    return f"Queue {level}"


def pid_color(pid: int) -> str:
    return COLORS[(pid - 1) % len(COLORS)]


def time_axis(total_time: int) -> str:
    """
    Tick labels for 0..total_time, three characters per time unit.
    """
    marks = "0"
    for t in range(1, total_time + 1):
        marks += f"{t:>3}"
    return marks


def _plain_row(stream: Sequence[ScheduleSegment], total_time: int) -> str:
    row = ""
    last_time = 0
    for segment in stream:
        row += " . " * (segment.start_time - last_time)
        width = 3 * segment.duration
        row += f"P{segment.pid}"[:width].ljust(width, "=")
        last_time = segment.end_time
    return row + " . " * (total_time - last_time)


def render_gantt(streams: Sequence[Sequence[ScheduleSegment]], total_time: int) -> str:
    """
    Plain-text Gantt chart, one row per level. Idle units show as dots.
    """
    if total_time <= 0 or not any(streams):
        return "(no execution)"

    levels = len(streams)
    width = max(len(level_title(level, levels)) for level in range(1, levels + 1))
    lines = ["Gantt Chart:"]

    for level, stream in enumerate(streams, start=1):
        lines.append(f"{level_title(level, levels):<{width}} |{_plain_row(stream, total_time)}|")

    lines.append(" " * (width + 1) + time_axis(total_time))
    return "\n".join(lines)


def build_rich_gantt(result: SimulationResult) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart, one row per level,
    and a string with time marks.
    """
    if result.total_time <= 0 or not any(result.segments):
        panel = Panel("No execution", title=f"{result.algorithm} Gantt Chart")
        return panel, ""

    table = Table.grid(padding=(0, 1))
    table.add_column(justify="right", style="bold")
    table.add_column()

    for level, stream in enumerate(result.segments, start=1):
        timeline = Text()
        labels = Text()
        last_time = 0
        for segment in stream:
            idle_gap = segment.start_time - last_time
            if idle_gap > 0:
                timeline.append("   " * idle_gap)
                labels.append("   " * idle_gap)

            width = 3 * segment.duration
            timeline.append(" " * width, style=f"on {pid_color(segment.pid)}")
            labels.append(f"P{segment.pid}"[:width].ljust(width), style="bold")
            last_time = segment.end_time

        table.add_row(level_title(level, result.levels), timeline)
        table.add_row("", labels)

    panel = Panel.fit(table, title=f"{result.algorithm} Gantt Chart")
    return panel, time_axis(result.total_time)
