from __future__ import annotations

from typing import List, Optional, Sequence

from .models import ScheduleSegment, TimelineUnit


def compress_level(trace: Sequence[TimelineUnit], level: int) -> List[ScheduleSegment]:
    """
    Merge consecutive units of the same process at ``level`` into segments.

    Units at other levels and idle units close the current segment.
    """
    segments: List[ScheduleSegment] = []
    start: Optional[int] = None
    current_pid = 0

    for t, unit in enumerate(trace):
        if unit.idle or unit.level != level:
            if start is not None:
                segments.append(ScheduleSegment(pid=current_pid, start_time=start, end_time=t))
                start = None
            continue

        if start is None:
            start, current_pid = t, unit.pid
        elif unit.pid != current_pid:
            segments.append(ScheduleSegment(pid=current_pid, start_time=start, end_time=t))
            start, current_pid = t, unit.pid

    if start is not None:
        segments.append(ScheduleSegment(pid=current_pid, start_time=start, end_time=len(trace)))

    return segments


def compress(trace: Sequence[TimelineUnit], levels: int = 1) -> List[List[ScheduleSegment]]:
    """
    Return one segment stream per priority level, level 1 first.
    """
    return [compress_level(trace, level) for level in range(1, levels + 1)]


def merge_streams(streams: Sequence[Sequence[ScheduleSegment]]) -> List[ScheduleSegment]:
    """
    Flatten per-level streams into a single time-ordered list.
    """
    merged = [segment for stream in streams for segment in stream]
    return sorted(merged, key=lambda s: (s.start_time, s.end_time))


def segments_for_pid(streams: Sequence[Sequence[ScheduleSegment]], pid: int) -> List[ScheduleSegment]:
    return [s for s in merge_streams(streams) if s.pid == pid]
