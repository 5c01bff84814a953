# app/services/intervals.py
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, List, Tuple

from app.schemas.session import SessionInterval

Span = Tuple[datetime, datetime]


def clock_hour_bounds(reference: datetime, hour: int) -> Span:
    """
    Return `[hour:00:00.000, hour:59:59.999]` on the calendar day of `reference`.
    """
    start = reference.replace(hour=hour, minute=0, second=0, microsecond=0)
    end = start + timedelta(minutes=59, seconds=59, microseconds=999000)
    return start, end


def overlap_minutes(interval: SessionInterval, hour: int) -> float:
    """
    Minutes of `interval` falling inside the given clock hour.

    The hour is taken on the join day of the interval.
    """
    hour_start, hour_end = clock_hour_bounds(interval.join_time, hour)
    start = max(interval.join_time, hour_start)
    end = min(interval.leave_time, hour_end)
    if end <= start:
        return 0.0
    return (end - start).total_seconds() / 60.0


def union_spans(intervals: Iterable[SessionInterval]) -> List[SessionInterval]:
    """
    Collapse overlapping or touching intervals into disjoint ones.
    """
    ordered = sorted(intervals, key=lambda i: i.join_time)
    if not ordered:
        return []

    merged: List[SessionInterval] = []
    cur_start, cur_end = ordered[0].join_time, ordered[0].leave_time
    for interval in ordered[1:]:
        if interval.join_time <= cur_end:
            if interval.leave_time > cur_end:
                cur_end = interval.leave_time
        else:
            merged.append(SessionInterval(join_time=cur_start, leave_time=cur_end))
            cur_start, cur_end = interval.join_time, interval.leave_time
    merged.append(SessionInterval(join_time=cur_start, leave_time=cur_end))
    return merged


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up."""
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def round_to_nearest_hour(moment: datetime) -> int:
    """
    Clock hour nearest to `moment`: 30 minutes or more rounds up.

    Never wraps past midnight: 23:30 and later stay on hour 23.
    """
    if moment.minute >= 30:
        return min(moment.hour + 1, 23)
    return moment.hour


def format_clock(moment: datetime) -> str:
    return moment.strftime("%H:%M:%S")


def format_interval_list(intervals: Iterable[SessionInterval]) -> str:
    """`HH:MM:SS-HH:MM:SS` entries joined by `; `."""
    return "; ".join(
        f"{format_clock(i.join_time)}-{format_clock(i.leave_time)}" for i in intervals
    )
