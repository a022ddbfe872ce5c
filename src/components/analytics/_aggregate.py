"""
Metrics aggregation - scalar summary statistics over playback events.

Key behaviors:
- Counts partitioned by event type
- Unique listeners = distinct session ids across all rows
- Rates and averages resolve to 0 instead of dividing by zero
- Growth compares two adjacent equal-length periods of the window
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import datetime, timedelta

from .models import EventType, PlaybackEvent, SummaryStats, Window, ensure_utc


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards positive infinity."""
    return math.floor(value + 0.5)


def percent_change(before: int, after: int) -> int:
    """Rounded percentage change; 0 when there is no baseline."""
    if before == 0:
        return 0
    return round_half_up((after - before) / before * 100)


def count_plays_between(
    events: Iterable[PlaybackEvent],
    start: datetime,
    end: datetime,
) -> int:
    """Count play events with start <= timestamp < end."""
    return sum(1 for e in events if e.is_play and start <= ensure_utc(e.timestamp) < end)


def compare_adjacent_periods(
    events: Iterable[PlaybackEvent],
    end: datetime,
    period: timedelta,
) -> tuple[int, int]:
    """
    Count plays in two adjacent periods of equal length ending at `end`.

    Returns (earlier, later) for [end - 2p, end - p) and [end - p, end).
    Overview growth and per-item trend both use this.
    """
    rows = list(events)
    boundary = end - period
    earlier = count_plays_between(rows, boundary - period, boundary)
    later = count_plays_between(rows, boundary, end)
    return earlier, later


def summarize(events: Iterable[PlaybackEvent], window: Window | None = None) -> SummaryStats:
    """
    Compute summary statistics for a list of events.

    Pure function of its input. Empty input yields all zeros.
    Growth is only computed when a window is given.
    """
    rows = list(events)

    counts = {event_type: 0 for event_type in EventType}
    sessions: set[str] = set()
    total_duration = 0.0

    for event in rows:
        counts[event.event_type] += 1
        sessions.add(event.session_id)
        if event.listen_duration_seconds is not None:
            total_duration += event.listen_duration_seconds

    plays = counts[EventType.PLAY]
    completes = counts[EventType.COMPLETE]

    average_listen_time = round_half_up(total_duration / plays) if plays > 0 else 0
    completion_rate = round_half_up(completes / plays * 100) if plays > 0 else 0

    growth = 0
    if window is not None:
        earlier, later = compare_adjacent_periods(rows, window.end, window.duration / 2)
        growth = percent_change(earlier, later)

    return SummaryStats(
        total_plays=plays,
        unique_listeners=len(sessions),
        average_listen_time=average_listen_time,
        growth_percent=growth,
        total_shares=counts[EventType.SHARE],
        total_downloads=counts[EventType.DOWNLOAD],
        total_completes=completes,
        completion_rate_percent=completion_rate,
    )
