"""
Engagement segmentation and audience breakdowns.

Sessions are classified by their summed listen duration. Only segments with
members are emitted, unlike the time series which zero-fills.
"""

from __future__ import annotations

from collections.abc import Iterable

from ._aggregate import ensure_utc
from .models import DimensionCount, EngagementSegment, HourlyActivityPoint, PlaybackEvent

# (name, inclusive lower bound in seconds), ascending
DEFAULT_SEGMENT_BOUNDS: tuple[tuple[str, float], ...] = (
    ("Quick (<1m)", 0),
    ("Short (1-5m)", 60),
    ("Medium (5-15m)", 300),
    ("Long (15m+)", 900),
)

UNKNOWN = "Unknown"


def session_durations(events: Iterable[PlaybackEvent]) -> dict[str, float]:
    """
    Sum listen duration per session.

    Rows without a duration contribute nothing and do not create a session.
    """
    totals: dict[str, float] = {}
    for event in events:
        if event.listen_duration_seconds is None:
            continue
        totals[event.session_id] = totals.get(event.session_id, 0.0) + event.listen_duration_seconds
    return totals


def classify_duration(
    seconds: float,
    bounds: tuple[tuple[str, float], ...] = DEFAULT_SEGMENT_BOUNDS,
) -> str:
    """Return the segment whose range [lower, next lower) contains `seconds`."""
    name = bounds[0][0]
    for segment_name, lower in bounds:
        if seconds >= lower:
            name = segment_name
        else:
            break
    return name


def segment_sessions(
    events: Iterable[PlaybackEvent],
    bounds: tuple[tuple[str, float], ...] = DEFAULT_SEGMENT_BOUNDS,
) -> tuple[EngagementSegment, ...]:
    """Count sessions per engagement segment, omitting empty segments."""
    counts = {name: 0 for name, _ in bounds}
    for total in session_durations(events).values():
        counts[classify_duration(total, bounds)] += 1

    return tuple(
        EngagementSegment(name=name, value=value) for name, value in counts.items() if value > 0
    )


def count_by_dimension(
    events: Iterable[PlaybackEvent],
    attr: str,
    limit: int | None = None,
) -> tuple[DimensionCount, ...]:
    """
    Count events per value of `attr` (country, device_type).

    Missing values count as 'Unknown'. Sorted by count descending; ties keep
    first-seen order.
    """
    counts: dict[str, int] = {}
    for event in events:
        value = getattr(event, attr) or UNKNOWN
        counts[value] = counts.get(value, 0) + 1

    ranked = sorted(counts.items(), key=lambda x: x[1], reverse=True)
    if limit is not None:
        ranked = ranked[:limit]

    return tuple(DimensionCount(name=name, value=value) for name, value in ranked)


def hourly_activity(events: Iterable[PlaybackEvent]) -> tuple[HourlyActivityPoint, ...]:
    """Plays per hour of day (UTC), all 24 hours present."""
    hours = [0] * 24
    for event in events:
        if event.is_play:
            hours[ensure_utc(event.timestamp).hour] += 1

    return tuple(
        HourlyActivityPoint(hour_label=f"{hour:02d}:00", plays=plays)
        for hour, plays in enumerate(hours)
    )
