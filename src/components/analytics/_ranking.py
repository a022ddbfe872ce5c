"""
Per-item ranking.

Computes summary stats per content item, a week-over-week trend, and a
stable ranking by total plays.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta

from ._aggregate import compare_adjacent_periods, ensure_utc, summarize
from .models import ContentItem, PerItemStats, PlaybackEvent, Trend, Window

DEFAULT_TREND_DAYS = 7


def compute_trend(
    events: Iterable[PlaybackEvent],
    now: datetime,
    trend_days: int = DEFAULT_TREND_DAYS,
) -> Trend:
    """
    Compare plays in [now - d, now) against [now - 2d, now - d).

    'up' if the trailing period is strictly greater, 'down' if strictly less.
    """
    previous, current = compare_adjacent_periods(events, ensure_utc(now), timedelta(days=trend_days))
    if current > previous:
        return "up"
    if current < previous:
        return "down"
    return "stable"


def group_by_item(events: Iterable[PlaybackEvent]) -> dict[str, list[PlaybackEvent]]:
    """Group events by content item id."""
    grouped: dict[str, list[PlaybackEvent]] = {}
    for event in events:
        grouped.setdefault(event.content_item_id, []).append(event)
    return grouped


def rank_items(
    items: Sequence[ContentItem],
    events: Iterable[PlaybackEvent],
    window: Window,
    now: datetime,
    trend_days: int = DEFAULT_TREND_DAYS,
) -> tuple[PerItemStats, ...]:
    """
    Build ranked per-item stats.

    Summary stats use the rows inside `window`; the trend uses every row
    supplied for the item. Items are sorted by total plays descending with
    ties kept in enumeration order (sorted() is stable).
    """
    grouped = group_by_item(events)

    unranked = []
    for item in items:
        rows = grouped.get(item.id, [])
        in_window = [e for e in rows if window.contains(ensure_utc(e.timestamp))]
        unranked.append(
            (
                item,
                summarize(in_window, window),
                compute_trend(rows, now, trend_days),
            )
        )

    ordered = sorted(unranked, key=lambda x: x[1].total_plays, reverse=True)

    return tuple(
        PerItemStats(
            content_item_id=item.id,
            title=item.title,
            rank=position,
            summary=summary,
            trend=trend,
        )
        for position, (item, summary, trend) in enumerate(ordered, start=1)
    )
