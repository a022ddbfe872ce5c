"""
Tests for per-item ranking and trend.
"""

from __future__ import annotations

from datetime import timedelta

from src.components.analytics import (
    ContentItem,
    EventType,
    Window,
    compute_trend,
    group_by_item,
    rank_items,
)
from tests.factories import NOW, OWNER, make_event

MONTH = Window(start=NOW - timedelta(days=30), duration=timedelta(days=30))


def plays(item_id: str, count: int, days_ago: float = 1) -> list:
    ts = NOW - timedelta(days=days_ago)
    return [make_event(content_item_id=item_id, timestamp=ts, session_id=f"{item_id}-{i}") for i in range(count)]


class TestRankItems:
    """Ranking by total plays."""

    def test_stable_descending_sort(self) -> None:
        """A(10), B(10), C(5) in that order stays [A, B, C]."""
        items = [
            ContentItem(id="A", title="A", owner_id=OWNER),
            ContentItem(id="B", title="B", owner_id=OWNER),
            ContentItem(id="C", title="C", owner_id=OWNER),
        ]
        events = plays("C", 5) + plays("B", 10) + plays("A", 10)

        ranked = rank_items(items, events, MONTH, NOW)

        assert [r.content_item_id for r in ranked] == ["A", "B", "C"]
        assert [r.rank for r in ranked] == [1, 2, 3]
        assert [r.summary.total_plays for r in ranked] == [10, 10, 5]

    def test_ties_follow_item_order_not_event_order(self) -> None:
        items = [
            ContentItem(id="B", title="B", owner_id=OWNER),
            ContentItem(id="A", title="A", owner_id=OWNER),
        ]
        events = plays("A", 3) + plays("B", 3)

        ranked = rank_items(items, events, MONTH, NOW)

        assert [r.content_item_id for r in ranked] == ["B", "A"]

    def test_items_without_events_included(self) -> None:
        items = [
            ContentItem(id="quiet", title="Quiet", owner_id=OWNER),
            ContentItem(id="busy", title="Busy", owner_id=OWNER),
        ]

        ranked = rank_items(items, plays("busy", 2), MONTH, NOW)

        assert [r.content_item_id for r in ranked] == ["busy", "quiet"]
        assert ranked[1].summary.total_plays == 0
        assert ranked[1].trend == "stable"

    def test_summary_uses_window_rows_only(self) -> None:
        items = [ContentItem(id="A", title="Episode A", owner_id=OWNER)]
        events = plays("A", 2, days_ago=1) + plays("A", 4, days_ago=45)

        ranked = rank_items(items, events, MONTH, NOW)

        assert ranked[0].summary.total_plays == 2
        assert ranked[0].title == "Episode A"

    def test_per_item_rates(self) -> None:
        items = [ContentItem(id="A", title="A", owner_id=OWNER)]
        events = plays("A", 4) + [
            make_event(content_item_id="A", event_type=EventType.COMPLETE, timestamp=NOW - timedelta(days=1))
        ]

        ranked = rank_items(items, events, MONTH, NOW)

        assert ranked[0].summary.completion_rate_percent == 25
        assert ranked[0].summary.total_completes == 1

    def test_naive_window_and_now(self) -> None:
        naive_now = NOW.replace(tzinfo=None)
        window = Window(start=naive_now - timedelta(days=30), duration=timedelta(days=30))
        items = [ContentItem(id="A", title="A", owner_id=OWNER)]
        events = [
            make_event(content_item_id="A", timestamp=naive_now - timedelta(days=1)),
            make_event(content_item_id="A", timestamp=naive_now - timedelta(days=40)),
        ]

        ranked = rank_items(items, events, window, naive_now)

        assert ranked[0].summary.total_plays == 1
        assert ranked[0].trend == "up"


class TestTrend:
    """Week-over-week trend."""

    def test_up(self) -> None:
        events = plays("A", 3, days_ago=2) + plays("A", 1, days_ago=10)
        assert compute_trend(events, NOW) == "up"

    def test_down(self) -> None:
        events = plays("A", 1, days_ago=2) + plays("A", 3, days_ago=10)
        assert compute_trend(events, NOW) == "down"

    def test_stable_when_equal(self) -> None:
        events = plays("A", 2, days_ago=2) + plays("A", 2, days_ago=10)
        assert compute_trend(events, NOW) == "stable"

    def test_stable_when_no_plays(self) -> None:
        assert compute_trend([], NOW) == "stable"

    def test_older_rows_ignored(self) -> None:
        events = plays("A", 5, days_ago=20)
        assert compute_trend(events, NOW) == "stable"

    def test_boundary_at_seven_days(self) -> None:
        """A play exactly 7 days ago is in the previous period."""
        events = plays("A", 1, days_ago=7)
        assert compute_trend(events, NOW) == "down"

    def test_custom_period(self) -> None:
        events = plays("A", 1, days_ago=2)
        assert compute_trend(events, NOW, trend_days=1) == "down"
        assert compute_trend(events, NOW, trend_days=3) == "up"


class TestGroupByItem:
    def test_groups_preserve_order(self) -> None:
        events = plays("A", 2) + plays("B", 1)
        grouped = group_by_item(events)
        assert list(grouped) == ["A", "B"]
        assert len(grouped["A"]) == 2
