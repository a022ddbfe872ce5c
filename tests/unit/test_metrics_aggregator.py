"""
Tests for summary statistics over playback events.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from src.components.analytics import (
    EventType,
    SummaryStats,
    Window,
    compare_adjacent_periods,
    count_plays_between,
    ensure_utc,
    percent_change,
    round_half_up,
    summarize,
)
from tests.factories import NOW, make_event

WEEK = Window(start=NOW - timedelta(days=7), duration=timedelta(days=7))


# --- Helpers ---


class TestRounding:
    """Half-up rounding used for every derived integer."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(76.666, 77), (33.333, 33), (2.5, 3), (0.49, 0), (-2.5, -2), (-66.67, -67)],
    )
    def test_round_half_up(self, value: float, expected: int) -> None:
        assert round_half_up(value) == expected


class TestPercentChange:
    def test_no_baseline_is_zero(self) -> None:
        assert percent_change(0, 12) == 0

    def test_increase(self) -> None:
        assert percent_change(2, 3) == 50

    def test_decrease_to_zero(self) -> None:
        assert percent_change(4, 0) == -100

    def test_rounded(self) -> None:
        assert percent_change(3, 1) == -67


class TestEnsureUtc:
    def test_naive_taken_as_utc(self) -> None:
        ts = datetime(2024, 6, 1, 10, 0)  # noqa: DTZ001
        assert ensure_utc(ts) == datetime(2024, 6, 1, 10, 0, tzinfo=UTC)

    def test_offset_converted(self) -> None:
        ts = datetime(2024, 6, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        assert ensure_utc(ts).tzinfo == UTC
        assert ensure_utc(ts) == datetime(2024, 6, 1, 10, 0, tzinfo=UTC)


# --- Summary ---


class TestSummarize:
    """Scalar summary statistics."""

    def test_end_to_end_scenario(self) -> None:
        """Three plays (30s, 200s, no duration), one complete, one share, two sessions."""
        events = [
            make_event(session_id="s1", duration=30),
            make_event(session_id="s1", duration=200),
            make_event(session_id="s2"),
            make_event(event_type=EventType.COMPLETE, session_id="s1"),
            make_event(event_type=EventType.SHARE, session_id="s2"),
        ]

        stats = summarize(events)

        assert stats.total_plays == 3
        assert stats.unique_listeners == 2
        assert stats.average_listen_time == 77
        assert stats.completion_rate_percent == 33
        assert stats.total_shares == 1
        assert stats.total_downloads == 0
        assert stats.total_completes == 1

    def test_empty_input_is_all_zeros(self) -> None:
        assert summarize([]) == SummaryStats()
        assert summarize([], WEEK) == SummaryStats()

    def test_no_plays_gives_zero_rates(self) -> None:
        """Rates divide by plays; zero plays resolves to zero, not an error."""
        events = [
            make_event(event_type=EventType.COMPLETE, duration=50),
            make_event(event_type=EventType.DOWNLOAD),
        ]

        stats = summarize(events)

        assert stats.total_plays == 0
        assert stats.average_listen_time == 0
        assert stats.completion_rate_percent == 0
        assert stats.total_downloads == 1
        assert stats.unique_listeners == 1

    def test_completion_rate_not_clamped(self) -> None:
        """More completes than plays reports above 100."""
        events = [
            make_event(),
            make_event(event_type=EventType.COMPLETE),
            make_event(event_type=EventType.COMPLETE),
        ]

        assert summarize(events).completion_rate_percent == 200

    def test_listeners_count_sessions_across_all_types(self) -> None:
        events = [
            make_event(session_id="a"),
            make_event(event_type=EventType.SHARE, session_id="b"),
            make_event(event_type=EventType.DOWNLOAD, session_id="c"),
        ]

        assert summarize(events).unique_listeners == 3

    def test_deterministic(self) -> None:
        events = [make_event(session_id=f"s{i}", duration=i * 10) for i in range(5)]
        assert summarize(events, WEEK) == summarize(list(events), WEEK)

    def test_growth_zero_without_window(self) -> None:
        events = [make_event(timestamp=NOW - timedelta(hours=1))]
        assert summarize(events).growth_percent == 0

    def test_naive_window_taken_as_utc(self) -> None:
        start = datetime(2024, 6, 5, 12, 0)  # noqa: DTZ001
        window = Window(start=start, duration=timedelta(days=7))
        events = [
            make_event(timestamp=datetime(2024, 6, 11, 12, 0)),  # noqa: DTZ001
            make_event(timestamp=datetime(2024, 6, 6, 12, 0, tzinfo=UTC)),
            make_event(timestamp=datetime(2024, 6, 10, 12, 0, tzinfo=UTC)),
        ]

        stats = summarize(events, window)

        assert window.start == datetime(2024, 6, 5, 12, 0, tzinfo=UTC)
        assert stats.total_plays == 3
        assert stats.growth_percent == 100


class TestGrowth:
    """Growth compares the two halves of the window."""

    def test_growth_between_halves(self) -> None:
        first_half = WEEK.start + timedelta(days=1)
        second_half = WEEK.midpoint + timedelta(days=1)
        events = [make_event(timestamp=first_half) for _ in range(2)] + [
            make_event(timestamp=second_half) for _ in range(3)
        ]

        assert summarize(events, WEEK).growth_percent == 50

    def test_growth_zero_when_first_half_empty(self) -> None:
        events = [make_event(timestamp=WEEK.midpoint + timedelta(hours=1)) for _ in range(4)]
        assert summarize(events, WEEK).growth_percent == 0

    def test_growth_negative(self) -> None:
        events = [make_event(timestamp=WEEK.start + timedelta(hours=1)) for _ in range(4)]
        assert summarize(events, WEEK).growth_percent == -100

    def test_midpoint_belongs_to_second_half(self) -> None:
        events = [
            make_event(timestamp=WEEK.midpoint - timedelta(microseconds=1)),
            make_event(timestamp=WEEK.midpoint),
            make_event(timestamp=WEEK.midpoint + timedelta(hours=1)),
        ]
        # 1 before, 2 after
        assert summarize(events, WEEK).growth_percent == 100

    def test_only_plays_count_towards_growth(self) -> None:
        events = [
            make_event(timestamp=WEEK.start + timedelta(hours=1)),
            make_event(timestamp=WEEK.midpoint + timedelta(hours=1)),
            make_event(event_type=EventType.SHARE, timestamp=WEEK.midpoint + timedelta(hours=2)),
        ]
        assert summarize(events, WEEK).growth_percent == 0


class TestAdjacentPeriods:
    def test_half_open_periods(self) -> None:
        period = timedelta(days=7)
        events = [
            make_event(timestamp=NOW - 2 * period),  # first instant of earlier period
            make_event(timestamp=NOW - period),  # first instant of later period
            make_event(timestamp=NOW),  # excluded
        ]

        assert compare_adjacent_periods(events, NOW, period) == (1, 1)

    def test_count_plays_between_ignores_other_types(self) -> None:
        events = [make_event(), make_event(event_type=EventType.COMPLETE)]
        assert count_plays_between(events, NOW, NOW + timedelta(seconds=1)) == 1
