"""
Analytics component - Playback event aggregation for the podcast dashboard.

Turns raw playback events into summary statistics, chart series, engagement
segments, audience breakdowns and a ranked per-episode table.

Invariants:
- I1: Every view output is populated, empty, or error; never inferred from zeros
- I2: Store failures are logged and surfaced as error, never retried here
- I3: Rates and averages resolve to 0 on division by zero
- I4: Time series cover every bucket of the window exactly once
- I5: Bucket boundaries are computed in UTC
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from ._aggregate import ensure_utc, summarize
from ._ranking import DEFAULT_TREND_DAYS, rank_items
from ._segments import (
    DEFAULT_SEGMENT_BOUNDS,
    count_by_dimension,
    hourly_activity,
    segment_sessions,
)
from ._timeseries import bin_time_series, buckets_for_days
from .models import (
    AnalyticsError,
    AudienceOutput,
    ContentItem,
    EventStoreError,
    InvalidTimeRangeError,
    OverviewOutput,
    PerformanceOutput,
    PlaybackEvent,
    QueryAudienceInput,
    QueryOverviewInput,
    QueryPerformanceInput,
    ResultStatus,
    Window,
)
from .ports import (
    AnalyticsRulesPort,
    ContentItemPort,
    EventStorePort,
    TimePort,
)

logger = logging.getLogger(__name__)


# --- Configuration ---

DEFAULT_TIME_RANGES: dict[str, int] = {"7d": 7, "30d": 30, "90d": 90}
DEFAULT_COUNTRY_LIMIT = 6


@dataclass(frozen=True)
class AnalyticsConfig:
    """Analytics configuration resolved from rules."""

    time_ranges: tuple[tuple[str, int], ...] = tuple(DEFAULT_TIME_RANGES.items())
    trend_days: int = DEFAULT_TREND_DAYS
    country_limit: int = DEFAULT_COUNTRY_LIMIT
    segment_bounds: tuple[tuple[str, float], ...] = DEFAULT_SEGMENT_BOUNDS


def _build_config(rules: AnalyticsRulesPort | None) -> AnalyticsConfig:
    """Build analytics config from rules port."""
    if rules is None:
        return AnalyticsConfig()

    return AnalyticsConfig(
        time_ranges=tuple(rules.get_time_ranges().items()),
        trend_days=rules.get_trend_days(),
        country_limit=rules.get_country_limit(),
        segment_bounds=rules.get_segment_bounds(),
    )


class DefaultTimePort:
    """Default time provider."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        return datetime.now(UTC)


# --- Pure Functions ---


def resolve_window(
    time_range: str,
    now: datetime,
    time_ranges: dict[str, int] | None = None,
) -> Window:
    """
    Map a time range selector to a window ending at `now`.

    Raises InvalidTimeRangeError for unrecognised selectors.
    """
    ranges = time_ranges if time_ranges is not None else DEFAULT_TIME_RANGES
    if time_range not in ranges:
        raise InvalidTimeRangeError(time_range, tuple(ranges))

    duration = timedelta(days=ranges[time_range])
    return Window(start=ensure_utc(now) - duration, duration=duration)


def _store_error(exc: Exception) -> AnalyticsError:
    return AnalyticsError(code="store_query_failed", message=str(exc) or type(exc).__name__)


def _list_owned(
    items: ContentItemPort,
    owner_id: str,
) -> tuple[list[ContentItem] | None, list[AnalyticsError]]:
    """List the owner's content items, converting failures into an error list."""
    try:
        return items.list_items(owner_id), []
    except EventStoreError as exc:
        logger.exception("Content item query failed for owner %s", owner_id)
        return None, [_store_error(exc)]


def _fetch(
    store: EventStorePort,
    items: list[ContentItem],
    since: datetime | None,
    until: datetime | None,
    view: str,
) -> tuple[list[PlaybackEvent] | None, list[AnalyticsError]]:
    """Query the store, converting failures into an error list."""
    try:
        events = store.query_events(
            content_item_ids=[item.id for item in items],
            since=since,
            until=until,
        )
    except EventStoreError as exc:
        logger.exception("Event store query failed for %s view", view)
        return None, [_store_error(exc)]
    logger.debug("%s view fetched %d events for %d items", view, len(events), len(items))
    return events, []


# --- Component Entry Points ---


def run_overview(
    inp: QueryOverviewInput,
    *,
    store: EventStorePort,
    items: ContentItemPort,
    time_port: TimePort | None = None,
    rules: AnalyticsRulesPort | None = None,
) -> OverviewOutput:
    """
    Overview view: summary stats and chart series for the selected window.

    Args:
        inp: Owner, time range selector and bucket type.
        store: Event store port.
        items: Content item port.
        time_port: Optional time port.
        rules: Optional rules port for configuration.

    Returns:
        OverviewOutput with status populated, empty, or error.

    Raises:
        InvalidTimeRangeError: if the time range selector is not configured.
    """
    config = _build_config(rules)
    now = (time_port or DefaultTimePort()).now_utc()
    window = resolve_window(inp.time_range, now, dict(config.time_ranges))

    owned, errors = _list_owned(items, inp.owner_id)
    if owned is None:
        return OverviewOutput(status=ResultStatus.ERROR, window=window, errors=errors)
    if not owned:
        return OverviewOutput(status=ResultStatus.EMPTY, window=window)

    events, errors = _fetch(store, owned, window.start, window.end, "overview")
    if events is None:
        return OverviewOutput(status=ResultStatus.ERROR, window=window, errors=errors)
    if not events:
        return OverviewOutput(status=ResultStatus.EMPTY, window=window)

    series = bin_time_series(
        events,
        start=window.start,
        length=buckets_for_days(window.days, inp.bucket_type),
        bucket_type=inp.bucket_type,
    )

    return OverviewOutput(
        status=ResultStatus.POPULATED,
        summary=summarize(events, window),
        time_series=series,
        window=window,
    )


def run_audience(
    inp: QueryAudienceInput,
    *,
    store: EventStorePort,
    items: ContentItemPort,
    time_port: TimePort | None = None,
    rules: AnalyticsRulesPort | None = None,
) -> AudienceOutput:
    """
    Audience view: countries, devices, hour-of-day activity, engagement segments.

    Uses the full event history unless a time range is given.
    """
    config = _build_config(rules)
    since = until = None
    if inp.time_range is not None:
        now = (time_port or DefaultTimePort()).now_utc()
        window = resolve_window(inp.time_range, now, dict(config.time_ranges))
        since, until = window.start, window.end

    owned, errors = _list_owned(items, inp.owner_id)
    if owned is None:
        return AudienceOutput(status=ResultStatus.ERROR, errors=errors)
    if not owned:
        return AudienceOutput(status=ResultStatus.EMPTY)

    events, errors = _fetch(store, owned, since, until, "audience")
    if events is None:
        return AudienceOutput(status=ResultStatus.ERROR, errors=errors)
    if not events:
        return AudienceOutput(status=ResultStatus.EMPTY)

    return AudienceOutput(
        status=ResultStatus.POPULATED,
        countries=count_by_dimension(events, "country", limit=config.country_limit),
        devices=count_by_dimension(events, "device_type"),
        hourly_activity=hourly_activity(events),
        engagement_segments=segment_sessions(events, config.segment_bounds),
    )


def run_item_performance(
    inp: QueryPerformanceInput,
    *,
    store: EventStorePort,
    items: ContentItemPort,
    time_port: TimePort | None = None,
    rules: AnalyticsRulesPort | None = None,
) -> PerformanceOutput:
    """
    Performance view: ranked per-episode stats with week-over-week trend.

    Fetches far enough back to cover both the window and two trend periods.
    """
    config = _build_config(rules)
    now = ensure_utc((time_port or DefaultTimePort()).now_utc())
    window = resolve_window(inp.time_range, now, dict(config.time_ranges))

    owned, errors = _list_owned(items, inp.owner_id)
    if owned is None:
        return PerformanceOutput(status=ResultStatus.ERROR, window=window, errors=errors)
    if not owned:
        return PerformanceOutput(status=ResultStatus.EMPTY, window=window)

    since = min(window.start, now - timedelta(days=2 * config.trend_days))
    events, errors = _fetch(store, owned, since, now, "performance")
    if events is None:
        return PerformanceOutput(status=ResultStatus.ERROR, window=window, errors=errors)
    if not events:
        return PerformanceOutput(status=ResultStatus.EMPTY, window=window)

    ranked = rank_items(owned, events, window, now, config.trend_days)

    return PerformanceOutput(status=ResultStatus.POPULATED, items=ranked, window=window)


def run(
    inp: QueryOverviewInput | QueryAudienceInput | QueryPerformanceInput,
    *,
    store: EventStorePort,
    items: ContentItemPort,
    time_port: TimePort | None = None,
    rules: AnalyticsRulesPort | None = None,
) -> OverviewOutput | AudienceOutput | PerformanceOutput:
    """
    Main entry point for the analytics component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, QueryOverviewInput):
        return run_overview(inp, store=store, items=items, time_port=time_port, rules=rules)
    elif isinstance(inp, QueryAudienceInput):
        return run_audience(inp, store=store, items=items, time_port=time_port, rules=rules)
    elif isinstance(inp, QueryPerformanceInput):
        return run_item_performance(
            inp, store=store, items=items, time_port=time_port, rules=rules
        )
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
