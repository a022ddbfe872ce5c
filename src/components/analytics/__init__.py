"""
Analytics component - Playback event aggregation for the podcast dashboard.
"""

from ._aggregate import (
    compare_adjacent_periods,
    count_plays_between,
    ensure_utc,
    percent_change,
    round_half_up,
    summarize,
)
from ._ranking import compute_trend, group_by_item, rank_items
from ._segments import (
    DEFAULT_SEGMENT_BOUNDS,
    classify_duration,
    count_by_dimension,
    hourly_activity,
    segment_sessions,
    session_durations,
)
from ._sequence import DashboardState, RequestSequencer
from ._timeseries import (
    bin_time_series,
    bucket_label,
    bucket_step,
    buckets_for_days,
    calculate_bucket_start,
)
from .component import (
    DEFAULT_TIME_RANGES,
    AnalyticsConfig,
    DefaultTimePort,
    resolve_window,
    run,
    run_audience,
    run_item_performance,
    run_overview,
)
from .models import (
    AnalyticsError,
    AudienceOutput,
    BucketType,
    ContentItem,
    DimensionCount,
    EngagementSegment,
    EventStoreError,
    EventType,
    HourlyActivityPoint,
    InvalidTimeRangeError,
    OverviewOutput,
    PerformanceOutput,
    PerItemStats,
    PlaybackEvent,
    QueryAudienceInput,
    QueryOverviewInput,
    QueryPerformanceInput,
    ResultStatus,
    SummaryStats,
    TimeSeriesPoint,
    Trend,
    Window,
)
from .ports import (
    AnalyticsRulesPort,
    ContentItemPort,
    EventStorePort,
    TimePort,
)

__all__ = [
    # Entry points
    "run",
    "run_audience",
    "run_item_performance",
    "run_overview",
    "resolve_window",
    # Input models
    "QueryAudienceInput",
    "QueryOverviewInput",
    "QueryPerformanceInput",
    # Domain / output models
    "AnalyticsError",
    "AudienceOutput",
    "BucketType",
    "ContentItem",
    "DimensionCount",
    "EngagementSegment",
    "EventType",
    "HourlyActivityPoint",
    "OverviewOutput",
    "PerformanceOutput",
    "PerItemStats",
    "PlaybackEvent",
    "ResultStatus",
    "SummaryStats",
    "TimeSeriesPoint",
    "Trend",
    "Window",
    # Errors
    "EventStoreError",
    "InvalidTimeRangeError",
    # Ports
    "AnalyticsRulesPort",
    "ContentItemPort",
    "EventStorePort",
    "TimePort",
    # Config
    "AnalyticsConfig",
    "DEFAULT_SEGMENT_BOUNDS",
    "DEFAULT_TIME_RANGES",
    "DefaultTimePort",
    # Pure functions
    "bin_time_series",
    "bucket_label",
    "bucket_step",
    "buckets_for_days",
    "calculate_bucket_start",
    "classify_duration",
    "compare_adjacent_periods",
    "compute_trend",
    "count_by_dimension",
    "count_plays_between",
    "ensure_utc",
    "group_by_item",
    "hourly_activity",
    "percent_change",
    "rank_items",
    "round_half_up",
    "segment_sessions",
    "session_durations",
    "summarize",
    # Request sequencing
    "DashboardState",
    "RequestSequencer",
]
