"""
Analytics component input/output models.

Covers playback events, windows, and the output shapes of the overview,
audience and performance views.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Literal

def ensure_utc(ts: datetime) -> datetime:
    """Normalize a timestamp to aware UTC. Naive values are taken as UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)


# --- Enums ---


class EventType(str, Enum):
    """Playback interaction types."""

    PLAY = "play"
    COMPLETE = "complete"
    SHARE = "share"
    DOWNLOAD = "download"


class BucketType(str, Enum):
    """Time-series bucket granularity."""

    HOUR = "hour"
    DAY = "day"


class ResultStatus(str, Enum):
    """Outcome of a view query."""

    POPULATED = "populated"
    EMPTY = "empty"
    ERROR = "error"


Trend = Literal["up", "down", "stable"]


# --- Errors ---


@dataclass(frozen=True)
class AnalyticsError:
    """Analytics error carried in view outputs."""

    code: str
    message: str


class InvalidTimeRangeError(ValueError):
    """Raised when a time range selector is not recognised."""

    def __init__(self, time_range: str, allowed: tuple[str, ...]) -> None:
        self.time_range = time_range
        self.allowed = allowed
        super().__init__(
            f"Invalid time range: {time_range!r}. Must be one of: {', '.join(allowed)}"
        )


class EventStoreError(RuntimeError):
    """Raised by event store adapters when a query cannot be completed."""


# --- Domain Models ---


@dataclass(frozen=True)
class PlaybackEvent:
    """One observed interaction with a content item. Immutable."""

    content_item_id: str
    event_type: EventType
    timestamp: datetime
    session_id: str
    listen_duration_seconds: float | None = None
    country: str | None = None
    device_type: str | None = None

    @property
    def is_play(self) -> bool:
        return self.event_type == EventType.PLAY


@dataclass(frozen=True)
class ContentItem:
    """A podcast episode owned by a user."""

    id: str
    title: str
    owner_id: str


@dataclass(frozen=True)
class Window:
    """Half-open time interval [start, end)."""

    start: datetime
    duration: timedelta

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", ensure_utc(self.start))

    @property
    def end(self) -> datetime:
        return self.start + self.duration

    @property
    def midpoint(self) -> datetime:
        return self.start + self.duration / 2

    @property
    def days(self) -> int:
        return self.duration.days

    def contains(self, ts: datetime) -> bool:
        return self.start <= ts < self.end


# --- Input Models ---


@dataclass(frozen=True)
class QueryOverviewInput:
    """Input for the overview view (summary stats plus daily series)."""

    owner_id: str
    time_range: str = "7d"
    bucket_type: BucketType = BucketType.DAY


@dataclass(frozen=True)
class QueryAudienceInput:
    """Input for the audience view."""

    owner_id: str
    time_range: str | None = None  # None = full history


@dataclass(frozen=True)
class QueryPerformanceInput:
    """Input for the per-episode performance view."""

    owner_id: str
    time_range: str = "30d"


# --- Output Models ---


@dataclass(frozen=True)
class SummaryStats:
    """Scalar summary statistics for a set of events."""

    total_plays: int = 0
    unique_listeners: int = 0
    average_listen_time: int = 0
    growth_percent: int = 0
    total_shares: int = 0
    total_downloads: int = 0
    total_completes: int = 0
    completion_rate_percent: int = 0


@dataclass(frozen=True)
class TimeSeriesPoint:
    """Single chart point for one bucket."""

    bucket_start: datetime
    bucket_label: str
    plays: int
    unique_listeners: int


@dataclass(frozen=True)
class EngagementSegment:
    """Sessions grouped by cumulative listen duration."""

    name: str
    value: int


@dataclass(frozen=True)
class DimensionCount:
    """Event count for one value of a dimension (country, device)."""

    name: str
    value: int


@dataclass(frozen=True)
class HourlyActivityPoint:
    """Play count for one hour of the day."""

    hour_label: str
    plays: int


@dataclass(frozen=True)
class PerItemStats:
    """Summary stats and trend for one content item."""

    content_item_id: str
    title: str
    rank: int
    summary: SummaryStats
    trend: Trend


@dataclass(frozen=True)
class OverviewOutput:
    """Output for the overview view."""

    status: ResultStatus
    summary: SummaryStats = field(default_factory=SummaryStats)
    time_series: tuple[TimeSeriesPoint, ...] = ()
    window: Window | None = None
    errors: list[AnalyticsError] = field(default_factory=list)


@dataclass(frozen=True)
class AudienceOutput:
    """Output for the audience view."""

    status: ResultStatus
    countries: tuple[DimensionCount, ...] = ()
    devices: tuple[DimensionCount, ...] = ()
    hourly_activity: tuple[HourlyActivityPoint, ...] = ()
    engagement_segments: tuple[EngagementSegment, ...] = ()
    errors: list[AnalyticsError] = field(default_factory=list)


@dataclass(frozen=True)
class PerformanceOutput:
    """Output for the per-episode performance view."""

    status: ResultStatus
    items: tuple[PerItemStats, ...] = ()
    window: Window | None = None
    errors: list[AnalyticsError] = field(default_factory=list)
