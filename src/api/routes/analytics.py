"""
Podcast Analytics API.

Provides the overview, audience and performance views of the dashboard.

Every response carries `status`: populated, empty (no events yet) or error
(store query failed, HTTP 503). Unknown time ranges are rejected with 400.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import BaseModel

from src.adapters.rules_adapter import AnalyticsRulesAdapter
from src.api.deps import (
    get_analytics_rules,
    get_content_items,
    get_event_store,
    get_owner_id,
    get_rules,
    get_time_port,
)
from src.components.analytics import (
    AnalyticsError,
    BucketType,
    ContentItemPort,
    EventStorePort,
    InvalidTimeRangeError,
    QueryAudienceInput,
    QueryOverviewInput,
    QueryPerformanceInput,
    ResultStatus,
    SummaryStats,
    TimePort,
    Window,
    run_audience,
    run_item_performance,
    run_overview,
)
from src.rules.models import Rules

router = APIRouter()


# --- Response Models ---


class ErrorItem(BaseModel):
    code: str
    message: str


class SummaryResponse(BaseModel):
    """Summary statistics."""

    total_plays: int
    unique_listeners: int
    average_listen_time: int
    growth_percent: int
    total_shares: int
    total_downloads: int
    total_completes: int
    completion_rate_percent: int


class TimeSeriesPointResponse(BaseModel):
    """Time series data point."""

    bucket_start: str
    label: str
    plays: int
    listeners: int


class OverviewResponse(BaseModel):
    """Overview view response."""

    status: str
    time_range: str
    window_start: str | None
    window_end: str | None
    summary: SummaryResponse | None
    time_series: list[TimeSeriesPointResponse]
    errors: list[ErrorItem]


class NameValue(BaseModel):
    name: str
    value: int


class HourlyPoint(BaseModel):
    hour: str
    plays: int


class AudienceResponse(BaseModel):
    """Audience view response."""

    status: str
    countries: list[NameValue]
    devices: list[NameValue]
    hourly_activity: list[HourlyPoint]
    engagement_segments: list[NameValue]
    errors: list[ErrorItem]


class ItemPerformance(BaseModel):
    """One row of the performance table."""

    rank: int
    content_item_id: str
    title: str
    plays: int
    completes: int
    shares: int
    downloads: int
    completion_rate_percent: int
    average_listen_time: int
    trend: str


class PerformanceResponse(BaseModel):
    """Performance view response."""

    status: str
    time_range: str
    items: list[ItemPerformance]
    errors: list[ErrorItem]


# --- Helper Functions ---


def resolve_time_range(time_range: str | None, rules: Rules) -> str:
    return time_range or rules.analytics.default_time_range


def parse_bucket_type(bucket_type: str) -> BucketType:
    """Parse bucket type string to enum."""
    try:
        return BucketType(bucket_type.lower())
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid bucket type: {bucket_type}. Must be one of: hour, day",
        ) from None


def invalid_time_range(e: InvalidTimeRangeError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


def mark_error(response: Response, result_status: ResultStatus) -> None:
    if result_status == ResultStatus.ERROR:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE


def to_errors(errors: list[AnalyticsError]) -> list[ErrorItem]:
    return [ErrorItem(code=e.code, message=e.message) for e in errors]


def to_summary(stats: SummaryStats) -> SummaryResponse:
    return SummaryResponse(
        total_plays=stats.total_plays,
        unique_listeners=stats.unique_listeners,
        average_listen_time=stats.average_listen_time,
        growth_percent=stats.growth_percent,
        total_shares=stats.total_shares,
        total_downloads=stats.total_downloads,
        total_completes=stats.total_completes,
        completion_rate_percent=stats.completion_rate_percent,
    )


def window_bounds(window: Window | None) -> tuple[str | None, str | None]:
    if window is None:
        return None, None
    return window.start.isoformat(), window.end.isoformat()


# --- Routes ---


@router.get("/overview", response_model=OverviewResponse)
def get_overview(
    response: Response,
    time_range: str | None = Query(None, description="Time range: 7d, 30d, 90d"),
    bucket_type: str | None = Query(None, description="Bucket type: hour, day"),
    owner_id: str = Depends(get_owner_id),
    store: EventStorePort = Depends(get_event_store),
    items: ContentItemPort = Depends(get_content_items),
    time_port: TimePort = Depends(get_time_port),
    rules: Rules = Depends(get_rules),
    analytics_rules: AnalyticsRulesAdapter = Depends(get_analytics_rules),
) -> OverviewResponse:
    """Summary stats and chart series for the selected window."""
    tr = resolve_time_range(time_range, rules)
    bt = parse_bucket_type(bucket_type or rules.analytics.bucket_type)

    try:
        result = run_overview(
            QueryOverviewInput(owner_id=owner_id, time_range=tr, bucket_type=bt),
            store=store,
            items=items,
            time_port=time_port,
            rules=analytics_rules,
        )
    except InvalidTimeRangeError as e:
        raise invalid_time_range(e) from e

    mark_error(response, result.status)
    start, end = window_bounds(result.window)
    populated = result.status == ResultStatus.POPULATED

    return OverviewResponse(
        status=result.status.value,
        time_range=tr,
        window_start=start,
        window_end=end,
        summary=to_summary(result.summary) if populated else None,
        time_series=[
            TimeSeriesPointResponse(
                bucket_start=p.bucket_start.isoformat(),
                label=p.bucket_label,
                plays=p.plays,
                listeners=p.unique_listeners,
            )
            for p in result.time_series
        ],
        errors=to_errors(result.errors),
    )


@router.get("/audience", response_model=AudienceResponse)
def get_audience(
    response: Response,
    time_range: str | None = Query(None, description="Optional time range; full history if omitted"),
    owner_id: str = Depends(get_owner_id),
    store: EventStorePort = Depends(get_event_store),
    items: ContentItemPort = Depends(get_content_items),
    time_port: TimePort = Depends(get_time_port),
    analytics_rules: AnalyticsRulesAdapter = Depends(get_analytics_rules),
) -> AudienceResponse:
    """Countries, devices, hour-of-day activity and engagement segments."""
    try:
        result = run_audience(
            QueryAudienceInput(owner_id=owner_id, time_range=time_range),
            store=store,
            items=items,
            time_port=time_port,
            rules=analytics_rules,
        )
    except InvalidTimeRangeError as e:
        raise invalid_time_range(e) from e

    mark_error(response, result.status)

    return AudienceResponse(
        status=result.status.value,
        countries=[NameValue(name=c.name, value=c.value) for c in result.countries],
        devices=[NameValue(name=d.name, value=d.value) for d in result.devices],
        hourly_activity=[HourlyPoint(hour=h.hour_label, plays=h.plays) for h in result.hourly_activity],
        engagement_segments=[
            NameValue(name=s.name, value=s.value) for s in result.engagement_segments
        ],
        errors=to_errors(result.errors),
    )


@router.get("/performance", response_model=PerformanceResponse)
def get_performance(
    response: Response,
    time_range: str | None = Query(None, description="Time range: 7d, 30d, 90d"),
    owner_id: str = Depends(get_owner_id),
    store: EventStorePort = Depends(get_event_store),
    items: ContentItemPort = Depends(get_content_items),
    time_port: TimePort = Depends(get_time_port),
    rules: Rules = Depends(get_rules),
    analytics_rules: AnalyticsRulesAdapter = Depends(get_analytics_rules),
) -> PerformanceResponse:
    """Ranked per-episode stats with week-over-week trend."""
    tr = resolve_time_range(time_range, rules)

    try:
        result = run_item_performance(
            QueryPerformanceInput(owner_id=owner_id, time_range=tr),
            store=store,
            items=items,
            time_port=time_port,
            rules=analytics_rules,
        )
    except InvalidTimeRangeError as e:
        raise invalid_time_range(e) from e

    mark_error(response, result.status)

    return PerformanceResponse(
        status=result.status.value,
        time_range=tr,
        items=[
            ItemPerformance(
                rank=item.rank,
                content_item_id=item.content_item_id,
                title=item.title,
                plays=item.summary.total_plays,
                completes=item.summary.total_completes,
                shares=item.summary.total_shares,
                downloads=item.summary.total_downloads,
                completion_rate_percent=item.summary.completion_rate_percent,
                average_listen_time=item.summary.average_listen_time,
                trend=item.trend,
            )
            for item in result.items
        ],
        errors=to_errors(result.errors),
    )
