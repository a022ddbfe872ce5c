"""
Time-series binning for chart display.

Key behaviors:
- Every bucket in the range is pre-built before rows are scanned, so the
  output has no gaps
- Bucket keys are floors of the timestamp in UTC (half-open buckets)
- Rows outside the pre-built range are dropped
- Unique listeners per bucket are distinct session ids
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from ._aggregate import ensure_utc
from .models import BucketType, PlaybackEvent, TimeSeriesPoint


def calculate_bucket_start(timestamp: datetime, bucket_type: BucketType) -> datetime:
    """
    Calculate the start of a time bucket for a given timestamp.

    All timestamps are normalized to UTC.
    """
    ts = ensure_utc(timestamp)

    if bucket_type == BucketType.HOUR:
        return ts.replace(minute=0, second=0, microsecond=0)
    elif bucket_type == BucketType.DAY:
        return ts.replace(hour=0, minute=0, second=0, microsecond=0)
    else:
        msg = f"Unknown bucket type: {bucket_type}"
        raise ValueError(msg)


def bucket_step(bucket_type: BucketType) -> timedelta:
    """Length of one bucket."""
    if bucket_type == BucketType.HOUR:
        return timedelta(hours=1)
    elif bucket_type == BucketType.DAY:
        return timedelta(days=1)
    else:
        msg = f"Unknown bucket type: {bucket_type}"
        raise ValueError(msg)


def bucket_label(bucket_start: datetime, bucket_type: BucketType) -> str:
    """Short display label, e.g. 'Jun 5' or 'Jun 5 14:00'."""
    day_label = f"{bucket_start.strftime('%b')} {bucket_start.day}"
    if bucket_type == BucketType.HOUR:
        return f"{day_label} {bucket_start.hour:02d}:00"
    return day_label


def buckets_for_days(days: int, bucket_type: BucketType) -> int:
    """Number of buckets covering a window of `days` days."""
    return days * 24 if bucket_type == BucketType.HOUR else days


@dataclass
class _Bucket:
    plays: int = 0
    listeners: set[str] = field(default_factory=set)


def bin_time_series(
    events: Iterable[PlaybackEvent],
    start: datetime,
    length: int,
    bucket_type: BucketType = BucketType.DAY,
) -> tuple[TimeSeriesPoint, ...]:
    """
    Bin events into `length` consecutive buckets beginning at `start`.

    Always returns exactly `length` points in chronological order, zero-filled.
    """
    first = calculate_bucket_start(start, bucket_type)
    step = bucket_step(bucket_type)

    buckets: dict[datetime, _Bucket] = {first + step * i: _Bucket() for i in range(length)}

    for event in events:
        key = calculate_bucket_start(event.timestamp, bucket_type)
        bucket = buckets.get(key)
        if bucket is None:
            continue
        if event.is_play:
            bucket.plays += 1
        bucket.listeners.add(event.session_id)

    return tuple(
        TimeSeriesPoint(
            bucket_start=key,
            bucket_label=bucket_label(key, bucket_type),
            plays=bucket.plays,
            unique_listeners=len(bucket.listeners),
        )
        for key, bucket in sorted(buckets.items())
    )
