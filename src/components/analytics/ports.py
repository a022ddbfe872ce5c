"""
Analytics component port definitions.
"""

from __future__ import annotations

from collections.abc import Collection
from datetime import datetime
from typing import Protocol

from .models import ContentItem, EventType, PlaybackEvent


class EventStorePort(Protocol):
    """Read-only query interface over persisted playback events."""

    def query_events(
        self,
        content_item_ids: Collection[str],
        since: datetime | None = None,
        until: datetime | None = None,
        event_types: Collection[EventType] | None = None,
    ) -> list[PlaybackEvent]:
        """
        Return all events matching the predicates.

        - content_item_ids: membership filter (required)
        - since: inclusive lower bound on timestamp
        - until: exclusive upper bound on timestamp
        - event_types: membership filter on event type

        Raises EventStoreError if the query fails.
        """
        ...


class ContentItemPort(Protocol):
    """Lists the content items a user owns."""

    def list_items(self, owner_id: str) -> list[ContentItem]:
        """Return the owner's items in enumeration order."""
        ...


class TimePort(Protocol):
    """Time provider interface."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...


class AnalyticsRulesPort(Protocol):
    """Port for analytics rules configuration."""

    def get_time_ranges(self) -> dict[str, int]:
        """Map of time range selector to window length in days."""
        ...

    def get_trend_days(self) -> int:
        """Length of each trend comparison period in days."""
        ...

    def get_country_limit(self) -> int:
        """Maximum number of countries in the audience breakdown."""
        ...

    def get_segment_bounds(self) -> tuple[tuple[str, float], ...]:
        """Engagement segments as (name, lower bound seconds), ascending."""
        ...
