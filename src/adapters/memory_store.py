"""
In-memory event store and content item registry for testing/dev.

Implements EventStorePort and ContentItemPort with the same filter
semantics as the SQLite adapter.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable
from datetime import datetime

from src.components.analytics import (
    ContentItem,
    EventStoreError,
    EventType,
    PlaybackEvent,
    ensure_utc,
)


class InMemoryEventStore:
    """In-memory event store for testing/dev."""

    def __init__(self, events: Iterable[PlaybackEvent] = ()) -> None:
        self._events: list[PlaybackEvent] = list(events)
        self.fail_with: str | None = None
        self.query_count = 0

    def add(self, event: PlaybackEvent) -> None:
        """Append an event."""
        self._events.append(event)

    def extend(self, events: Iterable[PlaybackEvent]) -> None:
        self._events.extend(events)

    def query_events(
        self,
        content_item_ids: Collection[str],
        since: datetime | None = None,
        until: datetime | None = None,
        event_types: Collection[EventType] | None = None,
    ) -> list[PlaybackEvent]:
        """Return events matching item membership, time range and type filters."""
        self.query_count += 1
        if self.fail_with is not None:
            raise EventStoreError(self.fail_with)

        ids = set(content_item_ids)
        types = set(event_types) if event_types is not None else None
        lower = ensure_utc(since) if since is not None else None
        upper = ensure_utc(until) if until is not None else None

        results = []
        for event in self._events:
            if event.content_item_id not in ids:
                continue

            ts = ensure_utc(event.timestamp)
            if lower is not None and ts < lower:
                continue
            if upper is not None and ts >= upper:
                continue

            if types is not None and event.event_type not in types:
                continue

            results.append(event)

        return results

    def clear(self) -> None:
        """Clear all events."""
        self._events.clear()


class InMemoryContentItemRepo:
    """In-memory content item registry, preserving insertion order."""

    def __init__(self, items: Iterable[ContentItem] = ()) -> None:
        self._items: list[ContentItem] = list(items)

    def add(self, item: ContentItem) -> None:
        self._items.append(item)

    def list_items(self, owner_id: str) -> list[ContentItem]:
        return [item for item in self._items if item.owner_id == owner_id]
