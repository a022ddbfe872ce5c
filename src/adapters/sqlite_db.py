"""
SQLite Database Adapter for playback analytics.

Implements EventStorePort and ContentItemPort over the tables created by
migrations/001_playback_analytics.sql.
Designed to be Postgres-compatible (uses standard SQL patterns).

Timestamps are stored as fixed-width UTC ISO strings so range predicates can
compare them as text.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Collection
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from src.components.analytics import (
    ContentItem,
    EventStoreError,
    EventType,
    PlaybackEvent,
    ensure_utc,
)

# -----------------------------------------------------------------------------
# Helper functions
# -----------------------------------------------------------------------------


def dict_factory(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    """Convert SQLite row to dictionary."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def format_ts(ts: datetime) -> str:
    """Serialize a timestamp as fixed-width UTC ISO 8601."""
    return ensure_utc(ts).isoformat(timespec="microseconds")


def parse_ts(value: str) -> datetime:
    """Parse a stored timestamp back to aware UTC."""
    return ensure_utc(datetime.fromisoformat(value))


class SQLiteRepoBase:
    """Base class for SQLite repositories."""

    def __init__(self, db_path: str, connection: sqlite3.Connection | None = None):
        self.db_path = db_path
        self._external_conn = connection

    def _get_conn(self) -> sqlite3.Connection:
        """Get database connection (uses external if provided)."""
        if self._external_conn is not None:
            return self._external_conn

        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    def _should_close(self) -> bool:
        """Whether to close connection after use."""
        return self._external_conn is None


# -----------------------------------------------------------------------------
# Content Items
# -----------------------------------------------------------------------------


class SQLiteContentItemRepo(SQLiteRepoBase):
    """SQLite implementation of ContentItemPort."""

    def save(self, item: ContentItem, position: int = 0) -> ContentItem:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO content_items (id, owner_id, title, position, created_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    owner_id=excluded.owner_id,
                    title=excluded.title,
                    position=excluded.position
                """,
                (item.id, item.owner_id, item.title, position, datetime.now(UTC).isoformat()),
            )
            if self._should_close():
                conn.commit()
            return item
        finally:
            if self._should_close():
                conn.close()

    def list_items(self, owner_id: str) -> list[ContentItem]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT id, owner_id, title FROM content_items "
                "WHERE owner_id = ? ORDER BY position, created_at, id",
                (owner_id,),
            ).fetchall()
        except sqlite3.Error as e:
            raise EventStoreError(f"Content item query failed: {e}") from e
        finally:
            if self._should_close():
                conn.close()

        return [ContentItem(id=r["id"], title=r["title"], owner_id=r["owner_id"]) for r in rows]


# -----------------------------------------------------------------------------
# Playback Events
# -----------------------------------------------------------------------------


class SQLiteEventStore(SQLiteRepoBase):
    """
    SQLite implementation of EventStorePort.

    Events are append-only; there is no update or delete.
    """

    def add(self, event: PlaybackEvent) -> None:
        """Append an event (used by seeding and tests)."""
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO playback_events (
                    id, content_item_id, event_type, timestamp, session_id,
                    listen_duration_seconds, country, device_type
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    str(uuid4()),
                    event.content_item_id,
                    event.event_type.value,
                    format_ts(event.timestamp),
                    event.session_id,
                    event.listen_duration_seconds,
                    event.country,
                    event.device_type,
                ),
            )
            if self._should_close():
                conn.commit()
        finally:
            if self._should_close():
                conn.close()

    def query_events(
        self,
        content_item_ids: Collection[str],
        since: datetime | None = None,
        until: datetime | None = None,
        event_types: Collection[EventType] | None = None,
    ) -> list[PlaybackEvent]:
        """Return events matching item membership, time range and type filters."""
        ids = list(content_item_ids)
        if not ids:
            return []

        placeholders = ", ".join("?" for _ in ids)
        query = f"SELECT * FROM playback_events WHERE content_item_id IN ({placeholders})"
        params: list[Any] = list(ids)

        if since is not None:
            query += " AND timestamp >= ?"
            params.append(format_ts(since))

        if until is not None:
            query += " AND timestamp < ?"
            params.append(format_ts(until))

        if event_types is not None:
            types = [t.value for t in event_types]
            if not types:
                return []
            query += f" AND event_type IN ({', '.join('?' for _ in types)})"
            params.extend(types)

        query += " ORDER BY timestamp"

        conn = self._get_conn()
        try:
            rows = conn.execute(query, params).fetchall()
        except sqlite3.Error as e:
            raise EventStoreError(f"Event query failed: {e}") from e
        finally:
            if self._should_close():
                conn.close()

        return [self._map_row(r) for r in rows]

    def _map_row(self, row: dict[str, Any]) -> PlaybackEvent:
        return PlaybackEvent(
            content_item_id=row["content_item_id"],
            event_type=EventType(row["event_type"]),
            timestamp=parse_ts(row["timestamp"]),
            session_id=row["session_id"],
            listen_duration_seconds=row["listen_duration_seconds"],
            country=row["country"],
            device_type=row["device_type"],
        )
