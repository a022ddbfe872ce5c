"""
SQLite adapters against the real migration.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from src.adapters.clock import FixedClock
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite_db import SQLiteContentItemRepo, SQLiteEventStore, format_ts
from src.components.analytics import (
    ContentItem,
    EventStoreError,
    EventType,
    QueryOverviewInput,
    ResultStatus,
    run_overview,
)
from tests.factories import NOW, OWNER, make_event


@pytest.fixture
def db_path(tmp_path) -> str:
    path = str(tmp_path / "blogcast.db")
    SQLiteMigrator(path, "migrations").run_migrations()
    return path


@pytest.fixture
def repo(db_path: str) -> SQLiteContentItemRepo:
    repo = SQLiteContentItemRepo(db_path)
    repo.save(ContentItem(id="ep-1", title="Episode One", owner_id=OWNER), position=0)
    repo.save(ContentItem(id="ep-2", title="Episode Two", owner_id=OWNER), position=1)
    repo.save(ContentItem(id="other", title="Other", owner_id="owner-2"))
    return repo


@pytest.fixture
def event_store(db_path: str, repo: SQLiteContentItemRepo) -> SQLiteEventStore:
    return SQLiteEventStore(db_path)


class TestContentItemRepo:
    def test_lists_owner_items_in_position_order(self, repo: SQLiteContentItemRepo) -> None:
        repo.save(ContentItem(id="ep-0", title="Trailer", owner_id=OWNER), position=-1)

        assert [i.id for i in repo.list_items(OWNER)] == ["ep-0", "ep-1", "ep-2"]

    def test_save_upserts(self, repo: SQLiteContentItemRepo) -> None:
        repo.save(ContentItem(id="ep-1", title="Renamed", owner_id=OWNER))

        titles = {i.id: i.title for i in repo.list_items(OWNER)}
        assert titles["ep-1"] == "Renamed"

    def test_unknown_owner(self, repo: SQLiteContentItemRepo) -> None:
        assert repo.list_items("nobody") == []


class TestEventStore:
    def test_round_trip_fields(self, event_store: SQLiteEventStore) -> None:
        event = make_event(
            timestamp=datetime(2024, 6, 10, 8, 30, 15, 250, tzinfo=UTC),
            duration=42.5,
            country="NZ",
            device="mobile",
        )
        event_store.add(event)

        assert event_store.query_events(["ep-1"]) == [event]

    def test_membership_filter(self, event_store: SQLiteEventStore) -> None:
        event_store.add(make_event(content_item_id="ep-1"))
        event_store.add(make_event(content_item_id="other"))

        rows = event_store.query_events(["ep-1", "ep-2"])

        assert [r.content_item_id for r in rows] == ["ep-1"]

    def test_empty_ids_returns_nothing(self, event_store: SQLiteEventStore) -> None:
        event_store.add(make_event())
        assert event_store.query_events([]) == []

    def test_time_bounds_half_open(self, event_store: SQLiteEventStore) -> None:
        since = NOW - timedelta(days=7)
        for ts in (since - timedelta(microseconds=1), since, NOW - timedelta(seconds=1), NOW):
            event_store.add(make_event(timestamp=ts))

        rows = event_store.query_events(["ep-1"], since=since, until=NOW)

        assert [r.timestamp for r in rows] == [since, NOW - timedelta(seconds=1)]

    def test_offset_timestamps_normalized(self, event_store: SQLiteEventStore) -> None:
        """Non-UTC inputs are stored as UTC so text comparison stays correct."""
        plus_ten = timezone(timedelta(hours=10))
        event_store.add(make_event(timestamp=datetime(2024, 6, 11, 9, 0, tzinfo=plus_ten)))

        rows = event_store.query_events(["ep-1"], since=datetime(2024, 6, 10, 22, 0, tzinfo=UTC))

        assert len(rows) == 1
        assert rows[0].timestamp == datetime(2024, 6, 10, 23, 0, tzinfo=UTC)

    def test_event_type_filter(self, event_store: SQLiteEventStore) -> None:
        event_store.add(make_event(event_type=EventType.PLAY))
        event_store.add(make_event(event_type=EventType.SHARE))
        event_store.add(make_event(event_type=EventType.DOWNLOAD))

        rows = event_store.query_events(["ep-1"], event_types=[EventType.SHARE, EventType.DOWNLOAD])

        assert {r.event_type for r in rows} == {EventType.SHARE, EventType.DOWNLOAD}

    def test_empty_event_type_filter_returns_nothing(self, event_store: SQLiteEventStore) -> None:
        event_store.add(make_event(event_type=EventType.PLAY))

        assert event_store.query_events(["ep-1"], event_types=[]) == []
        assert len(event_store.query_events(["ep-1"], event_types=None)) == 1

    def test_ordered_by_timestamp(self, event_store: SQLiteEventStore) -> None:
        event_store.add(make_event(timestamp=NOW))
        event_store.add(make_event(timestamp=NOW - timedelta(days=1)))

        rows = event_store.query_events(["ep-1"])

        assert rows[0].timestamp < rows[1].timestamp

    def test_missing_table_raises_store_error(self, tmp_path) -> None:
        store = SQLiteEventStore(str(tmp_path / "empty.db"))

        with pytest.raises(EventStoreError):
            store.query_events(["ep-1"])

    def test_format_ts_fixed_width(self) -> None:
        assert format_ts(datetime(2024, 6, 1, tzinfo=UTC)) == "2024-06-01T00:00:00.000000+00:00"


class TestOverviewOverSqlite:
    def test_populated_overview(
        self, event_store: SQLiteEventStore, repo: SQLiteContentItemRepo
    ) -> None:
        event_store.add(make_event(timestamp=NOW - timedelta(days=1), session_id="a", duration=60))
        event_store.add(make_event(content_item_id="ep-2", timestamp=NOW - timedelta(days=3), session_id="b"))

        result = run_overview(
            QueryOverviewInput(owner_id=OWNER),
            store=event_store,
            items=repo,
            time_port=FixedClock(NOW),
        )

        assert result.status == ResultStatus.POPULATED
        assert result.summary.total_plays == 2
        assert result.summary.average_listen_time == 30
