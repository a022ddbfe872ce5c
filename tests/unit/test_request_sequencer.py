"""
Tests for request sequencing of dashboard views.

A slow response for an earlier selection must never overwrite a newer one.
"""

from __future__ import annotations

import threading

import pytest

from src.components.analytics import DashboardState, RequestSequencer


class TestRequestSequencer:
    def test_tickets_increase(self) -> None:
        seq = RequestSequencer()
        first = seq.begin("overview")
        second = seq.begin("overview")
        assert second > first

    def test_only_latest_is_current(self) -> None:
        seq = RequestSequencer()
        old = seq.begin("overview")
        new = seq.begin("overview")

        assert not seq.is_current("overview", old)
        assert seq.is_current("overview", new)
        assert seq.latest("overview") == new

    def test_views_are_independent(self) -> None:
        seq = RequestSequencer()
        overview = seq.begin("overview")
        seq.begin("audience")

        assert seq.is_current("overview", overview)

    def test_unknown_view(self) -> None:
        seq = RequestSequencer()
        assert seq.latest("overview") is None
        assert not seq.is_current("overview", 1)

    def test_concurrent_tickets_unique(self) -> None:
        seq = RequestSequencer()
        tickets: list[int] = []
        lock = threading.Lock()

        def worker() -> None:
            for _ in range(100):
                t = seq.begin("overview")
                with lock:
                    tickets.append(t)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(set(tickets)) == 400
        assert seq.latest("overview") == max(tickets)


class TestDashboardState:
    def test_out_of_order_response_discarded(self) -> None:
        """7d requested, then 30d; the 7d response arriving last is dropped."""
        state = DashboardState()
        ticket_7d = state.begin("overview")
        ticket_30d = state.begin("overview")

        assert state.apply("overview", ticket_30d, "30d result") is True
        assert state.apply("overview", ticket_7d, "7d result") is False
        assert state.displayed("overview") == "30d result"

    def test_loading_cleared_only_by_current(self) -> None:
        state = DashboardState()
        old = state.begin("audience")
        new = state.begin("audience")

        state.apply("audience", old, "stale")
        assert state.is_loading("audience")
        assert state.displayed("audience") is None

        state.apply("audience", new, "fresh")
        assert not state.is_loading("audience")

    def test_load_applies_result(self) -> None:
        state = DashboardState()
        assert state.load("performance", lambda: ["row"]) is True
        assert state.displayed("performance") == ["row"]

    def test_nested_load_supersedes_outer(self) -> None:
        """A request issued while another is in flight wins."""
        state = DashboardState()

        def slow_fetch() -> str:
            state.load("overview", lambda: "newer")
            return "older"

        assert state.load("overview", slow_fetch) is False
        assert state.displayed("overview") == "newer"

    def test_shared_sequencer(self) -> None:
        seq = RequestSequencer()
        state = DashboardState(seq)
        ticket = state.begin("overview")
        assert seq.is_current("overview", ticket)

    def test_failed_load_stops_loading(self) -> None:
        state = DashboardState()
        state.load("overview", lambda: "previous")

        def boom() -> str:
            raise RuntimeError("store unavailable")

        with pytest.raises(RuntimeError, match="store unavailable"):
            state.load("overview", boom)

        assert not state.is_loading("overview")
        assert state.displayed("overview") == "previous"

    def test_stale_failure_keeps_newer_request_loading(self) -> None:
        state = DashboardState()
        old = state.begin("overview")
        state.begin("overview")

        assert state.fail("overview", old) is False
        assert state.is_loading("overview")
