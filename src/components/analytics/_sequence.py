"""
Request sequencing for dashboard views.

Each view request is tagged with a monotonically increasing ticket. A
response is only applied if its ticket is still the latest issued for that
view, so a slow response for an old time range never overwrites a newer one.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RequestSequencer:
    """Issues per-view tickets and answers whether a ticket is still current."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counter = 0
        self._latest: dict[str, int] = {}

    def begin(self, view: str) -> int:
        """Issue a new ticket for `view`, superseding earlier ones."""
        with self._lock:
            self._counter += 1
            self._latest[view] = self._counter
            return self._counter

    def is_current(self, view: str, ticket: int) -> bool:
        """True only for the latest ticket issued for `view`."""
        with self._lock:
            return self._latest.get(view) == ticket

    def latest(self, view: str) -> int | None:
        with self._lock:
            return self._latest.get(view)


class DashboardState:
    """
    Holds the currently displayed output of each dashboard view.

    Results are applied through the sequencer; stale ones are dropped.
    """

    def __init__(self, sequencer: RequestSequencer | None = None) -> None:
        self._sequencer = sequencer or RequestSequencer()
        self._lock = threading.Lock()
        self._displayed: dict[str, Any] = {}
        self._loading: set[str] = set()

    def begin(self, view: str) -> int:
        """Start a request for `view` and mark it loading."""
        ticket = self._sequencer.begin(view)
        with self._lock:
            self._loading.add(view)
        return ticket

    def apply(self, view: str, ticket: int, result: Any) -> bool:
        """
        Apply `result` if `ticket` is still current.

        Returns True if applied, False if the result was stale.
        """
        with self._lock:
            if not self._sequencer.is_current(view, ticket):
                logger.debug("Discarding stale %s response (ticket %d)", view, ticket)
                return False
            self._displayed[view] = result
            self._loading.discard(view)
            return True

    def load(self, view: str, fetch: Callable[[], T]) -> bool:
        """
        Run `fetch` under a fresh ticket and apply its result if still current.

        If `fetch` raises, the view stops loading (when the ticket is still
        current) and the exception propagates to the caller.
        """
        ticket = self.begin(view)
        try:
            result = fetch()
        except Exception:
            self.fail(view, ticket)
            raise
        return self.apply(view, ticket, result)

    def fail(self, view: str, ticket: int) -> bool:
        """Clear the loading flag for a failed request if `ticket` is still current."""
        with self._lock:
            if not self._sequencer.is_current(view, ticket):
                return False
            logger.warning("%s request failed (ticket %d)", view, ticket)
            self._loading.discard(view)
            return True

    def displayed(self, view: str) -> Any | None:
        with self._lock:
            return self._displayed.get(view)

    def is_loading(self, view: str) -> bool:
        with self._lock:
            return view in self._loading
