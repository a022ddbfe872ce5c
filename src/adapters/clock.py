from datetime import UTC, datetime, timedelta


class SystemClock:
    """TimePort backed by the system clock. Always UTC."""

    def now_utc(self) -> datetime:
        return datetime.now(UTC)


class FixedClock:
    """TimePort pinned to a given instant (seeding, demos, tests)."""

    def __init__(self, now: datetime) -> None:
        self._now = now if now.tzinfo is not None else now.replace(tzinfo=UTC)

    def now_utc(self) -> datetime:
        return self._now

    def advance(self, **delta: float) -> None:
        self._now += timedelta(**delta)
