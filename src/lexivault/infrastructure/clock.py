"""Clock adapters."""

from datetime import datetime, timedelta, timezone

from lexivault.domain.ports import Clock


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """
    Manually advanced clock for tests and simulations.

    Use ``advance`` to step across interval expiries and day boundaries.
    """

    def __init__(self, start: datetime):
        if start.tzinfo is None:
            raise ValueError("FixedClock requires a timezone-aware datetime")
        self._now = start

    def now(self) -> datetime:
        return self._now

    def advance(self, delta: timedelta) -> datetime:
        self._now += delta
        return self._now

    def set(self, instant: datetime) -> None:
        self._now = instant
