"""Clock implementations."""

from datetime import datetime

from followups.core.entities.common import as_utc, utcnow
from followups.core.interfaces.clock import IClock


class SystemClock(IClock):
    """Reads the system wall clock in UTC."""

    def now(self) -> datetime:
        return utcnow()


class FixedClock(IClock):
    """Always returns the same instant. Used for replays and tests."""

    def __init__(self, instant: datetime) -> None:
        self._instant = as_utc(instant)

    def now(self) -> datetime:
        return self._instant
