"""Clock adapters."""

from datetime import datetime, timedelta

from mastery.domain.ports import Clock


class SystemClock(Clock):
    """Wall-clock time as an aware datetime in the process's local time zone."""

    def now(self) -> datetime:
        return datetime.now().astimezone()


class FixedClock(Clock):
    """
    A clock that only moves when told to.
    """

    def __init__(self, instant: datetime):
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def set(self, instant: datetime) -> None:
        self._instant = instant

    def advance(self, days: int = 0, hours: int = 0, minutes: int = 0) -> datetime:
        self._instant += timedelta(days=days, hours=hours, minutes=minutes)
        return self._instant
