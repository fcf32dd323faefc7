"""Consecutive-day streak tracking at calendar-day granularity."""

from dataclasses import dataclass
from datetime import date

from mastery.domain.errors import OrderingError
from mastery.domain.models import StreakState, local_day


@dataclass(frozen=True)
class StreakSnapshot:
    current_streak: int
    last_activity_date: date | None
    longest_streak: int


class StreakTracker:
    """
    Owns a StreakState and applies the day-gap transition table:

    ====================  ======================
    gap since last day    new current_streak
    ====================  ======================
    0                     unchanged
    1                     current + 1
    >= 2 / no history     1
    < 0                   OrderingError
    ====================  ======================
    """

    def __init__(self, state: StreakState):
        self._state = state

    def snapshot(self) -> StreakSnapshot:
        return StreakSnapshot(
            current_streak=self._state.current_streak,
            last_activity_date=self._state.last_activity_date,
            longest_streak=self._state.longest_streak,
        )

    def ensure_in_order(self, day: date) -> date:
        """Raise OrderingError if ``day`` precedes the last recorded activity."""
        day = local_day(day)
        last = self._state.last_activity_date
        if last is not None and day < last:
            raise OrderingError(
                f"Activity on {day.isoformat()} is earlier than the last recorded "
                f"activity on {last.isoformat()}"
            )
        return day

    def record_activity(self, day: date) -> StreakSnapshot:
        day = self.ensure_in_order(day)
        last = self._state.last_activity_date

        if last is None:
            self._state.current_streak = 1
        else:
            gap = (day - last).days
            if gap == 1:
                self._state.current_streak += 1
            elif gap >= 2:
                self._state.current_streak = 1
            # gap == 0: same day, unchanged

        self._state.last_activity_date = day
        self._state.longest_streak = max(self._state.longest_streak, self._state.current_streak)
        return self.snapshot()

    def streak_as_of(self, today: date) -> int:
        """
        Streak to display on ``today`` without recording anything.

        The stored streak stays alive while the last activity was today or
        yesterday; after a longer gap it reads as 0.
        """
        last = self._state.last_activity_date
        if last is None:
            return 0
        if (local_day(today) - last).days > 1:
            return 0
        return self._state.current_streak
