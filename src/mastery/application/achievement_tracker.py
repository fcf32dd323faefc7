"""Unlocks milestone achievements from XP, streak and activity counters."""

from datetime import datetime

from mastery.domain.achievements import (
    ACHIEVEMENTS,
    Achievement,
    AchievementCategory,
)
from mastery.domain.constants import EARLY_BIRD_END_HOUR, NIGHT_OWL_END_HOUR
from mastery.domain.models import ActivityCounters, UnlockedAchievement, local_time


class AchievementTracker:
    """
    Owns the unlocked-achievement list. Each achievement unlocks at most once,
    in catalogue order.
    """

    def __init__(
        self,
        unlocked: list[UnlockedAchievement],
        counters: ActivityCounters,
        catalogue: tuple[Achievement, ...] = ACHIEVEMENTS,
    ):
        self._unlocked = unlocked
        self._counters = counters
        self._catalogue = catalogue

    @property
    def catalogue(self) -> tuple[Achievement, ...]:
        return self._catalogue

    @property
    def unlocked(self) -> list[UnlockedAchievement]:
        return list(self._unlocked)

    def is_unlocked(self, achievement_id: str) -> bool:
        return any(u.achievement_id == achievement_id for u in self._unlocked)

    def _metric(self, achievement: Achievement, total_xp: int, current_streak: int) -> int:
        if achievement.category == AchievementCategory.XP:
            return total_xp
        if achievement.category == AchievementCategory.TASKS:
            return self._counters.tasks_completed
        if achievement.category == AchievementCategory.FOCUS:
            return self._counters.focus_sessions
        if achievement.category == AchievementCategory.STREAK:
            return current_streak
        return 0

    def _special_met(self, achievement: Achievement, occurred_at: datetime) -> bool:
        hour = local_time(occurred_at).hour
        if achievement.id == "night_owl":
            return hour < NIGHT_OWL_END_HOUR
        if achievement.id == "early_bird":
            return NIGHT_OWL_END_HOUR <= hour < EARLY_BIRD_END_HOUR
        return False

    def progress(self, achievement: Achievement, total_xp: int, current_streak: int) -> float:
        """Completion percentage in [0, 100]."""
        if self.is_unlocked(achievement.id):
            return 100.0
        if achievement.category == AchievementCategory.SPECIAL:
            return 0.0
        metric = self._metric(achievement, total_xp, current_streak)
        return min(100.0, 100.0 * metric / achievement.requirement)

    def evaluate(
        self,
        total_xp: int,
        current_streak: int,
        occurred_at: datetime,
        qualifying: bool = False,
    ) -> list[Achievement]:
        """
        Unlock every achievement whose requirement is now met.

        Args:
            total_xp: Current XP total.
            current_streak: Current streak length.
            occurred_at: Local time of the triggering activity, recorded as
                the unlock time.
            qualifying: Whether the activity feeds the streak; only
                qualifying activities can earn the time-of-day specials.

        Returns:
            Achievements unlocked by this call, in catalogue order.
        """
        newly: list[Achievement] = []
        for achievement in self._catalogue:
            if self.is_unlocked(achievement.id):
                continue
            if achievement.category == AchievementCategory.SPECIAL:
                met = qualifying and self._special_met(achievement, occurred_at)
            else:
                met = self._metric(achievement, total_xp, current_streak) >= achievement.requirement
            if not met:
                continue
            self._unlocked.append(
                UnlockedAchievement(
                    achievement_id=achievement.id,
                    unlocked_at=occurred_at,
                )
            )
            newly.append(achievement)
        return newly
