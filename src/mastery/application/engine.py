"""
Mastery Engine: composition root.

Wires the injected clock and configuration into the XP ledger, streak
tracker, card scheduler and achievement tracker. It is the only object a UI
event handler needs: every public method runs to completion synchronously,
mutates the owned EngineState in place and returns a snapshot for rendering.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime

from mastery.domain.achievements import Achievement
from mastery.domain.models import (
    ActivityKind,
    Difficulty,
    EngineState,
    Flashcard,
    Subject,
    local_day,
)
from mastery.domain.ports import Clock

from .achievement_tracker import AchievementTracker
from .card_scheduler import CardScheduler
from .config import EngineConfig
from .id_service import generate_card_id
from .streak_tracker import StreakSnapshot, StreakTracker
from .xp_ledger import ExperienceSnapshot, XpLedger


@dataclass(frozen=True)
class ActivityResult:
    """Outcome of one recorded activity."""

    kind: ActivityKind | None  # None for a direct XP grant
    xp_awarded: int  # activity reward plus any achievement bonuses
    experience_before: ExperienceSnapshot
    experience_after: ExperienceSnapshot
    streak: StreakSnapshot | None  # None when the kind does not qualify
    new_achievements: list[Achievement] = field(default_factory=list)

    @property
    def leveled_up(self) -> bool:
        return self.experience_after.level > self.experience_before.level


@dataclass(frozen=True)
class ReviewOutcome:
    card: Flashcard
    activity: ActivityResult


@dataclass(frozen=True)
class EngineSnapshot:
    experience: ExperienceSnapshot
    streak: StreakSnapshot
    display_streak: int
    total_cards: int
    due_count: int
    overall_accuracy: int
    unlocked_achievements: list[str]


class MasteryEngine:
    """
    Facade over the progress and mastery sub-components.

    Args:
        state: Owned state to operate on; a fresh EngineState if omitted.
        config: Reward table and scheduling constants; defaults if omitted.
        clock: Source of "now" for every date-sensitive call.
        id_factory: Card id generator (override for deterministic ids).
    """

    def __init__(
        self,
        clock: Clock,
        state: EngineState | None = None,
        config: EngineConfig | None = None,
        id_factory: Callable[[], str] = generate_card_id,
    ):
        self.state = state if state is not None else EngineState()
        self.config = config or EngineConfig()
        self.clock = clock

        self.ledger = XpLedger(self.state.experience)
        self.streaks = StreakTracker(self.state.streak)
        self.scheduler = CardScheduler(self.state.cards, clock, self.config, id_factory)
        self.achievements = AchievementTracker(self.state.achievements, self.state.counters)

    # ------------------------------------------------------------------
    # Activities
    # ------------------------------------------------------------------

    def record_activity(
        self, kind: ActivityKind | str, now: datetime | None = None
    ) -> ActivityResult:
        """
        Convert one user activity into streak, XP and achievement updates.

        Raises:
            InvalidArgumentError: If ``kind`` is not a known activity.
            OrderingError: If a qualifying activity predates the last one.
        """
        kind = ActivityKind.parse(kind)
        now = now or self.clock.now()
        qualifying = self.config.is_qualifying(kind)

        streak = self.streaks.record_activity(local_day(now)) if qualifying else None
        self._bump_counters(kind)

        before = self.ledger.snapshot()
        reward = self.config.xp_rewards.for_activity(kind)
        self.ledger.add_xp(reward)
        unlocked, bonus = self._unlock_achievements(now, qualifying)

        return ActivityResult(
            kind=kind,
            xp_awarded=reward + bonus,
            experience_before=before,
            experience_after=self.ledger.snapshot(),
            streak=streak,
            new_achievements=unlocked,
        )

    def _unlock_achievements(
        self, now: datetime, qualifying: bool
    ) -> tuple[list[Achievement], int]:
        """Evaluate achievements until none unlock; returns them with the bonus XP granted."""
        unlocked: list[Achievement] = []
        granted = 0
        while True:
            newly = self.achievements.evaluate(
                self.ledger.total_xp,
                self.state.streak.current_streak,
                occurred_at=now,
                qualifying=qualifying,
            )
            if not newly:
                break
            unlocked.extend(newly)
            if not self.config.achievement_bonus:
                break
            bonus = sum(a.xp_reward for a in newly)
            self.ledger.add_xp(bonus)
            granted += bonus
        return unlocked, granted

    def _bump_counters(self, kind: ActivityKind) -> None:
        counters = self.state.counters
        if kind == ActivityKind.TASK_COMPLETE:
            counters.tasks_completed += 1
        elif kind == ActivityKind.FOCUS_SESSION:
            counters.focus_sessions += 1
        elif kind == ActivityKind.CORRECT_REVIEW:
            counters.cards_reviewed += 1
            counters.correct_reviews += 1
        elif kind == ActivityKind.INCORRECT_REVIEW:
            counters.cards_reviewed += 1

    def complete_task(self, now: datetime | None = None) -> ActivityResult:
        return self.record_activity(ActivityKind.TASK_COMPLETE, now)

    def complete_focus_session(self, now: datetime | None = None) -> ActivityResult:
        return self.record_activity(ActivityKind.FOCUS_SESSION, now)

    # ------------------------------------------------------------------
    # XP
    # ------------------------------------------------------------------

    def grant_xp(self, amount: int, now: datetime | None = None) -> ActivityResult:
        """
        Grant XP directly, outside any activity.

        The streak and activity counters are untouched, but milestones the new
        total reaches unlock at ``now`` (with their bonus, when enabled).

        Raises:
            InvalidArgumentError: If ``amount`` is negative or not an integer.
        """
        now = now or self.clock.now()
        before = self.ledger.snapshot()
        self.ledger.add_xp(amount)
        unlocked, bonus = self._unlock_achievements(now, qualifying=False)

        return ActivityResult(
            kind=None,
            xp_awarded=amount + bonus,
            experience_before=before,
            experience_after=self.ledger.snapshot(),
            streak=None,
            new_achievements=unlocked,
        )

    def add_xp(self, amount: int, now: datetime | None = None) -> ExperienceSnapshot:
        return self.grant_xp(amount, now).experience_after

    def reset_xp(self) -> ExperienceSnapshot:
        return self.ledger.reset()

    # ------------------------------------------------------------------
    # Cards
    # ------------------------------------------------------------------

    def add_card(
        self,
        question: str,
        answer: str,
        subject: Subject | str,
        difficulty: Difficulty | str,
        now: datetime | None = None,
    ) -> Flashcard:
        return self.scheduler.add_card(question, answer, subject, difficulty, now)

    def delete_card(self, card_id: str) -> Flashcard:
        return self.scheduler.delete_card(card_id)

    def get_card(self, card_id: str) -> Flashcard:
        return self.scheduler.get_card(card_id)

    def get_due_cards(
        self, subject: Subject | str | None = None, today: date | None = None
    ) -> list[Flashcard]:
        return self.scheduler.get_due_cards(subject, today)

    def get_cards_by_subject(self, subject: Subject | str) -> list[Flashcard]:
        return self.scheduler.get_cards_by_subject(subject)

    def get_accuracy(self, card_id: str | None = None) -> int:
        """Accuracy of one card, or across all cards when ``card_id`` is None."""
        if card_id is None:
            return self.scheduler.overall_accuracy()
        return self.scheduler.get_accuracy(card_id)

    def review_card(
        self, card_id: str, correct: bool, now: datetime | None = None
    ) -> ReviewOutcome:
        """
        Record a review, reschedule the card and credit the matching activity.

        Validation happens before any mutation, so a failed call leaves the
        state untouched.

        Raises:
            NotFoundError: If the card id is unknown.
            OrderingError: If the review qualifies for the streak and predates
                the last recorded activity.
        """
        now = now or self.clock.now()
        kind = ActivityKind.CORRECT_REVIEW if correct else ActivityKind.INCORRECT_REVIEW

        self.scheduler.get_card(card_id)
        if self.config.is_qualifying(kind):
            self.streaks.ensure_in_order(local_day(now))

        card = self.scheduler.review_card(card_id, correct, now)
        activity = self.record_activity(kind, now)
        return ReviewOutcome(card=card, activity=activity)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def snapshot(self, today: date | None = None) -> EngineSnapshot:
        today = today or self.clock.today()
        return EngineSnapshot(
            experience=self.ledger.snapshot(),
            streak=self.streaks.snapshot(),
            display_streak=self.streaks.streak_as_of(today),
            total_cards=len(self.scheduler),
            due_count=self.scheduler.due_count(today),
            overall_accuracy=self.scheduler.overall_accuracy(),
            unlocked_achievements=[u.achievement_id for u in self.achievements.unlocked],
        )
