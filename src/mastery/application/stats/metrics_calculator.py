"""
Metrics calculator for deriving insights from raw flashcard state.

This is a pure computation module with no I/O.
"""

from dataclasses import dataclass
from datetime import date

from mastery.domain.constants import MASTERED_INTERVAL_DAYS, RECENT_REVIEW_WINDOW
from mastery.domain.models import Difficulty, Flashcard, ReviewEntry, Subject


@dataclass
class CardInsights:
    """
    Card state enriched with computed metrics.
    """

    # Original card
    card_id: str
    subject: Subject
    difficulty: Difficulty
    interval: int
    due_date: date
    total_reviews: int
    accuracy: int

    # Computed metrics
    lapses: int  # incorrect reviews, all time
    recent_lapses: int  # incorrect reviews in the recent window
    lapse_rate: float | None  # lapses / reviews
    correct_run: int  # consecutive correct answers ending at the latest review
    days_overdue: int  # Negative if not yet due
    mastered: bool


class MetricsCalculator:
    """
    Computes derived metrics from Flashcard objects.

    Stateless and side-effect free.
    """

    def enrich(self, card: Flashcard, today: date) -> CardInsights:
        lapses = self._count_lapses(card.review_history)
        return CardInsights(
            card_id=card.id,
            subject=card.subject,
            difficulty=card.difficulty,
            interval=card.interval,
            due_date=card.due_date,
            total_reviews=card.total_reviews,
            accuracy=card.accuracy,
            lapses=lapses,
            recent_lapses=self._count_lapses(card.review_history[-RECENT_REVIEW_WINDOW:]),
            lapse_rate=self._compute_lapse_rate(card.total_reviews, lapses),
            correct_run=self._compute_correct_run(card.review_history),
            days_overdue=(today - card.due_date).days,
            mastered=card.interval >= MASTERED_INTERVAL_DAYS,
        )

    def _count_lapses(self, reviews: list[ReviewEntry]) -> int:
        return sum(1 for r in reviews if not r.correct)

    def _compute_lapse_rate(self, reviews: int, lapses: int) -> float | None:
        if reviews == 0:
            return None
        return lapses / reviews

    def _compute_correct_run(self, reviews: list[ReviewEntry]) -> int:
        run = 0
        for review in reversed(reviews):
            if not review.correct:
                break
            run += 1
        return run
