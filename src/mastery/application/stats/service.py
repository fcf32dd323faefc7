"""
Study Stats Service: Application layer orchestrator.

Reads the card scheduler and enriches its cards with computed metrics.
Never mutates scheduling state.
"""

from dataclasses import dataclass
from datetime import date

from mastery.domain.constants import WEAK_ACCURACY_THRESHOLD
from mastery.domain.models import Subject, rounded_percentage

from ..card_scheduler import CardScheduler
from .metrics_calculator import CardInsights, MetricsCalculator


@dataclass
class SubjectMastery:
    subject: Subject
    total_cards: int
    due_cards: int
    mastered_cards: int
    accuracy: int  # across every review in the subject


class StudyStatsService:
    """
    Application service for per-card insights and per-subject mastery.
    """

    def __init__(
        self,
        scheduler: CardScheduler,
        calculator: MetricsCalculator | None = None,
    ):
        """
        Args:
            scheduler: The card scheduler to read from.
            calculator: Optional custom calculator; uses default if not provided.
        """
        self._scheduler = scheduler
        self._calc = calculator or MetricsCalculator()

    def get_insights(self, today: date) -> list[CardInsights]:
        return [self._calc.enrich(card, today) for card in self._scheduler.cards]

    def subject_mastery(self, today: date) -> list[SubjectMastery]:
        """
        One row per subject that has at least one card, in Subject order.
        """
        rows = []
        for subject in Subject:
            cards = self._scheduler.get_cards_by_subject(subject)
            if not cards:
                continue
            reviews = sum(c.total_reviews for c in cards)
            correct = sum(c.correct_count for c in cards)
            insights = [self._calc.enrich(c, today) for c in cards]
            rows.append(
                SubjectMastery(
                    subject=subject,
                    total_cards=len(cards),
                    due_cards=sum(1 for c in cards if c.is_due(today)),
                    mastered_cards=sum(1 for i in insights if i.mastered),
                    accuracy=rounded_percentage(correct, reviews),
                )
            )
        return rows

    def weak_cards(
        self,
        today: date,
        accuracy_threshold: int = WEAK_ACCURACY_THRESHOLD,
        lapse_threshold: int = 1,
    ) -> list[CardInsights]:
        """
        Identify reviewed cards that are "weak".

        A card is weak if:
        - accuracy < accuracy_threshold, OR
        - recent lapses >= lapse_threshold

        Unreviewed cards are never weak. Results are sorted weakest first.
        """
        weak = []
        for card in self.get_insights(today):
            if card.total_reviews == 0:
                continue

            is_weak = False

            # Low accuracy
            if card.accuracy < accuracy_threshold:
                is_weak = True

            # Recent lapses
            if card.recent_lapses >= lapse_threshold:
                is_weak = True

            if is_weak:
                weak.append(card)

        weak.sort(key=lambda c: (c.accuracy, -c.recent_lapses, c.card_id))
        return weak
