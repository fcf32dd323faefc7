"""
Spaced-repetition card scheduler.

Each card carries an interval (days) and a due date. A correct review grows
the interval geometrically up to a cap; an incorrect review (a lapse) drops it
back to the base interval for the card's difficulty. The next due date is
always anchored on the review's own calendar date.
"""

from collections.abc import Callable
from datetime import date, datetime, timedelta
from math import floor

from mastery.domain.errors import NotFoundError
from mastery.domain.models import (
    Difficulty,
    Flashcard,
    ReviewEntry,
    Subject,
    local_day,
    rounded_percentage,
)
from mastery.domain.ports import Clock

from .config import EngineConfig
from .id_service import generate_card_id


def next_interval(
    difficulty: Difficulty,
    interval: int,
    correct: bool,
    config: EngineConfig,
) -> int:
    """
    Compute the interval that follows a review.

    correct:   min(cap, max(base, round(interval * growth), interval + 1))
    incorrect: base
    """
    base = config.base_intervals.for_difficulty(difficulty)
    if not correct:
        return base
    grown = floor(interval * config.growth_factor + 0.5)  # round half up
    return min(config.interval_cap, max(base, grown, interval + 1))


class CardScheduler:
    """
    Owns the card collection and every card's scheduling state.

    All date-sensitive methods accept an explicit ``now``/``today``; when it is
    omitted the injected clock is consulted.
    """

    def __init__(
        self,
        cards: list[Flashcard],
        clock: Clock,
        config: EngineConfig,
        id_factory: Callable[[], str] = generate_card_id,
    ):
        self._cards = cards
        self._clock = clock
        self._config = config
        self._id_factory = id_factory

    @property
    def cards(self) -> list[Flashcard]:
        """All cards in insertion order (a copy; mutate through the scheduler)."""
        return list(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def _index(self, card_id: str) -> int:
        for i, card in enumerate(self._cards):
            if card.id == card_id:
                return i
        raise NotFoundError(card_id)

    def get_card(self, card_id: str) -> Flashcard:
        return self._cards[self._index(card_id)]

    def add_card(
        self,
        question: str,
        answer: str,
        subject: Subject | str,
        difficulty: Difficulty | str,
        now: datetime | None = None,
    ) -> Flashcard:
        """Create a card that is due immediately (interval 1, due on creation date)."""
        subject = Subject.parse(subject)
        difficulty = Difficulty.parse(difficulty)
        now = now or self._clock.now()

        card = Flashcard(
            id=self._id_factory(),
            question=question,
            answer=answer,
            subject=subject,
            difficulty=difficulty,
            due_date=local_day(now),
            created_at=now,
        )
        self._cards.append(card)
        return card

    def delete_card(self, card_id: str) -> Flashcard:
        """Permanently remove a card and its history. Returns the removed card."""
        return self._cards.pop(self._index(card_id))

    def get_due_cards(
        self, subject: Subject | str | None = None, today: date | None = None
    ) -> list[Flashcard]:
        """Cards due on or before ``today``, ordered by (due_date, id)."""
        today = today or self._clock.today()
        subject = Subject.parse(subject) if subject is not None else None
        due = [
            c
            for c in self._cards
            if c.is_due(today) and (subject is None or c.subject == subject)
        ]
        return sorted(due, key=lambda c: (c.due_date, c.id))

    def due_count(self, today: date | None = None) -> int:
        return len(self.get_due_cards(today=today))

    def get_cards_by_subject(self, subject: Subject | str) -> list[Flashcard]:
        subject = Subject.parse(subject)
        return [c for c in self._cards if c.subject == subject]

    def review_card(self, card_id: str, correct: bool, now: datetime | None = None) -> Flashcard:
        """
        Record a review outcome and reschedule the card.

        Raises:
            NotFoundError: If the card id is unknown.
        """
        card = self.get_card(card_id)
        now = now or self._clock.now()

        card.review_history.append(ReviewEntry(timestamp=now, correct=bool(correct)))
        card.interval = next_interval(card.difficulty, card.interval, bool(correct), self._config)
        card.due_date = local_day(now) + timedelta(days=card.interval)
        return card

    def get_accuracy(self, card_id: str) -> int:
        """Rounded accuracy percentage for one card (0 with no reviews)."""
        return self.get_card(card_id).accuracy

    def overall_accuracy(self) -> int:
        """Rounded accuracy percentage across every review of every card."""
        total = sum(c.total_reviews for c in self._cards)
        correct = sum(c.correct_count for c in self._cards)
        return rounded_percentage(correct, total)
