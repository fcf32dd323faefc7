"""Exceptions raised by the mastery engine.

Every error is raised synchronously to the caller; the engine performs no I/O
and therefore never retries.
"""


class MasteryError(Exception):
    """Base class for all engine errors."""


class NotFoundError(MasteryError, LookupError):
    """Raised when a card id is unknown to the scheduler."""

    def __init__(self, card_id: str):
        self.card_id = card_id
        super().__init__(f"Card not found: {card_id}")


class OrderingError(MasteryError, ValueError):
    """Raised when an activity date is earlier than the last recorded one."""


class InvalidArgumentError(MasteryError, ValueError):
    """Raised for negative XP amounts and unknown enum values."""


class CorruptStateError(MasteryError):
    """Raised when a persisted state document cannot be validated."""
