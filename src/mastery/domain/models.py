"""
Domain models for the progress and mastery engine.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from .constants import INITIAL_INTERVAL, STATE_SCHEMA_VERSION
from .errors import InvalidArgumentError


class _ParsableEnum(str, Enum):
    @classmethod
    def parse(cls, value: "str | _ParsableEnum"):
        """Coerce a raw value into a member, raising InvalidArgumentError if unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise InvalidArgumentError(
                f"Unknown {cls.__name__.lower()} {value!r} (expected one of: {allowed})"
            ) from None


class Subject(_ParsableEnum):
    MATHEMATICS = "Mathematics"
    SCIENCE = "Science"
    SINHALA = "Sinhala"
    ENGLISH = "English"
    HISTORY = "History"
    BUDDHISM = "Buddhism"


class Difficulty(_ParsableEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class ActivityKind(_ParsableEnum):
    """User events the engine converts into XP and streak updates."""

    TASK_COMPLETE = "task_complete"
    FOCUS_SESSION = "focus_session"
    CORRECT_REVIEW = "correct_review"
    INCORRECT_REVIEW = "incorrect_review"


def local_time(moment: datetime) -> datetime:
    """Convert ``moment`` into the process's local time zone (naive values are taken as local)."""
    return moment.astimezone()


def local_day(value: date) -> date:
    """Calendar day of ``value`` in the process's local time zone."""
    # datetime is a date subclass; plain dates are already days
    if isinstance(value, datetime):
        return local_time(value).date()
    return value


def rounded_percentage(part: int, whole: int) -> int:
    """Integer percentage of part/whole rounded half-up; 0 when whole is 0."""
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


@dataclass(frozen=True)
class ReviewEntry:
    """
    A single review log entry.

    Attributes:
        timestamp: Instant the review was recorded.
        correct: Whether the answer was recalled correctly.
    """

    timestamp: datetime
    correct: bool


@dataclass
class Flashcard:
    """
    A flashcard and its spaced-repetition state.

    ``id``, ``question``, ``answer``, ``subject`` and ``difficulty`` never change
    after creation. ``interval``, ``due_date`` and ``review_history`` are owned
    by the card scheduler.
    """

    id: str
    question: str
    answer: str
    subject: Subject
    difficulty: Difficulty
    due_date: date
    created_at: datetime
    interval: int = INITIAL_INTERVAL  # days
    review_history: list[ReviewEntry] = field(default_factory=list)

    @property
    def total_reviews(self) -> int:
        return len(self.review_history)

    @property
    def correct_count(self) -> int:
        return sum(1 for r in self.review_history if r.correct)

    @property
    def accuracy(self) -> int:
        """Rounded percentage of correct reviews (0 with no history)."""
        return rounded_percentage(self.correct_count, self.total_reviews)

    def is_due(self, today: date) -> bool:
        return self.due_date <= today


@dataclass
class ExperienceState:
    total_xp: int = 0


@dataclass
class StreakState:
    current_streak: int = 0
    last_activity_date: date | None = None
    longest_streak: int = 0


@dataclass
class ActivityCounters:
    tasks_completed: int = 0
    focus_sessions: int = 0
    cards_reviewed: int = 0
    correct_reviews: int = 0


@dataclass(frozen=True)
class UnlockedAchievement:
    achievement_id: str
    unlocked_at: datetime


@dataclass
class EngineState:
    """
    The whole persisted state owned by the mastery engine.

    The engine mutates this object in place; loading it before and saving it
    after each operation is the caller's responsibility.
    """

    experience: ExperienceState = field(default_factory=ExperienceState)
    streak: StreakState = field(default_factory=StreakState)
    cards: list[Flashcard] = field(default_factory=list)
    counters: ActivityCounters = field(default_factory=ActivityCounters)
    achievements: list[UnlockedAchievement] = field(default_factory=list)
    schema_version: int = STATE_SCHEMA_VERSION
