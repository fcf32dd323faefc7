# Domain Package
from .achievements import ACHIEVEMENTS, Achievement, AchievementCategory, Rarity, get_title
from .errors import (
    CorruptStateError,
    InvalidArgumentError,
    MasteryError,
    NotFoundError,
    OrderingError,
)
from .models import (
    ActivityCounters,
    ActivityKind,
    Difficulty,
    EngineState,
    ExperienceState,
    Flashcard,
    ReviewEntry,
    StreakState,
    Subject,
    UnlockedAchievement,
)
from .ports import Clock, KeyValueStore

__all__ = [
    "ACHIEVEMENTS",
    "Achievement",
    "AchievementCategory",
    "Rarity",
    "get_title",
    "MasteryError",
    "NotFoundError",
    "OrderingError",
    "InvalidArgumentError",
    "CorruptStateError",
    "ActivityCounters",
    "ActivityKind",
    "Difficulty",
    "EngineState",
    "ExperienceState",
    "Flashcard",
    "ReviewEntry",
    "StreakState",
    "Subject",
    "UnlockedAchievement",
    "Clock",
    "KeyValueStore",
]
