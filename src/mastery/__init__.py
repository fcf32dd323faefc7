"""Progress & mastery engine: XP, levels, streaks and spaced-repetition flashcards."""

from mastery.application import EngineConfig, MasteryEngine, dump_state, load_state
from mastery.consts import VERSION
from mastery.domain import (
    ActivityKind,
    CorruptStateError,
    Difficulty,
    EngineState,
    InvalidArgumentError,
    MasteryError,
    NotFoundError,
    OrderingError,
    Subject,
)

__version__ = VERSION

__all__ = [
    "EngineConfig",
    "MasteryEngine",
    "dump_state",
    "load_state",
    "ActivityKind",
    "Difficulty",
    "EngineState",
    "Subject",
    "MasteryError",
    "NotFoundError",
    "OrderingError",
    "InvalidArgumentError",
    "CorruptStateError",
]
