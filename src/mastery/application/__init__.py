# Application Package
from .config import BaseIntervals, EngineConfig, XpRewards, resolve_config
from .engine import ActivityResult, EngineSnapshot, MasteryEngine, ReviewOutcome
from .serialization import dump_state, load_state

__all__ = [
    "BaseIntervals",
    "EngineConfig",
    "XpRewards",
    "resolve_config",
    "ActivityResult",
    "EngineSnapshot",
    "MasteryEngine",
    "ReviewOutcome",
    "dump_state",
    "load_state",
]
