# Infrastructure Package
from .clock import FixedClock, SystemClock
from .repository import MasteryRepository
from .stores import InMemoryStore, JsonFileStore

__all__ = ["FixedClock", "SystemClock", "MasteryRepository", "InMemoryStore", "JsonFileStore"]
