"""
Ports (interfaces) for the engine's external collaborators.

These define the contract that infrastructure adapters must implement.
The engine depends on these abstractions, never on concrete adapters.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime

from .models import local_day


class Clock(ABC):
    """
    Port supplying the current instant.

    Implementations:
        - SystemClock: Wall-clock time in the process's local time zone.
        - FixedClock: A settable instant for tests and replays.
    """

    @abstractmethod
    def now(self) -> datetime:
        """Return the current instant."""
        pass

    def today(self) -> date:
        """Return the local calendar date of ``now()``."""
        return local_day(self.now())


class KeyValueStore(ABC):
    """
    Port for the generic string key-value store that persists engine state.

    Implementations:
        - InMemoryStore: A plain dict, for tests and embedding.
        - JsonFileStore: A single JSON object on disk.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove ``key``. Returns True if it existed."""
        pass
