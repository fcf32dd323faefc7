"""
Mastery Repository: loads and saves EngineState through a KeyValueStore.

Wraps each engine operation in an atomic load-before/save-after:

    with MasteryRepository(store).session() as state:
        MasteryEngine(clock, state, config).complete_task()
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from mastery.application.serialization import dump_state, load_state
from mastery.domain.constants import DEFAULT_STATE_KEY
from mastery.domain.models import EngineState
from mastery.domain.ports import KeyValueStore

logger = logging.getLogger(__name__)


class MasteryRepository:
    def __init__(self, store: KeyValueStore, key: str = DEFAULT_STATE_KEY):
        self.store = store
        self.key = key

    def load(self) -> EngineState:
        """Load the stored state, or a fresh one if nothing is stored yet."""
        raw = self.store.get(self.key)
        if raw is None:
            logger.debug(f"No state stored under {self.key!r}; starting fresh")
            return EngineState()
        state = load_state(raw)
        logger.debug(f"Loaded state {self.key!r} ({len(state.cards)} cards)")
        return state

    def save(self, state: EngineState) -> None:
        self.store.set(self.key, dump_state(state))
        logger.debug(f"Saved state {self.key!r} ({len(state.cards)} cards)")

    def clear(self) -> bool:
        return self.store.delete(self.key)

    @contextmanager
    def session(self) -> Iterator[EngineState]:
        """
        Yield the loaded state and save it when the block exits cleanly.

        If the block raises, nothing is written and the stored state is left
        exactly as it was.
        """
        state = self.load()
        yield state
        self.save(state)
