"""
JSON File Store: Infrastructure adapter for the key-value store port.

The whole store is one JSON object on disk mapping keys to string values.
Every write re-serializes the object to a sibling temp file and atomically
replaces the original, so a crash never leaves a half-written store.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from mastery.domain.errors import CorruptStateError
from mastery.domain.ports import KeyValueStore

logger = logging.getLogger(__name__)


class JsonFileStore(KeyValueStore):
    def __init__(self, path: Path):
        self.path = Path(path)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as e:
            logger.warning(f"Store file {self.path} is not valid JSON: {e}")
            raise CorruptStateError(f"Store file {self.path} is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            logger.warning(f"Store file {self.path} does not contain a JSON object")
            raise CorruptStateError(f"Store file {self.path} does not contain a JSON object")
        return data

    def _write_all(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug(f"Wrote {len(data)} key(s) to {self.path}")

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> bool:
        data = self._read_all()
        if key not in data:
            return False
        del data[key]
        self._write_all(data)
        return True
