"""
Lossless conversion between EngineState and its flat JSON document.

The domain dataclasses are validated and dumped through a pydantic
TypeAdapter, so dates, datetimes and enums round-trip exactly and the dumped
text is stable: ``dump_state(load_state(raw)) == raw`` for any ``raw``
produced by ``dump_state``.
"""

from typing import Any

from pydantic import TypeAdapter, ValidationError

from mastery.domain.errors import CorruptStateError
from mastery.domain.models import EngineState

_adapter = TypeAdapter(EngineState)


def state_to_dict(state: EngineState) -> dict[str, Any]:
    """JSON-compatible dict of the whole state."""
    return _adapter.dump_python(state, mode="json")


def state_from_dict(data: dict[str, Any]) -> EngineState:
    try:
        return _adapter.validate_python(data)
    except ValidationError as e:
        raise CorruptStateError(f"Invalid engine state: {e}") from e


def dump_state(state: EngineState) -> str:
    return _adapter.dump_json(state).decode("utf-8")


def load_state(raw: str | bytes) -> EngineState:
    """
    Parse a document produced by ``dump_state``.

    Raises:
        CorruptStateError: If the document is not valid JSON or does not
            match the state schema.
    """
    try:
        return _adapter.validate_json(raw)
    except ValidationError as e:
        raise CorruptStateError(f"Invalid engine state: {e}") from e
