import json
from datetime import date, timedelta

import pytest

from mastery.application.config import EngineConfig
from mastery.application.engine import MasteryEngine
from mastery.application.serialization import (
    dump_state,
    load_state,
    state_from_dict,
    state_to_dict,
)
from mastery.domain.errors import CorruptStateError
from mastery.domain.models import Difficulty, EngineState, Subject


@pytest.fixture
def busy_engine(clock, id_factory):
    engine = MasteryEngine(clock, config=EngineConfig(), id_factory=id_factory)
    a = engine.add_card("Capital of Sri Lanka?", "Sri Jayawardenepura Kotte", "History", "easy")
    b = engine.add_card("7 * 8?", "56", "Mathematics", "hard")
    engine.add_card("H2O?", "Water", "Science", "medium")
    engine.review_card(a.id, True)
    engine.review_card(b.id, False)
    engine.complete_task()
    clock.advance(days=1)
    engine.complete_focus_session()
    engine.review_card(b.id, True)
    return engine


def test_round_trip_is_byte_for_byte(busy_engine):
    raw = dump_state(busy_engine.state)
    restored = load_state(raw)

    assert restored == busy_engine.state
    assert dump_state(restored) == raw


def test_round_trip_preserves_scheduling_fields(busy_engine):
    restored = load_state(dump_state(busy_engine.state))

    assert restored.experience.total_xp == busy_engine.state.experience.total_xp
    assert restored.streak.current_streak == 2
    for original, copy in zip(busy_engine.state.cards, restored.cards):
        assert copy.id == original.id
        assert copy.interval == original.interval
        assert copy.due_date == original.due_date
        assert copy.review_history == original.review_history
        assert isinstance(copy.subject, Subject)
        assert isinstance(copy.difficulty, Difficulty)


def test_restored_state_drives_a_new_engine(busy_engine, clock):
    restored = load_state(dump_state(busy_engine.state))
    engine = MasteryEngine(clock, restored, EngineConfig())

    assert [c.id for c in engine.get_due_cards()] == [
        c.id for c in busy_engine.get_due_cards()
    ]
    clock.advance(days=1)
    assert engine.complete_task().streak.current_streak == 3


def test_document_is_flat_json(busy_engine):
    doc = json.loads(dump_state(busy_engine.state))
    assert set(doc) == {"experience", "streak", "cards", "counters", "achievements", "schema_version"}
    card = doc["cards"][0]
    assert card["subject"] == "History"
    assert card["difficulty"] == "easy"
    assert card["due_date"] == (busy_engine.clock.today() - timedelta(days=1) + timedelta(days=4)).isoformat()
    assert card["review_history"][0]["correct"] is True


def test_empty_state_round_trip():
    raw = dump_state(EngineState())
    assert load_state(raw) == EngineState()


def test_dict_round_trip(busy_engine):
    data = state_to_dict(busy_engine.state)
    assert state_from_dict(data) == busy_engine.state


def test_streak_date_serialized_as_iso():
    state = EngineState()
    state.streak.last_activity_date = date(2026, 3, 2)
    state.streak.current_streak = 4
    assert json.loads(dump_state(state))["streak"]["last_activity_date"] == "2026-03-02"


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        '{"cards": [{"id": "x"}]}',
        '{"experience": {"total_xp": "lots"}}',
        '{"cards": [{"id": "c", "question": "q", "answer": "a", "subject": "Art",'
        ' "difficulty": "easy", "due_date": "2026-03-02", "created_at": "2026-03-02T10:00:00"}]}',
    ],
)
def test_corrupt_documents_raise(raw):
    with pytest.raises(CorruptStateError):
        load_state(raw)
