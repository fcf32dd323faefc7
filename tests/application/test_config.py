from pathlib import Path

import pytest
from pydantic import ValidationError

from mastery.application.config import EngineConfig, resolve_config
from mastery.domain.models import ActivityKind, Difficulty


def test_defaults():
    config = EngineConfig()
    assert config.growth_factor == 2.0
    assert config.interval_cap == 90
    assert config.base_intervals.for_difficulty(Difficulty.EASY) == 4
    assert config.base_intervals.for_difficulty("medium") == 2
    assert config.base_intervals.for_difficulty(Difficulty.HARD) == 1
    assert config.xp_rewards.for_activity(ActivityKind.TASK_COMPLETE) == 10
    assert config.xp_rewards.for_activity("correct_review") == 5
    assert config.is_qualifying(ActivityKind.TASK_COMPLETE)
    assert not config.is_qualifying(ActivityKind.INCORRECT_REVIEW)


@pytest.mark.parametrize(
    "overrides",
    [
        {"growth_factor": 1.0},
        {"growth_factor": 0.5},
        {"base_intervals": {"easy": 1, "medium": 2, "hard": 1}},
        {"base_intervals": {"easy": 4, "medium": 2, "hard": 0}},
        {"interval_cap": 3},
        {"xp_rewards": {"task_complete": -1}},
    ],
)
def test_invalid_values_rejected(overrides):
    with pytest.raises(ValidationError):
        EngineConfig(**overrides)


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("MASTERY_GROWTH_FACTOR", "1.5")
    monkeypatch.setenv("MASTERY_XP_REWARDS__TASK_COMPLETE", "20")
    config = EngineConfig()
    assert config.growth_factor == 1.5
    assert config.xp_rewards.task_complete == 20
    assert config.xp_rewards.correct_review == 5


def test_toml_file_is_read(mock_home):
    cfg = mock_home / ".config/mastery/config.toml"
    cfg.parent.mkdir(parents=True)
    cfg.write_text("interval_cap = 30\n\n[xp_rewards]\nfocus_session = 40\n")

    config = EngineConfig()
    assert config.interval_cap == 30
    assert config.xp_rewards.focus_session == 40


def test_precedence_overrides_beat_env_beat_toml(mock_home, monkeypatch):
    cfg = mock_home / ".mastery.toml"
    cfg.write_text("interval_cap = 30\ngrowth_factor = 3.0\nverbose = 3\n")
    monkeypatch.setenv("MASTERY_INTERVAL_CAP", "45")
    monkeypatch.setenv("MASTERY_GROWTH_FACTOR", "2.5")

    config = resolve_config({"interval_cap": 60, "growth_factor": None})
    assert config.interval_cap == 60
    assert config.growth_factor == 2.5
    assert config.verbose == 3


def test_state_file_defaults_under_home(mock_home):
    config = resolve_config()
    assert config.state_file == mock_home / ".config/mastery/state.json"


def test_state_file_expands_user(mock_home):
    config = resolve_config({"state_file": "~/custom/state.json"})
    assert config.state_file == Path(mock_home) / "custom/state.json"
