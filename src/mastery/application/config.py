from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from mastery.domain.constants import (
    DEFAULT_BASE_INTERVALS,
    DEFAULT_GROWTH_FACTOR,
    DEFAULT_INTERVAL_CAP,
    DEFAULT_STATE_KEY,
    DEFAULT_XP_REWARDS,
)
from mastery.domain.models import ActivityKind, Difficulty

def config_files() -> list[Path]:
    """Candidate TOML config locations, in priority order."""
    return [
        Path.home() / ".config/mastery/config.toml",
        Path.home() / ".mastery.toml",
    ]


class BaseIntervals(BaseModel):
    """Base review spacing per difficulty, in days."""

    easy: int = Field(default=DEFAULT_BASE_INTERVALS["easy"], ge=1)
    medium: int = Field(default=DEFAULT_BASE_INTERVALS["medium"], ge=1)
    hard: int = Field(default=DEFAULT_BASE_INTERVALS["hard"], ge=1)

    @model_validator(mode="after")
    def check_ordering(self) -> "BaseIntervals":
        if not (self.easy >= self.medium >= self.hard):
            raise ValueError(
                f"base intervals must satisfy easy >= medium >= hard "
                f"(got easy={self.easy}, medium={self.medium}, hard={self.hard})"
            )
        return self

    def for_difficulty(self, difficulty: Difficulty) -> int:
        return getattr(self, Difficulty.parse(difficulty).value)


class XpRewards(BaseModel):
    """XP granted per activity kind."""

    task_complete: int = Field(default=DEFAULT_XP_REWARDS["task_complete"], ge=0)
    correct_review: int = Field(default=DEFAULT_XP_REWARDS["correct_review"], ge=0)
    incorrect_review: int = Field(default=DEFAULT_XP_REWARDS["incorrect_review"], ge=0)
    focus_session: int = Field(default=DEFAULT_XP_REWARDS["focus_session"], ge=0)

    def for_activity(self, kind: ActivityKind) -> int:
        return getattr(self, ActivityKind.parse(kind).value)


class EngineConfig(BaseSettings):
    """
    Configuration model for the mastery engine.
    Supports loading from:
    1. Manual overrides (CLI / embedding code)
    2. Environment variables (MASTERY_*, nested with __)
    3. Config file (~/.config/mastery/config.toml or ~/.mastery.toml)
    """

    model_config = SettingsConfigDict(
        env_prefix="MASTERY_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Scheduling
    growth_factor: float = Field(default=DEFAULT_GROWTH_FACTOR, gt=1.0)
    base_intervals: BaseIntervals = Field(default_factory=BaseIntervals)
    interval_cap: int = Field(default=DEFAULT_INTERVAL_CAP, ge=1)

    # Gamification
    xp_rewards: XpRewards = Field(default_factory=XpRewards)
    qualifying_activities: frozenset[ActivityKind] = frozenset(
        {
            ActivityKind.TASK_COMPLETE,
            ActivityKind.FOCUS_SESSION,
            ActivityKind.CORRECT_REVIEW,
        }
    )
    achievement_bonus: bool = True

    # Persistence
    state_file: Path = Field(default_factory=lambda: Path.home() / ".config/mastery/state.json")
    state_key: str = DEFAULT_STATE_KEY

    # Logging: 1 is INFO, 2 or more enables DEBUG for the mastery loggers
    verbose: int = Field(default=1, ge=0)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # First existing file wins
        toml_file = None
        for f in config_files():
            if f.exists():
                toml_file = f
                break

        # Earlier sources take priority
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("state_file", mode="before")
    @classmethod
    def resolve_state_file(cls, v: Any) -> Path:
        return Path(v).expanduser()

    @model_validator(mode="after")
    def check_cap(self) -> "EngineConfig":
        if self.interval_cap < self.base_intervals.easy:
            raise ValueError(
                f"interval_cap ({self.interval_cap}) must be at least the easy base "
                f"interval ({self.base_intervals.easy})"
            )
        return self

    def is_qualifying(self, kind: ActivityKind) -> bool:
        return ActivityKind.parse(kind) in self.qualifying_activities


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> EngineConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in EngineConfig
    2. ~/.config/mastery/config.toml (if exists)
    3. Environment variables (MASTERY_*)
    4. cli_overrides (passed from Typer); None values are ignored
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return EngineConfig(**overrides)
