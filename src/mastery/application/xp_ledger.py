"""
XP ledger: converts accumulated experience into levels.

The level curve is cumulative: level ``L`` requires
``T(L) = XP_PER_LEVEL_BASE * L * (L - 1) / 2`` total XP, so levels start at
0, 100, 300, 600, 1000, ... and each level costs 100 XP more than the last.
"""

from dataclasses import dataclass
from math import isqrt

from mastery.domain.achievements import get_title
from mastery.domain.constants import XP_PER_LEVEL_BASE
from mastery.domain.errors import InvalidArgumentError
from mastery.domain.models import ExperienceState


def xp_threshold(level: int) -> int:
    """Cumulative XP required to reach ``level`` (T(1) = 0)."""
    if level < 1:
        raise InvalidArgumentError(f"Level must be >= 1, got {level}")
    return XP_PER_LEVEL_BASE * level * (level - 1) // 2


def level_for_xp(total_xp: int) -> int:
    """Largest level L such that xp_threshold(L) <= total_xp."""
    if total_xp < 0:
        raise InvalidArgumentError(f"XP must be non-negative, got {total_xp}")
    # Solve L * (L - 1) <= 2 * xp / base for the closed-form estimate
    n = 2 * total_xp // XP_PER_LEVEL_BASE
    level = (1 + isqrt(1 + 4 * n)) // 2
    while xp_threshold(level + 1) <= total_xp:
        level += 1
    while level > 1 and xp_threshold(level) > total_xp:
        level -= 1
    return level


def progress_to_next_level(total_xp: int) -> float:
    """Percentage of the way from the current level to the next, in [0, 100)."""
    level = level_for_xp(total_xp)
    floor = xp_threshold(level)
    span = xp_threshold(level + 1) - floor
    return 100.0 * (total_xp - floor) / span


@dataclass(frozen=True)
class ExperienceSnapshot:
    total_xp: int
    level: int
    progress_to_next_level: float
    xp_into_level: int
    xp_for_next_level: int
    title: str

    @classmethod
    def from_total(cls, total_xp: int) -> "ExperienceSnapshot":
        level = level_for_xp(total_xp)
        floor = xp_threshold(level)
        return cls(
            total_xp=total_xp,
            level=level,
            progress_to_next_level=progress_to_next_level(total_xp),
            xp_into_level=total_xp - floor,
            xp_for_next_level=xp_threshold(level + 1) - floor,
            title=get_title(level),
        )


class XpLedger:
    """
    Owns an ExperienceState and exposes the only paths that change it.

    Level-up detection is left to the caller: compare ``level`` on the
    snapshots before and after ``add_xp``.
    """

    def __init__(self, state: ExperienceState):
        self._state = state

    @property
    def total_xp(self) -> int:
        return self._state.total_xp

    def snapshot(self) -> ExperienceSnapshot:
        return ExperienceSnapshot.from_total(self._state.total_xp)

    def add_xp(self, amount: int) -> ExperienceSnapshot:
        """
        Add ``amount`` XP and return the updated snapshot.

        Raises:
            InvalidArgumentError: If amount is negative or not an integer.
        """
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise InvalidArgumentError(f"XP amount must be an integer, got {amount!r}")
        if amount < 0:
            raise InvalidArgumentError(f"XP amount must be non-negative, got {amount}")
        self._state.total_xp += amount
        return self.snapshot()

    def reset(self) -> ExperienceSnapshot:
        self._state.total_xp = 0
        return self.snapshot()
