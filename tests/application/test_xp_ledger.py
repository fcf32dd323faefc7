import pytest

from mastery.application.xp_ledger import (
    ExperienceSnapshot,
    XpLedger,
    level_for_xp,
    progress_to_next_level,
    xp_threshold,
)
from mastery.domain.errors import InvalidArgumentError
from mastery.domain.models import ExperienceState


@pytest.fixture
def ledger():
    return XpLedger(ExperienceState())


# ---------- Level curve ----------


def test_threshold_curve_starts_at_zero_and_is_convex():
    assert xp_threshold(1) == 0
    assert [xp_threshold(level) for level in range(1, 6)] == [0, 100, 300, 600, 1000]

    gaps = [xp_threshold(level + 1) - xp_threshold(level) for level in range(1, 50)]
    assert all(b > a for a, b in zip(gaps, gaps[1:]))


@pytest.mark.parametrize("level", range(2, 60))
def test_level_boundaries_are_exact(level):
    assert level_for_xp(xp_threshold(level)) == level
    assert level_for_xp(xp_threshold(level) - 1) == level - 1


def test_level_for_zero_xp_is_one():
    assert level_for_xp(0) == 1


def test_level_for_huge_xp_matches_threshold_definition():
    total = 10**12
    level = level_for_xp(total)
    assert xp_threshold(level) <= total < xp_threshold(level + 1)


def test_progress_is_zero_at_threshold_and_below_hundred_just_before_next():
    assert progress_to_next_level(100) == 0.0
    assert progress_to_next_level(150) == 25.0
    just_below = progress_to_next_level(299)
    assert 99.0 < just_below < 100.0


def test_progress_never_reports_hundred():
    for total in range(0, 5000):
        assert 0.0 <= progress_to_next_level(total) < 100.0


def test_invalid_inputs_to_curve():
    with pytest.raises(InvalidArgumentError):
        xp_threshold(0)
    with pytest.raises(InvalidArgumentError):
        level_for_xp(-1)


# ---------- Ledger ----------


def test_add_xp_accumulates_and_levels_are_monotonic(ledger):
    amounts = [0, 5, 95, 1, 199, 300, 0, 42, 1000]
    levels = []
    for amount in amounts:
        levels.append(ledger.add_xp(amount).level)

    assert ledger.total_xp == sum(amounts)
    assert levels == sorted(levels)


def test_add_zero_is_noop_returning_snapshot(ledger):
    ledger.add_xp(120)
    before = ledger.snapshot()
    after = ledger.add_xp(0)
    assert after == before


def test_negative_amount_rejected_and_state_unchanged(ledger):
    ledger.add_xp(50)
    with pytest.raises(InvalidArgumentError):
        ledger.add_xp(-1)
    assert ledger.total_xp == 50


@pytest.mark.parametrize("amount", [1.5, "10", True, None])
def test_non_integer_amount_rejected(ledger, amount):
    with pytest.raises(InvalidArgumentError):
        ledger.add_xp(amount)


def test_snapshot_fields():
    snap = ExperienceSnapshot.from_total(350)
    assert snap.level == 3
    assert snap.xp_into_level == 50
    assert snap.xp_for_next_level == 300
    assert snap.progress_to_next_level == pytest.approx(100 * 50 / 300)
    assert snap.title == "Apprentice"


def test_reaching_threshold_moves_to_next_level_at_zero_progress(ledger):
    ledger.add_xp(99)
    snap = ledger.add_xp(1)
    assert snap.level == 2
    assert snap.progress_to_next_level == 0.0


def test_reset(ledger):
    ledger.add_xp(700)
    snap = ledger.reset()
    assert snap.total_xp == 0
    assert snap.level == 1
