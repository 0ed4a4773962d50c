"""Tests for the rebirth (prestige) reset."""

import math

from cubeburst.data.upgrades import REBIRTH_UPGRADES, RebirthUpgradeKind, UpgradeKind
from cubeburst.engine.economy import compute_derived
from cubeburst.engine.game_state import GameState
from cubeburst.engine.rebirth import (
    can_rebirth,
    cube_count_for,
    get_rebirth_cost,
    perform_rebirth,
    rebirth_cost_of,
)

DOUBLE = RebirthUpgradeKind.DOUBLE_CUBES


def _rich_state(score: float = 150_000) -> GameState:
    state = GameState()
    state.score = score
    state.upgrade_levels[UpgradeKind.SCORE_MULTIPLIER] = 4
    state.upgrade_levels[UpgradeKind.EXPLOSIVENESS] = 2
    state.stats.total_clicks = 999
    compute_derived(state)
    return state


# ── Costs ────────────────────────────────────────────────────────────────────

def test_double_cubes_cost_curve():
    assert rebirth_cost_of(0) == 100_000
    assert rebirth_cost_of(1) == 1_000_000
    assert rebirth_cost_of(2) == 10_000_000


def test_cost_follows_rebirth_level():
    state = GameState()
    state.rebirth_upgrade_levels[DOUBLE] = 1
    assert get_rebirth_cost(state) == 1_000_000


def test_cube_count_doubles_per_level():
    assert cube_count_for({DOUBLE: 0}) == 1
    assert cube_count_for({DOUBLE: 1}) == 2
    assert cube_count_for({DOUBLE: 3}) == 8
    assert cube_count_for({}) == 1


# ── Reset ────────────────────────────────────────────────────────────────────

def test_cannot_rebirth_below_cost():
    state = _rich_state(score=99_999)
    assert not can_rebirth(state)
    assert perform_rebirth(state) is None
    assert state.score == 99_999
    assert state.level(UpgradeKind.SCORE_MULTIPLIER) == 4


def test_rebirth_resets_score_and_upgrades():
    state = _rich_state()
    reborn = perform_rebirth(state, DOUBLE)

    assert reborn is not None
    assert reborn.score == 0
    assert all(level == 0 for level in reborn.upgrade_levels.values())
    assert reborn.derived.score_multiplier == 1.0
    assert reborn.derived.fragments_per_axis == 3
    assert reborn.stats.total_clicks == 0


def test_rebirth_keeps_permanent_progress():
    state = _rich_state()
    state.has_won = True
    reborn = perform_rebirth(state, DOUBLE)

    assert reborn.rebirth_level == 1
    assert reborn.rebirth_upgrade_level(DOUBLE) == 1
    assert reborn.cube_count == 2
    assert reborn.has_won


def test_rebirth_does_not_touch_input_state():
    """The reset is built as a new state; the old one is never half-reset."""
    state = _rich_state()
    reborn = perform_rebirth(state, DOUBLE)

    assert reborn is not state
    assert state.score == 150_000
    assert state.level(UpgradeKind.SCORE_MULTIPLIER) == 4
    assert state.rebirth_upgrade_level(DOUBLE) == 0
    assert state.cube_count == 1


def test_second_rebirth_costs_ten_times_more():
    first = perform_rebirth(_rich_state(), DOUBLE)
    first.score = 999_999
    assert perform_rebirth(first, DOUBLE) is None

    first.score = 1_000_000
    second = perform_rebirth(first, DOUBLE)
    assert second.cube_count == 4
    assert second.rebirth_level == 2


def test_no_rebirth_past_max_level():
    max_level = REBIRTH_UPGRADES[DOUBLE].max_level
    state = GameState(score=1e300)
    state.rebirth_upgrade_levels[DOUBLE] = max_level

    assert get_rebirth_cost(state) == math.inf
    assert not can_rebirth(state)
    assert perform_rebirth(state) is None
