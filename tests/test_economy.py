"""Tests for the economy engine."""

import math

import pytest

from cubeburst.data.upgrades import ALL_UPGRADES, UpgradeDef, UpgradeKind
from cubeburst.engine.economy import (
    PurchaseResult,
    can_afford_upgrade,
    compute_derived,
    cost_of,
    format_number,
    get_upgrade_cost,
    purchase_upgrade,
)
from cubeburst.engine.game_state import GameState


def test_format_number_small():
    assert format_number(0) == "0"
    assert format_number(5) == "5"
    assert format_number(99.5) == "99.5"


def test_format_number_thousands():
    result = format_number(1500)
    assert "K" in result
    assert "1.5" in result


def test_format_number_millions():
    result = format_number(2_300_000)
    assert "M" in result


# ── Cost curve ───────────────────────────────────────────────────────────────

def test_score_multiplier_costs_match_table():
    assert cost_of(UpgradeKind.SCORE_MULTIPLIER, 0) == 50
    assert cost_of(UpgradeKind.SCORE_MULTIPLIER, 1) == 100
    assert cost_of(UpgradeKind.SCORE_MULTIPLIER, 2) == 200


def test_costs_are_floored():
    # 10 * 1.5^2 = 22.5
    assert cost_of(UpgradeKind.EXPLOSIVENESS, 1) == 15
    assert cost_of(UpgradeKind.EXPLOSIVENESS, 2) == 22


def test_costs_strictly_increase_with_level():
    for kind in ALL_UPGRADES:
        costs = [cost_of(kind, level) for level in range(30)]
        assert all(b > a for a, b in zip(costs, costs[1:])), kind


def test_upgrade_cost_tracks_state_level():
    state = GameState()
    cost1 = get_upgrade_cost(state, UpgradeKind.FRAGMENT_COUNT)
    state.upgrade_levels[UpgradeKind.FRAGMENT_COUNT] = 1
    cost2 = get_upgrade_cost(state, UpgradeKind.FRAGMENT_COUNT)
    assert cost1 == 25
    assert cost2 == 45


def test_growth_factor_must_exceed_one():
    with pytest.raises(ValueError):
        UpgradeDef(
            kind=UpgradeKind.EXPLOSIVENESS,
            name="Flat",
            description="",
            effect="",
            base_cost=10,
            growth_factor=1.0,
        )


# ── Derived parameters ───────────────────────────────────────────────────────

def test_base_derived_parameters():
    derived = compute_derived(GameState())
    assert derived.score_multiplier == 1.0
    assert derived.explosion_force == pytest.approx(0.3)
    assert derived.fragments_per_axis == 3


def test_score_multiplier_level_three():
    state = GameState()
    state.upgrade_levels[UpgradeKind.SCORE_MULTIPLIER] = 3
    assert compute_derived(state).score_multiplier == pytest.approx(4.0)


def test_explosiveness_raises_force_and_multiplier():
    state = GameState()
    state.upgrade_levels[UpgradeKind.EXPLOSIVENESS] = 1
    derived = compute_derived(state)
    assert derived.score_multiplier == pytest.approx(1.2)
    assert derived.explosion_force == pytest.approx(0.375)


def test_fragments_per_axis_rounds_half_up():
    state = GameState()
    state.upgrade_levels[UpgradeKind.FRAGMENT_COUNT] = 1
    # 3 * 1.5 = 4.5 -> 5
    assert compute_derived(state).fragments_per_axis == 5
    state.upgrade_levels[UpgradeKind.FRAGMENT_COUNT] = 2
    assert compute_derived(state).fragments_per_axis == 6


def test_all_upgrades_combine():
    state = GameState()
    state.upgrade_levels.update({
        UpgradeKind.EXPLOSIVENESS: 2,
        UpgradeKind.FRAGMENT_COUNT: 1,
        UpgradeKind.SCORE_MULTIPLIER: 1,
        UpgradeKind.EXPLOSION_FORCE: 1,
        UpgradeKind.AUTO_CLICKER: 1,
    })
    derived = compute_derived(state)
    assert derived.score_multiplier == pytest.approx(1 + 1.0 + 0.4 + 0.3 + 0.25 + 0.5)
    assert derived.explosion_force == pytest.approx(0.3 * (1 + 0.5 + 0.5))
    assert state.derived is derived


# ── Purchases ────────────────────────────────────────────────────────────────

def test_purchase_rejected_leaves_state_untouched():
    state = GameState()
    state.score = 49
    result = purchase_upgrade(state, UpgradeKind.SCORE_MULTIPLIER)
    assert result is PurchaseResult.INSUFFICIENT_FUNDS
    assert not result
    assert state.score == 49
    assert state.level(UpgradeKind.SCORE_MULTIPLIER) == 0
    assert state.derived.score_multiplier == 1.0


def test_purchase_deducts_cost_and_recomputes():
    state = GameState()
    state.score = 60
    assert can_afford_upgrade(state, UpgradeKind.SCORE_MULTIPLIER)
    result = purchase_upgrade(state, UpgradeKind.SCORE_MULTIPLIER)
    assert result is PurchaseResult.PURCHASED
    assert result
    assert state.score == 10
    assert state.level(UpgradeKind.SCORE_MULTIPLIER) == 1
    assert state.derived.score_multiplier == pytest.approx(2.0)


def test_exact_score_is_enough():
    state = GameState()
    state.score = 10
    assert purchase_upgrade(state, UpgradeKind.EXPLOSIVENESS)
    assert state.score == 0


def test_three_score_multipliers():
    """50 + 100 + 200 buys three levels and a 4x multiplier."""
    state = GameState()
    state.score = 350
    for _ in range(3):
        assert purchase_upgrade(state, UpgradeKind.SCORE_MULTIPLIER)
    assert state.score == 0
    assert state.derived.score_multiplier == pytest.approx(4.0)
    assert not purchase_upgrade(state, UpgradeKind.SCORE_MULTIPLIER)


# ── Level cap ────────────────────────────────────────────────────────────────

def test_cost_at_max_level_is_unpurchasable():
    udef = ALL_UPGRADES[UpgradeKind.AUTO_CLICKER]
    assert math.isfinite(cost_of(UpgradeKind.AUTO_CLICKER, udef.max_level - 1))
    assert cost_of(UpgradeKind.AUTO_CLICKER, udef.max_level) == math.inf

    state = GameState(score=1e300)
    state.upgrade_levels[UpgradeKind.AUTO_CLICKER] = udef.max_level
    assert purchase_upgrade(state, UpgradeKind.AUTO_CLICKER) is PurchaseResult.INSUFFICIENT_FUNDS
    assert state.level(UpgradeKind.AUTO_CLICKER) == udef.max_level
    assert state.score == 1e300


def test_format_number_max():
    assert format_number(math.inf) == "MAX"


def test_max_level_cost_must_stay_finite():
    with pytest.raises(ValueError):
        UpgradeDef(
            kind=UpgradeKind.EXPLOSIVENESS,
            name="Runaway",
            description="",
            effect="",
            base_cost=10,
            growth_factor=3.0,
            max_level=5000,
        )
