"""Rebirth — prestige reset that trades score and upgrades for permanent cubes."""

from __future__ import annotations

import logging
from dataclasses import replace

from cubeburst.data.upgrades import REBIRTH_UPGRADES, RebirthUpgradeKind
from cubeburst.engine.economy import can_afford, compute_derived, cost_at_level
from cubeburst.engine.game_state import GameState, RunStats, zero_upgrade_levels

logger = logging.getLogger(__name__)


def rebirth_cost_of(level: int, kind: RebirthUpgradeKind = RebirthUpgradeKind.DOUBLE_CUBES) -> float:
    """Cost of a rebirth upgrade at ``level``. Same law as regular upgrades."""
    return cost_at_level(REBIRTH_UPGRADES[kind], level)


def get_rebirth_cost(state: GameState, kind: RebirthUpgradeKind = RebirthUpgradeKind.DOUBLE_CUBES) -> float:
    return rebirth_cost_of(state.rebirth_upgrade_level(kind), kind)


def can_rebirth(state: GameState, kind: RebirthUpgradeKind = RebirthUpgradeKind.DOUBLE_CUBES) -> bool:
    return can_afford(state.score, get_rebirth_cost(state, kind))


def cube_count_for(rebirth_levels: dict[RebirthUpgradeKind, int]) -> int:
    return 2 ** rebirth_levels.get(RebirthUpgradeKind.DOUBLE_CUBES, 0)


def perform_rebirth(
    state: GameState,
    kind: RebirthUpgradeKind = RebirthUpgradeKind.DOUBLE_CUBES,
) -> GameState | None:
    """Build the post-rebirth state. Returns None if the player can't afford it.

    The input state is left untouched; the caller swaps the returned state in
    as a single assignment so no half-reset state is ever observable.
    Score and regular upgrades reset; rebirth upgrades, rebirth level and
    the win milestone carry over.
    """
    if not can_rebirth(state, kind):
        logger.debug("Rebirth rejected: cost %s, score %s", get_rebirth_cost(state, kind), state.score)
        return None

    rebirth_levels = dict(state.rebirth_upgrade_levels)
    rebirth_levels[kind] = rebirth_levels.get(kind, 0) + 1

    reborn = replace(
        state,
        score=0.0,
        upgrade_levels=zero_upgrade_levels(),
        rebirth_upgrade_levels=rebirth_levels,
        rebirth_level=state.rebirth_level + 1,
        cube_count=cube_count_for(rebirth_levels),
        stats=RunStats(),
    )
    compute_derived(reborn)
    logger.info("Rebirth %d: %s -> %d cubes", reborn.rebirth_level, kind.value, reborn.cube_count)
    return reborn
