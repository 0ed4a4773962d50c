"""Economy engine — cost curves, purchases, derived parameters, number formatting."""

from __future__ import annotations

import logging
import math
from enum import Enum, auto

from cubeburst.data.balance import BALANCE
from cubeburst.data.upgrades import ALL_UPGRADES, UpgradeDef, UpgradeKind
from cubeburst.engine.game_state import DerivedParameters, GameState

logger = logging.getLogger(__name__)


class PurchaseResult(Enum):
    """Outcome of a purchase command. Only PURCHASED is truthy."""

    PURCHASED = auto()
    INSUFFICIENT_FUNDS = auto()
    AWAITING_CONFIRMATION = auto()  # rebirth requested, waiting for commit
    NOT_REQUESTED = auto()          # commit without a pending request

    def __bool__(self) -> bool:
        return self is PurchaseResult.PURCHASED


def cost_at_level(udef: UpgradeDef, level: int) -> float:
    """floor(base_cost * growth_factor ** level) as an integer-valued float.

    At or past ``max_level`` the next level is unpurchasable: the cost is inf.
    """
    if level >= udef.max_level:
        return math.inf
    return float(math.floor(udef.base_cost * (udef.growth_factor ** level)))


def cost_of(kind: UpgradeKind, level: int) -> float:
    """Cost of buying ``kind`` when it currently sits at ``level``."""
    return cost_at_level(ALL_UPGRADES[kind], level)


def get_upgrade_cost(state: GameState, kind: UpgradeKind) -> float:
    """Cost of the next level of an upgrade for this state."""
    return cost_of(kind, state.level(kind))


def can_afford(score: float, cost: float) -> bool:
    return score >= cost


def can_afford_upgrade(state: GameState, kind: UpgradeKind) -> bool:
    """Check if the player can afford the next level of an upgrade."""
    return can_afford(state.score, get_upgrade_cost(state, kind))


def compute_derived(state: GameState) -> DerivedParameters:
    """Recompute derived parameters from upgrade levels and store them on the state.

    Call this after any purchase, load or rebirth.
    """
    bal = BALANCE.economy

    score_multiplier = bal.base_score_multiplier
    force_scale = 1.0
    fragment_scale = 1.0
    for kind, udef in ALL_UPGRADES.items():
        level = state.level(kind)
        if level <= 0:
            continue
        score_multiplier += udef.score_weight * level
        force_scale += udef.force_weight * level
        fragment_scale += udef.fragment_weight * level

    derived = DerivedParameters(
        score_multiplier=score_multiplier,
        explosion_force=bal.base_explosion_force * force_scale,
        # Round half up so 4.5 fragments per axis becomes 5
        fragments_per_axis=max(1, int(math.floor(bal.base_fragments_per_axis * fragment_scale + 0.5))),
    )
    state.derived = derived
    return derived


def purchase_upgrade(state: GameState, kind: UpgradeKind) -> PurchaseResult:
    """Attempt to purchase the next level of an upgrade.

    All-or-nothing: on rejection neither score nor level changes.
    """
    cost = get_upgrade_cost(state, kind)
    if not can_afford(state.score, cost):
        logger.debug("Rejected %s: cost %s, score %s", kind.value, cost, state.score)
        return PurchaseResult.INSUFFICIENT_FUNDS

    state.score -= cost
    state.upgrade_levels[kind] = state.level(kind) + 1

    compute_derived(state)
    logger.info("Bought %s -> level %d for %s", kind.value, state.level(kind), cost)
    return PurchaseResult.PURCHASED


def format_number(n: float) -> str:
    """Format a number with suffixes for readability."""
    if n == math.inf:
        return "MAX"
    if n < 0:
        return f"-{format_number(-n)}"

    for threshold, suffix in reversed(BALANCE.economy.suffixes):
        if n >= threshold:
            value = n / threshold
            if value >= 100:
                return f"{value:.0f}{suffix}"
            elif value >= 10:
                return f"{value:.1f}{suffix}"
            else:
                return f"{value:.2f}{suffix}"

    if n >= 100:
        return f"{n:.0f}"
    elif n >= 10:
        return f"{n:.1f}"
    elif n == int(n):
        return str(int(n))
    else:
        return f"{n:.1f}"
