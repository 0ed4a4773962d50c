"""Upgrade definitions — regular store upgrades and permanent rebirth upgrades."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


class UpgradeKind(Enum):
    """Regular upgrades. Reset to level 0 on rebirth."""

    EXPLOSIVENESS = "explosiveness"
    FRAGMENT_COUNT = "fragment_count"
    SCORE_MULTIPLIER = "score_multiplier"
    EXPLOSION_FORCE = "explosion_force"
    AUTO_CLICKER = "auto_clicker"


class RebirthUpgradeKind(Enum):
    """Rebirth upgrades. Levels persist across rebirths."""

    DOUBLE_CUBES = "double_cubes"


@dataclass(frozen=True)
class UpgradeDef:
    """Definition of a single upgrade and its per-level contributions."""

    kind: UpgradeKind | RebirthUpgradeKind
    name: str
    description: str
    effect: str
    base_cost: float
    growth_factor: float
    # Per-level weights folded into the derived parameters
    score_weight: float = 0.0
    force_weight: float = 0.0
    fragment_weight: float = 0.0
    # Highest level that can be owned; buying past it is never affordable
    max_level: int = 200

    def __post_init__(self) -> None:
        if self.base_cost <= 0:
            raise ValueError(f"{self.kind}: base_cost must be positive, got {self.base_cost}")
        if self.growth_factor <= 1.0:
            raise ValueError(
                f"{self.kind}: growth_factor must be > 1 for costs to rise, got {self.growth_factor}"
            )
        if self.max_level < 0:
            raise ValueError(f"{self.kind}: max_level must be >= 0, got {self.max_level}")
        try:
            top = self.base_cost * self.growth_factor ** self.max_level
        except OverflowError as exc:
            raise ValueError(f"{self.kind}: cost at max_level {self.max_level} overflows") from exc
        if not math.isfinite(top):
            raise ValueError(f"{self.kind}: cost at max_level {self.max_level} overflows")


# ── Regular upgrades ─────────────────────────────────────────────

EXPLOSIVENESS = UpgradeDef(
    kind=UpgradeKind.EXPLOSIVENESS,
    name="Explosiveness",
    description="Increases explosion force and visual effects.",
    effect="+25% explosion force, +20% score multiplier per level",
    base_cost=10,
    growth_factor=1.5,
    score_weight=0.2,
    force_weight=0.25,
)

FRAGMENT_COUNT = UpgradeDef(
    kind=UpgradeKind.FRAGMENT_COUNT,
    name="Fragment Multiplier",
    description="More fragments per explosion for bigger effects.",
    effect="+50% fragments per axis, +30% score multiplier per level",
    base_cost=25,
    growth_factor=1.8,
    score_weight=0.3,
    fragment_weight=0.5,
)

SCORE_MULTIPLIER = UpgradeDef(
    kind=UpgradeKind.SCORE_MULTIPLIER,
    name="Score Multiplier",
    description="Increases points gained per click.",
    effect="+100% score multiplier per level",
    base_cost=50,
    growth_factor=2.0,
    score_weight=1.0,
)

EXPLOSION_FORCE = UpgradeDef(
    kind=UpgradeKind.EXPLOSION_FORCE,
    name="Explosion Power",
    description="Makes fragments fly further and faster.",
    effect="+50% fragment velocity, +25% score multiplier per level",
    base_cost=100,
    growth_factor=2.2,
    score_weight=0.25,
    force_weight=0.5,
)

AUTO_CLICKER = UpgradeDef(
    kind=UpgradeKind.AUTO_CLICKER,
    name="Auto Clicker",
    description="Automatically clicks the cube for you.",
    effect="+1 auto click per second, +50% score multiplier per level",
    base_cost=500,
    growth_factor=3.0,
    score_weight=0.5,
)

# ── Rebirth upgrades ─────────────────────────────────────────────

DOUBLE_CUBES = UpgradeDef(
    kind=RebirthUpgradeKind.DOUBLE_CUBES,
    name="Double Cubes",
    description="REBIRTH: doubles your cubes but resets progress.",
    effect="2x cube count, resets score and regular upgrades",
    base_cost=100_000,
    growth_factor=10.0,
    # 2 ** 8 = 256 cubes
    max_level=8,
)

# ── Registries (store order) ─────────────────────────────────────

ALL_UPGRADES: dict[UpgradeKind, UpgradeDef] = {
    u.kind: u
    for u in [
        EXPLOSIVENESS,
        FRAGMENT_COUNT,
        SCORE_MULTIPLIER,
        EXPLOSION_FORCE,
        AUTO_CLICKER,
    ]
}

REBIRTH_UPGRADES: dict[RebirthUpgradeKind, UpgradeDef] = {
    u.kind: u for u in [DOUBLE_CUBES]
}
