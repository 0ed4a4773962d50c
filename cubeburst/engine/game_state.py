"""Game state — single source of truth for the economy of the current save."""

from __future__ import annotations

from dataclasses import dataclass, field

from cubeburst.data.balance import BALANCE
from cubeburst.data.upgrades import ALL_UPGRADES, REBIRTH_UPGRADES, RebirthUpgradeKind, UpgradeKind


def zero_upgrade_levels() -> dict[UpgradeKind, int]:
    return {kind: 0 for kind in ALL_UPGRADES}


def zero_rebirth_levels() -> dict[RebirthUpgradeKind, int]:
    return {kind: 0 for kind in REBIRTH_UPGRADES}


@dataclass(frozen=True)
class DerivedParameters:
    """Gameplay scalars recomputed from upgrade levels after every purchase."""

    score_multiplier: float = 1.0
    explosion_force: float = BALANCE.economy.base_explosion_force
    fragments_per_axis: int = BALANCE.economy.base_fragments_per_axis


@dataclass
class RunStats:
    """Tracked metrics since the last rebirth."""

    total_clicks: int = 0
    auto_clicks: int = 0
    explosions: int = 0
    fragments_spawned: int = 0


@dataclass
class GameState:
    """Complete mutable economy state."""

    # ── Core resources ───────────────────────────────────
    score: float = 0.0
    has_won: bool = False           # permanent milestone, never reset

    # ── Upgrades: kind → current level ───────────────────
    upgrade_levels: dict[UpgradeKind, int] = field(default_factory=zero_upgrade_levels)
    rebirth_upgrade_levels: dict[RebirthUpgradeKind, int] = field(default_factory=zero_rebirth_levels)

    # ── Rebirth ──────────────────────────────────────────
    rebirth_level: int = 0
    cube_count: int = 1             # 2 ** Double Cubes level

    # ── Derived / caches (recomputed after every purchase) ─
    derived: DerivedParameters = field(default_factory=DerivedParameters)

    # ── Stats ────────────────────────────────────────────
    stats: RunStats = field(default_factory=RunStats)

    def level(self, kind: UpgradeKind) -> int:
        return self.upgrade_levels.get(kind, 0)

    def rebirth_upgrade_level(self, kind: RebirthUpgradeKind) -> int:
        return self.rebirth_upgrade_levels.get(kind, 0)

    @property
    def max_score(self) -> float:
        return BALANCE.economy.max_score

    @property
    def progress(self) -> float:
        """Saturation progress toward the win threshold, clamped to [0, 1]."""
        return min(self.score / self.max_score, 1.0)
