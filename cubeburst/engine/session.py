"""Game session — owns the economy state and the fragment simulation.

Hosts (terminal, web) feed it input events and call ``advance(dt)`` once per
frame, then draw whatever ``snapshot()`` returns. Everything runs on the
host's single thread; the only deferred work is the respawn timer and the
grow-back animation, both driven by ``advance``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum, auto

from cubeburst.data.balance import BALANCE, SessionBalance
from cubeburst.data.upgrades import RebirthUpgradeKind, UpgradeKind
from cubeburst.engine.economy import PurchaseResult, compute_derived, purchase_upgrade
from cubeburst.engine.game_state import GameState
from cubeburst.engine.geometry import NEUTRAL_GRAY, TARGET_PALETTE, Vec3, interpolate_color, to_hex
from cubeburst.engine.particles import ParticleSimulator
from cubeburst.engine.rebirth import can_rebirth, cube_count_for, perform_rebirth
from cubeburst.engine.save import SaveStore, load_game, save_game

logger = logging.getLogger(__name__)


class ExplosionPhase(Enum):
    """Explosion sub-machine shared by every cube."""

    IDLE = auto()        # cubes visible, clicks accepted
    EXPLODING = auto()   # cubes hidden, respawn timer pending
    RESPAWNING = auto()  # cubes growing back, clicks still ignored


@dataclass
class CubeGroup:
    """One clickable cube. Recreated from scratch on rebirth."""

    slot: Vec3                       # resting position in the row of cubes
    position: Vec3
    rotation: Vec3 = field(default_factory=Vec3)
    scale: float = 1.0
    visible: bool = True
    face_colors: tuple[int, ...] = (NEUTRAL_GRAY,) * len(TARGET_PALETTE)


# ── Read-only frame snapshot ─────────────────────────────────────


@dataclass(frozen=True)
class CubeView:
    position: tuple[float, float, float]
    rotation: tuple[float, float, float]
    scale: float
    visible: bool
    face_colors: tuple[str, ...]


@dataclass(frozen=True)
class FragmentView:
    position: tuple[float, float, float]
    rotation: tuple[float, float, float]
    color: str


@dataclass(frozen=True)
class FrameSnapshot:
    cubes: tuple[CubeView, ...]
    fragments: tuple[FragmentView, ...]
    phase: ExplosionPhase
    score: float
    max_score: float
    progress: float
    score_multiplier: float
    cube_count: int
    rebirth_level: int
    has_won: bool
    camera_distance: float


def ease_out_cubic(t: float) -> float:
    return 1.0 - (1.0 - t) ** 3


def grow_scale(t: float, start: float) -> float:
    """Cube scale ``t`` of the way through the grow-back animation."""
    t = min(max(t, 0.0), 1.0)
    return start + (1.0 - start) * ease_out_cubic(t)


class GameSession:
    """Explicit handle for one game. No module-level game object exists.

    ``balance`` tunes timing, layout and the camera. Fragment physics belong
    to the simulator, economy rules to the engine functions.
    """

    def __init__(
        self,
        state: GameState | None = None,
        store: SaveStore | None = None,
        simulator: ParticleSimulator | None = None,
        balance: SessionBalance = BALANCE.session,
    ) -> None:
        self.balance = balance
        self.state = state if state is not None else GameState()
        self.store = store
        self.simulator = simulator if simulator is not None else ParticleSimulator()

        self.clock: float = 0.0
        self.frame: int = 0
        self.phase = ExplosionPhase.IDLE
        self.cubes: list[CubeGroup] = []
        self.notifications: list[str] = []

        # Orbit / zoom
        self.dragging = False
        self.target_rotation = Vec3()
        self.current_rotation = Vec3()
        self.camera_distance = balance.camera_distance

        # Deferred work
        self._cube_generation = 0
        self._pending_respawn: tuple[float, int] | None = None  # (due clock, generation)
        self._grow_started: float = 0.0
        self._pending_rebirth: RebirthUpgradeKind | None = None
        self._auto_click_credit: float = 0.0
        self._last_autosave: float = 0.0

        self.state.cube_count = cube_count_for(self.state.rebirth_upgrade_levels)
        compute_derived(self.state)
        self._build_cubes()
        self._on_score_changed()

    @classmethod
    def load(cls, store: SaveStore, **kwargs) -> GameSession:
        """Resume from ``store`` if it holds a save, else start fresh."""
        return cls(state=load_game(store), store=store, **kwargs)

    # ── Queries ──────────────────────────────────────────────

    @property
    def is_exploding(self) -> bool:
        return self.phase is not ExplosionPhase.IDLE

    @property
    def pending_rebirth(self) -> RebirthUpgradeKind | None:
        return self._pending_rebirth

    def drain_notifications(self) -> list[str]:
        notes = list(self.notifications)
        self.notifications.clear()
        return notes

    def snapshot(self) -> FrameSnapshot:
        """Everything a renderer needs for this frame, as immutable values."""
        s = self.state
        return FrameSnapshot(
            cubes=tuple(
                CubeView(
                    position=c.position.as_tuple(),
                    rotation=c.rotation.as_tuple(),
                    scale=c.scale,
                    visible=c.visible,
                    face_colors=tuple(to_hex(col) for col in c.face_colors),
                )
                for c in self.cubes
            ),
            fragments=tuple(
                FragmentView(
                    position=f.position.as_tuple(),
                    rotation=f.rotation.as_tuple(),
                    color=to_hex(f.color),
                )
                for f in self.simulator.fragments
            ),
            phase=self.phase,
            score=s.score,
            max_score=s.max_score,
            progress=s.progress,
            score_multiplier=s.derived.score_multiplier,
            cube_count=s.cube_count,
            rebirth_level=s.rebirth_level,
            has_won=s.has_won,
            camera_distance=self.camera_distance,
        )

    # ── Input events ─────────────────────────────────────────

    def click(self, point: Vec3) -> bool:
        """The host hit-tested a cube at ``point``. Returns False if ignored."""
        if self.is_exploding:
            return False
        visible = [c for c in self.cubes if c.visible]
        if not visible:
            return False

        s = self.state
        s.score += s.derived.score_multiplier
        s.stats.total_clicks += 1
        self._on_score_changed()

        # The struck cube bursts from the hit point, the rest from their centres
        struck = min(visible, key=lambda c: (c.position - point).length())
        for cube in visible:
            center = point.copy() if cube is struck else cube.position.copy()
            spawned = self.simulator.spawn_explosion(
                center,
                s.derived.fragments_per_axis,
                s.derived.explosion_force,
                s.progress,
                rotation=cube.rotation,
            )
            cube.visible = False
            s.stats.explosions += 1
            s.stats.fragments_spawned += len(spawned)

        self.phase = ExplosionPhase.EXPLODING
        sb = self.balance
        self._pending_respawn = (
            self.clock + sb.explosion_duration_s + sb.respawn_delay_s,
            self._cube_generation,
        )
        self.save()
        return True

    def click_cube(self, index: int = 0) -> bool:
        """Click the centre of a cube — for hosts without a hit-test."""
        if not 0 <= index < len(self.cubes):
            return False
        return self.click(self.cubes[index].position.copy())

    def drag(self, dx: float, dy: float) -> None:
        speed = self.balance.rotation_speed
        self.target_rotation.y += dx * speed
        self.target_rotation.x += dy * speed

    def zoom(self, direction: int) -> float:
        """Positive ``direction`` moves the camera out, negative moves it in."""
        sb = self.balance
        if direction > 0:
            self.camera_distance *= sb.zoom_factor
        elif direction < 0:
            self.camera_distance /= sb.zoom_factor
        self.camera_distance = max(sb.min_zoom, min(sb.max_zoom, self.camera_distance))
        return self.camera_distance

    # ── Purchases ────────────────────────────────────────────

    def buy_upgrade(self, kind: UpgradeKind) -> PurchaseResult:
        result = purchase_upgrade(self.state, kind)
        if result:
            self._on_score_changed()
            self.save()
        return result

    def request_rebirth(self, kind: RebirthUpgradeKind = RebirthUpgradeKind.DOUBLE_CUBES) -> PurchaseResult:
        """First phase of a rebirth: check the price, then wait for confirmation."""
        if not can_rebirth(self.state, kind):
            self._pending_rebirth = None
            return PurchaseResult.INSUFFICIENT_FUNDS
        self._pending_rebirth = kind
        return PurchaseResult.AWAITING_CONFIRMATION

    def cancel_rebirth(self) -> None:
        self._pending_rebirth = None

    def commit_rebirth(self) -> PurchaseResult:
        """Second phase: apply the confirmed rebirth as one transition."""
        kind = self._pending_rebirth
        if kind is None:
            return PurchaseResult.NOT_REQUESTED
        self._pending_rebirth = None

        reborn = perform_rebirth(self.state, kind)
        if reborn is None:
            return PurchaseResult.INSUFFICIENT_FUNDS

        self.state = reborn
        self.simulator.clear()
        self._build_cubes()
        self._auto_click_credit = 0.0
        self._on_score_changed()
        self.notifications.append(f"rebirth:{reborn.cube_count}")
        self.save()
        return PurchaseResult.PURCHASED

    def buy_rebirth_upgrade(
        self,
        kind: RebirthUpgradeKind = RebirthUpgradeKind.DOUBLE_CUBES,
        confirmed: bool = False,
    ) -> PurchaseResult:
        """Request and, if the host already has confirmation, commit a rebirth."""
        result = self.request_rebirth(kind)
        if result is PurchaseResult.AWAITING_CONFIRMATION and confirmed:
            return self.commit_rebirth()
        return result

    # ── Frame loop ───────────────────────────────────────────

    def advance(self, dt: float) -> None:
        """Run one frame. Fragments move first, then the cubes' state machine."""
        self.clock += dt
        self.frame += 1

        self.simulator.step()
        self._tick_respawn()
        self._tick_orbit()
        self._tick_auto_clicker(dt)
        self._tick_autosave()

    def _tick_respawn(self) -> None:
        if self._pending_respawn is not None:
            due, generation = self._pending_respawn
            if self.clock >= due:
                self._pending_respawn = None
                if generation != self._cube_generation or self.phase is not ExplosionPhase.EXPLODING:
                    logger.debug("Ignoring stale respawn timer (generation %d)", generation)
                else:
                    self._respawn()

        if self.phase is ExplosionPhase.RESPAWNING:
            sb = self.balance
            t = (self.clock - self._grow_started) / sb.grow_duration_s
            if t >= 1.0:
                for cube in self.cubes:
                    cube.scale = 1.0
                self.phase = ExplosionPhase.IDLE
            else:
                scale = grow_scale(t, sb.grow_start_scale)
                for cube in self.cubes:
                    cube.scale = scale

    def _respawn(self) -> None:
        start = self.balance.grow_start_scale
        for cube in self.cubes:
            cube.visible = True
            cube.position = cube.slot.copy()
            cube.scale = start
        self._grow_started = self.clock
        self.phase = ExplosionPhase.RESPAWNING

    def _tick_orbit(self) -> None:
        if self.is_exploding:
            return
        sb = self.balance
        cur, tgt = self.current_rotation, self.target_rotation
        cur.x += (tgt.x - cur.x) * sb.rotation_interpolation
        cur.y += (tgt.y - cur.y) * sb.rotation_interpolation
        bob = math.sin(self.clock * sb.floating_speed) * sb.floating_amplitude
        for cube in self.cubes:
            cube.rotation.x = cur.x
            cube.rotation.y = cur.y
            if not self.dragging:
                cube.position.y = cube.slot.y + bob

    def _tick_auto_clicker(self, dt: float) -> None:
        level = self.state.level(UpgradeKind.AUTO_CLICKER)
        if level <= 0:
            self._auto_click_credit = 0.0
            return
        self._auto_click_credit += level * self.balance.auto_clicks_per_level_s * dt
        if self.is_exploding:
            # No buffering: at most one owed click survives an explosion
            self._auto_click_credit = min(self._auto_click_credit, 1.0)
            return
        if self._auto_click_credit >= 1.0:
            self._auto_click_credit -= 1.0
            if self.click_cube(0):
                self.state.stats.auto_clicks += 1

    def _tick_autosave(self) -> None:
        if self.clock - self._last_autosave >= self.balance.autosave_interval_s:
            self._last_autosave = self.clock
            if self.save():
                logger.debug("Game auto-saved at %.1fs", self.clock)

    # ── Persistence ──────────────────────────────────────────

    def save(self) -> bool:
        if self.store is None:
            return False
        return save_game(self.store, self.state)

    # ── Internals ────────────────────────────────────────────

    def _build_cubes(self) -> None:
        """(Re)create one cube per cube_count, laid out in a row on x."""
        n = self.state.cube_count
        spacing = self.balance.cube_spacing
        self.cubes = []
        for i in range(n):
            x = (i - (n - 1) / 2) * spacing if n > 1 else 0.0
            slot = Vec3(x, 0.0, 0.0)
            self.cubes.append(CubeGroup(
                slot=slot,
                position=slot.copy(),
                rotation=self.current_rotation.copy(),
            ))
        self._cube_generation += 1
        self.phase = ExplosionPhase.IDLE

    def _on_score_changed(self) -> None:
        """Re-saturate cubes and fragments, then check the win milestone."""
        s = self.state
        progress = s.progress
        faces = tuple(interpolate_color(NEUTRAL_GRAY, target, progress) for target in TARGET_PALETTE)
        for cube in self.cubes:
            cube.face_colors = faces
        self.simulator.recolor(progress)

        if s.score >= s.max_score and not s.has_won:
            s.has_won = True
            self.notifications.append("win")
            logger.info("Maximum saturation reached at score %s", s.score)
