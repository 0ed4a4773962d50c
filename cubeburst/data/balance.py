"""Balance constants — all tuning knobs in one place.

Tweak these to adjust game feel and pacing.
All costs follow: floor(base_cost * (growth_factor ^ level))
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class EconomyBalance:
    """Tuning for score, derived parameters and the win threshold."""

    # Score at which the cube is fully saturated (and the player has won)
    max_score: float = 1_000_000.0

    # Derived parameter bases (before upgrades)
    base_score_multiplier: float = 1.0
    base_explosion_force: float = 0.3
    base_fragments_per_axis: int = 3

    # Large number formatting thresholds
    suffixes: tuple[tuple[float, str], ...] = (
        (1e3, "K"),
        (1e6, "M"),
        (1e9, "B"),
        (1e12, "T"),
        (1e15, "Qa"),
        (1e18, "Qi"),
    )


@dataclass(frozen=True)
class ParticleBalance:
    """Tuning for the fragment simulation.

    Every value is applied once per frame — the simulation is frame-coupled,
    not scaled by wall-clock time.
    """

    gravity: float = -0.01
    damping: float = 0.995           # velocity / spin decay per frame
    floor_y: float = -10.0           # fragments below this are culled

    # Spawn grid: a cube of half-extent 1.0 split into n^3 fragments
    half_extent: float = 1.0
    direction_jitter: float = 0.25   # ± per axis before renormalising
    force_jitter: tuple[float, float] = (0.8, 1.2)
    upward_boost_max: float = 0.1
    angular_speed_max: float = 0.15  # ± per axis

    # Soft cap on live fragments, oldest evicted first (None = unbounded)
    max_fragments: int | None = 5000


@dataclass(frozen=True)
class SessionBalance:
    """Tuning for the click / explode / respawn loop and the host cadence."""

    # Respawn is scheduled explosion_duration + respawn_delay after a click.
    # The original timings were milliseconds, hence the tiny values.
    explosion_duration_s: float = 0.001
    respawn_delay_s: float = 0.001

    # Grow-back animation (ease-out cubic)
    grow_duration_s: float = 0.5
    grow_start_scale: float = 0.1

    # Persistence
    autosave_interval_s: float = 10.0

    # Cube layout along the x axis when there is more than one cube
    cube_spacing: float = 3.0

    # Orbit controls
    rotation_speed: float = 0.01         # radians per dragged pixel
    rotation_interpolation: float = 0.05  # fraction of the gap closed per frame
    floating_amplitude: float = 0.1
    floating_speed: float = 1.0          # radians per second

    # Camera zoom
    zoom_factor: float = 1.1
    camera_distance: float = 5.0
    min_zoom: float = 2.0
    max_zoom: float = 10.0

    # One auto click per second per Auto Clicker level
    auto_clicks_per_level_s: float = 1.0


@dataclass(frozen=True)
class GameBalance:
    """Top-level container for all balance constants."""

    economy: EconomyBalance = field(default_factory=EconomyBalance)
    particles: ParticleBalance = field(default_factory=ParticleBalance)
    session: SessionBalance = field(default_factory=SessionBalance)

    # Frame timing
    tick_rate_hz: float = 60.0  # frames per second driven by the hosts
    max_catch_up_frames: int = 120  # web host: frames simulated per request at most


# Singleton, import this everywhere
BALANCE = GameBalance()
