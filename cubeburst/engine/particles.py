"""Particle simulator — explosion fragments, per-frame integration and culling.

The simulation is frame-coupled: ``step()`` applies the same gravity and
damping once per call regardless of how much wall-clock time has passed.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from cubeburst.data.balance import BALANCE, ParticleBalance
from cubeburst.engine.geometry import NEUTRAL_GRAY, TARGET_PALETTE, Vec3, interpolate_color

logger = logging.getLogger(__name__)


@dataclass
class Fragment:
    """A single explosion fragment. Lives until it falls below the floor."""

    position: Vec3
    velocity: Vec3
    angular_velocity: Vec3
    rotation: Vec3
    target_color: int               # picked once at spawn, never changes
    color: int = NEUTRAL_GRAY       # current colour at the current saturation
    age: int = 0                    # frames survived


@dataclass
class ParticleSimulator:
    """Owns every live fragment, in spawn order."""

    balance: ParticleBalance = field(default_factory=lambda: BALANCE.particles)
    rng: random.Random = field(default_factory=random.Random)
    fragments: list[Fragment] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.fragments)

    def spawn_explosion(
        self,
        center: Vec3,
        fragments_per_axis: int,
        explosion_force: float,
        base_saturation: float,
        rotation: Vec3 | None = None,
    ) -> list[Fragment]:
        """Break a cube centred on ``center`` into fragments_per_axis ** 3 pieces.

        Each piece flies away from the centre with a jittered direction and
        force, a small upward kick and a random spin. Returns the new pieces.
        When one burst alone exceeds the fragment cap, only its last
        ``max_fragments`` grid cells are built, so every returned piece is live.
        """
        bal = self.balance
        rng = self.rng
        n = max(1, fragments_per_axis)
        spacing = 2.0 * bal.half_extent / n
        jitter = bal.direction_jitter
        spin = bal.angular_speed_max
        low, high = bal.force_jitter

        # A burst bigger than the cap only builds the cells that would survive it
        total = n ** 3
        first = 0
        if bal.max_fragments is not None and total > bal.max_fragments:
            first = total - bal.max_fragments
            logger.debug("Burst of %d trimmed to %d (cap)", total, bal.max_fragments)

        spawned: list[Fragment] = []
        for index in range(first, total):
            ix, rest = divmod(index, n * n)
            iy, iz = divmod(rest, n)
            offset = Vec3(
                (ix - (n - 1) / 2) * spacing,
                (iy - (n - 1) / 2) * spacing,
                (iz - (n - 1) / 2) * spacing,
            )
            position = center + offset

            direction = (position - center).normalized()
            direction = Vec3(
                direction.x + rng.uniform(-jitter, jitter),
                direction.y + rng.uniform(-jitter, jitter),
                direction.z + rng.uniform(-jitter, jitter),
            ).normalized()

            velocity = direction * (explosion_force * rng.uniform(low, high))
            velocity.y += rng.uniform(0.0, bal.upward_boost_max)

            angular_velocity = Vec3(
                rng.uniform(-spin, spin),
                rng.uniform(-spin, spin),
                rng.uniform(-spin, spin),
            )

            target = rng.choice(TARGET_PALETTE)
            spawned.append(Fragment(
                position=position,
                velocity=velocity,
                angular_velocity=angular_velocity,
                rotation=rotation.copy() if rotation is not None else Vec3(),
                target_color=target,
                color=interpolate_color(NEUTRAL_GRAY, target, base_saturation),
            ))

        self.fragments.extend(spawned)
        self._enforce_cap()
        return spawned

    def _enforce_cap(self) -> None:
        cap = self.balance.max_fragments
        if cap is None:
            return
        excess = len(self.fragments) - cap
        if excess > 0:
            del self.fragments[:excess]
            logger.debug("Evicted %d oldest fragments (cap %d)", excess, cap)

    def step(self) -> int:
        """Advance every fragment by one frame. Returns how many were culled."""
        bal = self.balance
        survivors: list[Fragment] = []
        for frag in self.fragments:
            frag.velocity.y += bal.gravity

            frag.position.x += frag.velocity.x
            frag.position.y += frag.velocity.y
            frag.position.z += frag.velocity.z

            frag.rotation.x += frag.angular_velocity.x
            frag.rotation.y += frag.angular_velocity.y
            frag.rotation.z += frag.angular_velocity.z

            # Air resistance as plain decay
            frag.velocity = frag.velocity * bal.damping
            frag.angular_velocity = frag.angular_velocity * bal.damping

            frag.age += 1
            if frag.position.y >= bal.floor_y:
                survivors.append(frag)

        culled = len(self.fragments) - len(survivors)
        self.fragments = survivors
        return culled

    def recolor(self, progress: float) -> None:
        """Move every fragment's colour to ``progress`` between gray and its target."""
        for frag in self.fragments:
            frag.color = interpolate_color(NEUTRAL_GRAY, frag.target_color, progress)

    def clear(self) -> None:
        self.fragments.clear()
