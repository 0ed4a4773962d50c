"""Tests for the fragment simulator and colour helpers."""

import random

import pytest

from cubeburst.data.balance import ParticleBalance
from cubeburst.engine.geometry import NEUTRAL_GRAY, TARGET_PALETTE, Vec3, interpolate_color, to_hex
from cubeburst.engine.particles import Fragment, ParticleSimulator


def _sim(**overrides) -> ParticleSimulator:
    return ParticleSimulator(balance=ParticleBalance(**overrides), rng=random.Random(1234))


def _still_fragment(y: float = 0.0) -> Fragment:
    return Fragment(
        position=Vec3(0.0, y, 0.0),
        velocity=Vec3(),
        angular_velocity=Vec3(0.1, 0.0, -0.1),
        rotation=Vec3(),
        target_color=TARGET_PALETTE[0],
    )


# ── Colours ──────────────────────────────────────────────────────────────────

def test_interpolate_color_endpoints():
    for target in TARGET_PALETTE:
        assert interpolate_color(NEUTRAL_GRAY, target, 0.0) == NEUTRAL_GRAY
        assert interpolate_color(NEUTRAL_GRAY, target, 1.0) == target


def test_interpolate_color_rounds_half_up():
    # 255 * 0.5 = 127.5 per channel
    assert interpolate_color(0x000000, 0xFFFFFF, 0.5) == 0x808080


def test_to_hex():
    assert to_hex(0xFF922F) == "#ff922f"
    assert to_hex(0x000A00) == "#000a00"


# ── Spawning ─────────────────────────────────────────────────────────────────

def test_spawn_count_is_cube_of_axis():
    sim = _sim()
    assert len(sim.spawn_explosion(Vec3(), 3, 0.3, 0.0)) == 27
    assert len(sim.spawn_explosion(Vec3(), 4, 0.3, 0.0)) == 64
    assert len(sim) == 91


def test_spawn_grid_is_centred_on_hit_point():
    sim = _sim()
    center = Vec3(1.0, 2.0, 3.0)
    frags = sim.spawn_explosion(center, 3, 0.3, 0.0)

    xs = sorted({round(f.position.x, 9) for f in frags})
    assert xs == pytest.approx([1.0 - 2 / 3, 1.0, 1.0 + 2 / 3])
    mean_z = sum(f.position.z for f in frags) / len(frags)
    assert mean_z == pytest.approx(3.0)


def test_spawn_velocities_and_spin_are_bounded():
    sim = _sim()
    force = 0.3
    for frag in sim.spawn_explosion(Vec3(), 3, force, 0.0):
        assert frag.velocity.length() <= 1.2 * force + 0.1 + 1e-9
        for w in frag.angular_velocity.as_tuple():
            assert -0.15 <= w <= 0.15


def test_spawn_copies_cube_rotation():
    sim = _sim()
    rotation = Vec3(0.5, 1.0, 0.0)
    frags = sim.spawn_explosion(Vec3(), 2, 0.3, 0.0, rotation=rotation)
    rotation.x = 9.0
    assert all(f.rotation.as_tuple() == (0.5, 1.0, 0.0) for f in frags)


def test_spawn_colours_follow_saturation():
    sim = _sim()
    gray = sim.spawn_explosion(Vec3(), 3, 0.3, 0.0)
    full = sim.spawn_explosion(Vec3(), 3, 0.3, 1.0)
    assert all(f.target_color in TARGET_PALETTE for f in gray + full)
    assert all(f.color == NEUTRAL_GRAY for f in gray)
    assert all(f.color == f.target_color for f in full)


# ── Integration ──────────────────────────────────────────────────────────────

def test_step_applies_gravity_then_damping():
    sim = _sim()
    frag = _still_fragment()
    sim.fragments.append(frag)

    sim.step()

    assert frag.position.y == pytest.approx(-0.01)
    assert frag.velocity.y == pytest.approx(-0.01 * 0.995)
    assert frag.rotation.x == pytest.approx(0.1)
    assert frag.angular_velocity.x == pytest.approx(0.1 * 0.995)
    assert frag.age == 1


def test_fragments_are_culled_below_floor():
    sim = _sim()
    sim.fragments.append(_still_fragment())

    frames = 0
    while len(sim) and frames < 200:
        sim.step()
        frames += 1

    assert len(sim) == 0
    assert 1 < frames < 200


def test_step_reports_culled_count():
    sim = _sim()
    sim.fragments.append(_still_fragment(y=-9.999))
    sim.fragments.append(_still_fragment(y=5.0))
    assert sim.step() == 1
    assert len(sim) == 1


def test_recolor_keeps_target():
    sim = _sim()
    frags = sim.spawn_explosion(Vec3(), 3, 0.3, 0.0)
    targets = [f.target_color for f in frags]

    sim.recolor(1.0)
    assert [f.color for f in frags] == targets
    sim.recolor(0.0)
    assert all(f.color == NEUTRAL_GRAY for f in frags)
    assert [f.target_color for f in frags] == targets


def test_soft_cap_evicts_oldest():
    sim = _sim(max_fragments=30)
    sim.spawn_explosion(Vec3(), 3, 0.3, 0.0)
    second = sim.spawn_explosion(Vec3(), 3, 0.3, 0.0)

    assert len(sim) == 30
    assert sim.fragments[-27:] == second


def test_oversized_burst_builds_only_live_fragments():
    sim = _sim(max_fragments=30)
    frags = sim.spawn_explosion(Vec3(), 4, 0.3, 0.0)

    assert len(frags) == 30
    assert sim.fragments == frags
    # The last grid cell is the +x +y +z corner
    assert frags[-1].position.as_tuple() == pytest.approx((0.75, 0.75, 0.75))


def test_clear():
    sim = _sim()
    sim.spawn_explosion(Vec3(), 3, 0.3, 0.0)
    sim.clear()
    assert len(sim) == 0
