"""Small 3D vector type and integer-RGB colour helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass

# Desaturated starting colour for every face and fragment
NEUTRAL_GRAY = 0x808080

# Fully saturated orange targets, one per cube face
TARGET_PALETTE: tuple[int, ...] = (
    0xFF922F,  # base orange
    0xE6830A,  # darker orange
    0xFFA347,  # lighter orange
    0xD4700A,  # deep orange
    0xFFB366,  # light orange
    0xCC5D0A,  # dark orange
)


@dataclass
class Vec3:
    """Mutable 3-component vector. Fragments integrate these in place."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Vec3) -> Vec3:
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, k: float) -> Vec3:
        return Vec3(self.x * k, self.y * k, self.z * k)

    __rmul__ = __mul__

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def normalized(self) -> Vec3:
        """Unit vector in the same direction; the zero vector stays zero."""
        n = self.length()
        if n == 0.0:
            return Vec3()
        return Vec3(self.x / n, self.y / n, self.z / n)

    def copy(self) -> Vec3:
        return Vec3(self.x, self.y, self.z)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    @classmethod
    def of(cls, values) -> Vec3:
        """Build from any 3-item sequence, e.g. a JSON list."""
        x, y, z = values
        return cls(float(x), float(y), float(z))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def interpolate_color(color1: int, color2: int, factor: float) -> int:
    """Linear per-channel blend of two 0xRRGGBB colours.

    factor 0 gives color1, factor 1 gives color2. Channels round half up.
    """
    r1, g1, b1 = (color1 >> 16) & 0xFF, (color1 >> 8) & 0xFF, color1 & 0xFF
    r2, g2, b2 = (color2 >> 16) & 0xFF, (color2 >> 8) & 0xFF, color2 & 0xFF

    r = _round_half_up(r1 + (r2 - r1) * factor)
    g = _round_half_up(g1 + (g2 - g1) * factor)
    b = _round_half_up(b1 + (b2 - b1) * factor)

    return (r << 16) | (g << 8) | b


def to_hex(color: int) -> str:
    """Format a colour as '#rrggbb' (rich styles and JSON both take this)."""
    return f"#{color:06x}"
