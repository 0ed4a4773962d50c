"""Cube view widget — ASCII perspective projection of cubes and fragments."""

from __future__ import annotations

import math

from rich.text import Text
from textual.widget import Widget

from cubeburst.engine.session import FrameSnapshot

# Vertical field of view of the virtual camera
FOV_DEGREES = 75.0
# Terminal cells are roughly twice as tall as they are wide
CELL_ASPECT = 2.0

CUBE_CHAR = "█"
FRAGMENT_CHAR = "▪"


def project(
    point: tuple[float, float, float],
    camera_distance: float,
    width: int,
    height: int,
) -> tuple[int, int, float] | None:
    """Project a world point to (column, row, depth). None if behind the camera."""
    x, y, z = point
    depth = camera_distance - z
    if depth <= 0.1:
        return None
    focal = 1.0 / math.tan(math.radians(FOV_DEGREES) / 2)
    half_h = height / 2
    col = int(round(width / 2 + x * focal / depth * half_h * CELL_ASPECT))
    row = int(round(half_h - y * focal / depth * half_h))
    return col, row, depth


class CubeView(Widget):
    """Draws the latest frame snapshot into a character grid."""

    DEFAULT_CSS = """
    CubeView {
        width: 100%;
        height: 1fr;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._snapshot: FrameSnapshot | None = None

    def render(self) -> Text:
        text = Text()
        snap = self._snapshot
        width = max(self.size.width, 1)
        height = max(self.size.height - 1, 1)
        if snap is None:
            return text

        cells: dict[tuple[int, int], tuple[str, str]] = {}

        for cube in snap.cubes:
            if not cube.visible:
                continue
            centre = project(cube.position, snap.camera_distance, width, height)
            if centre is None:
                continue
            col, row, depth = centre
            edge = project(
                (cube.position[0] + cube.scale, cube.position[1] + cube.scale, cube.position[2]),
                snap.camera_distance, width, height,
            )
            half_w = abs(edge[0] - col) if edge else 1
            half_h = abs(edge[1] - row) if edge else 1
            front = cube.face_colors[4] if len(cube.face_colors) > 4 else cube.face_colors[0]
            for r in range(row - half_h, row + half_h + 1):
                for c in range(col - half_w, col + half_w + 1):
                    cells[(c, r)] = (CUBE_CHAR, front)

        for frag in snap.fragments:
            spot = project(frag.position, snap.camera_distance, width, height)
            if spot is None:
                continue
            cells[(spot[0], spot[1])] = (FRAGMENT_CHAR, frag.color)

        for r in range(height):
            for c in range(width):
                char, style = cells.get((c, r), (" ", ""))
                text.append(char, style=style or None)
            text.append("\n")

        if snap.has_won:
            text.append("  MAXIMUM SATURATION", style="bold #ff922f")
        return text

    def update_from_snapshot(self, snapshot: FrameSnapshot) -> None:
        self._snapshot = snapshot
        self.refresh()
