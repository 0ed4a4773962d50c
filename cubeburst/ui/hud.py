"""HUD widget — score counter, multiplier, saturation progress."""

from __future__ import annotations

from rich.text import Text
from textual.reactive import reactive
from textual.widget import Widget

from cubeburst.engine.economy import format_number
from cubeburst.engine.session import FrameSnapshot


class HUD(Widget):
    """Heads-up display showing core game stats."""

    DEFAULT_CSS = """
    HUD {
        width: 100%;
        height: 100%;
        padding: 1;
    }
    """

    score: reactive[str] = reactive("0")
    multiplier: reactive[str] = reactive("x1.0")
    progress: reactive[float] = reactive(0.0)
    cubes: reactive[int] = reactive(1)
    rebirths: reactive[int] = reactive(0)
    fragments: reactive[int] = reactive(0)
    has_won: reactive[bool] = reactive(False)

    def render(self) -> Text:
        text = Text()

        text.append("  === Cube Burst ===\n\n", style="bold #ff922f")

        text.append("  Score: ", style="dim")
        text.append(f"{self.score}\n", style="bold green")

        text.append("  Per Click: ", style="dim")
        text.append(f"{self.multiplier} multiplier\n", style="green")

        text.append("\n")

        # Saturation bar
        bar_width = 16
        filled = int(self.progress * bar_width)
        bar = "#" * filled + "." * (bar_width - filled)
        text.append("  Saturation:\n", style="dim")
        text.append(f"  [{bar}] {round(self.progress * 100)}%\n", style="#ff922f")

        text.append("\n")

        text.append("  Cubes: ", style="dim")
        text.append(f"{self.cubes}\n", style="bold cyan")
        text.append("  Rebirths: ", style="dim")
        text.append(f"{self.rebirths}\n", style="bold yellow")
        text.append("  Fragments: ", style="dim")
        text.append(f"{self.fragments}\n", style="dim")

        if self.has_won:
            text.append("\n  You reached maximum saturation!\n", style="bold bright_yellow")

        text.append("\n")
        text.append("  [Space] Click  [1-5] Buy\n", style="dim italic")
        text.append("  [R] Rebirth  [Arrows] Orbit\n", style="dim italic")
        text.append("  [+/-] Zoom  [S] Save  [Q] Quit\n", style="dim italic")

        return text

    def update_from_snapshot(self, snap: FrameSnapshot) -> None:
        """Sync HUD with the latest frame."""
        self.score = format_number(snap.score)
        self.multiplier = f"x{snap.score_multiplier:.1f}"
        self.progress = snap.progress
        self.cubes = snap.cube_count
        self.rebirths = snap.rebirth_level
        self.fragments = len(snap.fragments)
        self.has_won = snap.has_won
