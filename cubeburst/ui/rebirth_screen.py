"""Rebirth screen — the confirmation step before a rebirth is committed.

Dismisses with True when the player confirms, False when they back out.
The session only applies the reset once the app receives True.
"""

from __future__ import annotations

from rich.text import Text
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import Screen
from textual.widgets import Footer, Static

from cubeburst.data.upgrades import REBIRTH_UPGRADES, RebirthUpgradeKind
from cubeburst.engine.economy import format_number
from cubeburst.engine.game_state import GameState
from cubeburst.engine.rebirth import get_rebirth_cost


class RebirthScreen(Screen[bool]):
    """Full-screen modal asking the player to confirm a rebirth."""

    BINDINGS = [
        Binding("escape", "cancel", "Back (keep progress)"),
        Binding("n", "cancel", "No", show=False),
        Binding("y", "confirm", "REBIRTH & RESET", show=True),
    ]

    DEFAULT_CSS = """
    RebirthScreen {
        background: $surface;
        align: center middle;
        padding: 2 4;
    }

    #rebirth-body {
        width: 100%;
        height: auto;
        text-align: center;
    }
    """

    def __init__(self, state: GameState, kind: RebirthUpgradeKind, **kwargs) -> None:
        super().__init__(**kwargs)
        self._state = state
        self._kind = kind

    def compose(self):
        with Vertical():
            yield Static(id="rebirth-body")
        yield Footer()

    def on_mount(self) -> None:
        udef = REBIRTH_UPGRADES[self._kind]
        state = self._state
        cost = get_rebirth_cost(state, self._kind)

        body = Text()
        body.append("REBIRTH\n\n", style="bold #ff922f")
        body.append(
            "This will reset your score and regular upgrades but double your cubes.\n\n",
            style="dim italic",
        )
        body.append(f"  {udef.name}: ", style="dim")
        body.append(f"Lv{state.rebirth_upgrade_level(self._kind)} → "
                    f"Lv{state.rebirth_upgrade_level(self._kind) + 1}\n", style="bold white")
        body.append("  Cubes: ", style="dim")
        body.append(f"{state.cube_count} → {state.cube_count * 2}\n", style="bold cyan")
        body.append("  Cost: ", style="dim")
        body.append(f"{format_number(cost)} points\n\n", style="bold yellow")
        body.append("  [Y] REBIRTH & RESET  ", style="bold bright_red")
        body.append("  [Esc] Cancel\n", style="dim")
        self.query_one("#rebirth-body", Static).update(body)

    def action_cancel(self) -> None:
        self.dismiss(False)

    def action_confirm(self) -> None:
        self.dismiss(True)
