"""Cube Burst — Main Textual Application.

Wires the game session into a playable TUI: the session is the only owner of
game state, the widgets just draw its frame snapshot.
"""

from __future__ import annotations

import time

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.timer import Timer
from textual.widgets import Footer, Header

from cubeburst.data.balance import BALANCE
from cubeburst.data.upgrades import ALL_UPGRADES, RebirthUpgradeKind
from cubeburst.engine.economy import PurchaseResult, format_number
from cubeburst.engine.save import FileSaveStore, SaveStore
from cubeburst.engine.session import GameSession
from cubeburst.ui.cube_view import CubeView
from cubeburst.ui.hud import HUD
from cubeburst.ui.rebirth_screen import RebirthScreen
from cubeburst.ui.store_panel import StorePanel

# Pixels of virtual drag per arrow key press
ARROW_DRAG = 15.0


class CubeburstApp(App):
    """The Cube Burst TUI game application."""

    TITLE = "Cube Burst"
    SUB_TITLE = "Click. Shatter. Saturate. Rebirth."

    CSS = """
    #game-container { height: 1fr; }
    #hud-panel { width: 32; }
    #view-panel { width: 1fr; }
    #store-panel { width: 44; }
    """

    BINDINGS = [
        Binding("space", "click_cube", "Click", show=True, priority=True),
        Binding("1", "buy_upgrade_1", "Buy #1", show=False),
        Binding("2", "buy_upgrade_2", "Buy #2", show=False),
        Binding("3", "buy_upgrade_3", "Buy #3", show=False),
        Binding("4", "buy_upgrade_4", "Buy #4", show=False),
        Binding("5", "buy_upgrade_5", "Buy #5", show=False),
        Binding("r", "rebirth", "Rebirth", show=True),
        Binding("left", "orbit(-1, 0)", "Orbit", show=False),
        Binding("right", "orbit(1, 0)", "Orbit", show=False),
        Binding("up", "orbit(0, -1)", "Orbit", show=False),
        Binding("down", "orbit(0, 1)", "Orbit", show=False),
        Binding("plus,equals_sign", "zoom(-1)", "Zoom in", show=False),
        Binding("minus", "zoom(1)", "Zoom out", show=False),
        Binding("s", "save", "Save", show=True),
        Binding("q", "quit_game", "Quit", show=True),
    ]

    def __init__(self, store: SaveStore | None = None) -> None:
        super().__init__()
        self._session = GameSession.load(store if store is not None else FileSaveStore())
        self._last_tick: float = time.time()
        self._tick_timer: Timer | None = None

    @property
    def session(self) -> GameSession:
        return self._session

    def compose(self) -> ComposeResult:
        yield Header()

        with Horizontal(id="game-container"):
            # Left: HUD
            yield HUD(id="hud-panel")

            # Center: cubes and fragments
            with Vertical(id="view-panel"):
                yield CubeView(id="cube-view")

            # Right: store
            yield StorePanel(id="store-panel")

        yield Footer()

    def on_mount(self) -> None:
        """Start the frame loop timer."""
        interval = 1.0 / BALANCE.tick_rate_hz
        self._tick_timer = self.set_interval(interval, self._game_tick)
        self._last_tick = time.time()
        self._sync_ui()

    def _game_tick(self) -> None:
        """Main frame loop — called BALANCE.tick_rate_hz times per second."""
        now = time.time()
        dt = now - self._last_tick
        self._last_tick = now

        self._session.advance(dt)

        for notif in self._session.drain_notifications():
            if notif == "win":
                self.notify(
                    "🎉 CONGRATULATIONS! You reached maximum saturation! 🎉",
                    severity="warning", timeout=6,
                )
            elif notif.startswith("rebirth:"):
                cubes = notif.split(":", 1)[1]
                self.notify(f"🔄 Rebirth! You now have {cubes} cubes.", severity="warning", timeout=4)

        self._sync_ui()

    def _sync_ui(self) -> None:
        """Push the latest frame to all UI widgets."""
        snap = self._session.snapshot()

        hud = self.query_one("#hud-panel", HUD)
        hud.update_from_snapshot(snap)

        view = self.query_one("#cube-view", CubeView)
        view.update_from_snapshot(snap)

        store = self.query_one("#store-panel", StorePanel)
        store.update_from_state(self._session.state)

    # ── Actions ──────────────────────────────────────

    def action_click_cube(self) -> None:
        """Click the first cube (keyboard stands in for a hit-test)."""
        self._session.click_cube(0)

    def _buy_upgrade(self, index: int) -> None:
        """Purchase upgrade at store index (0-based)."""
        kinds = list(ALL_UPGRADES)
        if index >= len(kinds):
            return

        kind = kinds[index]
        if self._session.buy_upgrade(kind):
            udef = ALL_UPGRADES[kind]
            self.notify(
                f"Bought {udef.name}! Level {self._session.state.level(kind)}",
                severity="information", timeout=1,
            )
        else:
            self.notify("Can't afford that upgrade.", severity="error", timeout=1)
        self._sync_ui()

    def action_buy_upgrade_1(self) -> None:
        self._buy_upgrade(0)

    def action_buy_upgrade_2(self) -> None:
        self._buy_upgrade(1)

    def action_buy_upgrade_3(self) -> None:
        self._buy_upgrade(2)

    def action_buy_upgrade_4(self) -> None:
        self._buy_upgrade(3)

    def action_buy_upgrade_5(self) -> None:
        self._buy_upgrade(4)

    def action_rebirth(self) -> None:
        """Ask for confirmation, then commit the rebirth."""
        kind = RebirthUpgradeKind.DOUBLE_CUBES
        result = self._session.request_rebirth(kind)
        if result is PurchaseResult.AWAITING_CONFIRMATION:
            self.push_screen(RebirthScreen(self._session.state, kind), self._on_rebirth_confirmed)
        else:
            self.notify("Can't afford a rebirth yet.", severity="error", timeout=1)

    def _on_rebirth_confirmed(self, confirmed: bool | None) -> None:
        """Called when the RebirthScreen is dismissed."""
        if not confirmed:
            self._session.cancel_rebirth()
            return
        if not self._session.commit_rebirth():
            self.notify("Rebirth failed — not enough points.", severity="error", timeout=2)
        self._sync_ui()

    def action_orbit(self, dx: int, dy: int) -> None:
        self._session.drag(dx * ARROW_DRAG, dy * ARROW_DRAG)

    def action_zoom(self, direction: int) -> None:
        self._session.zoom(direction)

    def action_save(self) -> None:
        if self._session.save():
            self.notify(
                f"Saved — {format_number(self._session.state.score)} points",
                severity="information", timeout=1,
            )
        else:
            self.notify("Could not save.", severity="error", timeout=2)

    def action_quit_game(self) -> None:
        """Save and quit."""
        self._session.save()
        self.exit()
