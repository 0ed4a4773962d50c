"""Store panel — regular upgrades and the rebirth upgrade, with costs."""

from __future__ import annotations

from rich.text import Text
from textual.reactive import reactive
from textual.widget import Widget

from cubeburst.data.upgrades import ALL_UPGRADES, REBIRTH_UPGRADES, UpgradeDef, UpgradeKind
from cubeburst.engine.economy import format_number, get_upgrade_cost
from cubeburst.engine.game_state import GameState
from cubeburst.engine.rebirth import get_rebirth_cost

STORE_KEYS = "12345"


def _stat_summary(udef: UpgradeDef, level: int) -> str:
    """Human-readable total effect at ``level``. Empty when nothing is owned."""
    if level <= 0:
        return ""

    parts = []
    if udef.score_weight:
        parts.append(f"+{udef.score_weight * level * 100:.0f}% score")
    if udef.force_weight:
        parts.append(f"+{udef.force_weight * level * 100:.0f}% force")
    if udef.fragment_weight:
        parts.append(f"+{udef.fragment_weight * level * 100:.0f}% fragments/axis")
    if udef.kind is UpgradeKind.AUTO_CLICKER:
        parts.append(f"{level} auto clicks/s")
    return " · ".join(parts)


class StorePanel(Widget):
    """Displays every upgrade with its level, cost and affordability."""

    DEFAULT_CSS = """
    StorePanel {
        width: 100%;
        height: 100%;
        padding: 1;
        overflow-y: auto;
    }
    """

    # Serialized store data for reactivity
    store_text: reactive[str] = reactive("")

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._state: GameState | None = None

    def render(self) -> Text:
        text = Text()
        text.append("  ═══ Store ═══\n\n", style="bold magenta")

        if self._state is None:
            return text
        state = self._state

        for i, (kind, udef) in enumerate(ALL_UPGRADES.items()):
            level = state.level(kind)
            cost = get_upgrade_cost(state, kind)
            affordable = state.score >= cost

            text.append(f"  [{STORE_KEYS[i]}] ", style="bold")
            text.append(f"{udef.name} ", style="bold green" if affordable else "bold red")
            text.append(f"Lv.{level}\n", style="dim")
            text.append(f"      {udef.description}\n", style="dim italic")

            stat = _stat_summary(udef, level)
            if stat:
                text.append(f"      Now: {stat}\n", style="cyan")

            text.append(f"      Cost: {format_number(cost)} points\n", style="green" if affordable else "red")
            text.append("\n")

        text.append("  ═══ Rebirth ═══\n\n", style="bold #ff922f")
        for kind, udef in REBIRTH_UPGRADES.items():
            level = state.rebirth_upgrade_level(kind)
            cost = get_rebirth_cost(state, kind)
            affordable = state.score >= cost
            text.append("  [R] ", style="bold")
            text.append(f"{udef.name} ", style="bold yellow" if affordable else "dim")
            text.append(f"Lv.{level}\n", style="dim")
            text.append(f"      {udef.effect}\n", style="dim italic")
            text.append(f"      Cost: {format_number(cost)} points\n", style="yellow" if affordable else "dim red")

        return text

    def update_from_state(self, state: GameState) -> None:
        """Sync panel with game state."""
        self._state = state
        # Trigger re-render via reactive
        self.store_text = "|".join(
            f"{kind.value}:{level}" for kind, level in state.upgrade_levels.items()
        ) + f"|s:{state.score:.0f}|r:{state.rebirth_level}"
