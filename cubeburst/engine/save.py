"""Save/load — the persistence blob and the stores that hold it.

The engine only needs an opaque get/set of a text blob; where that blob
lives (a file, a cookie, memory) is the host's business.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path

from cubeburst.data.upgrades import ALL_UPGRADES, REBIRTH_UPGRADES
from cubeburst.engine.economy import compute_derived
from cubeburst.engine.game_state import GameState
from cubeburst.engine.rebirth import cube_count_for

logger = logging.getLogger(__name__)

SAVE_DIR = Path.home() / ".cubeburst"
SAVE_FILE = SAVE_DIR / "save.json"


class InvalidSaveData(ValueError):
    """The blob could not be read as a save at all."""


# ── Stores ───────────────────────────────────────────────────────


class SaveStore:
    """Opaque get/set of a serialised blob."""

    def read(self) -> str | None:
        raise NotImplementedError

    def write(self, blob: str) -> None:
        raise NotImplementedError


class FileSaveStore(SaveStore):
    """Keeps the blob in a JSON file on disk."""

    def __init__(self, path: Path = SAVE_FILE) -> None:
        self.path = Path(path)

    def read(self) -> str | None:
        if not self.path.exists():
            return None
        try:
            return self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidSaveData(f"save file is not UTF-8 text: {exc}") from exc

    def write(self, blob: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(blob, encoding="utf-8")


class MemorySaveStore(SaveStore):
    """Keeps the blob in memory. Used by tests and throwaway sessions."""

    def __init__(self, blob: str | None = None) -> None:
        self.blob = blob
        self.writes = 0

    def read(self) -> str | None:
        return self.blob

    def write(self, blob: str) -> None:
        self.blob = blob
        self.writes += 1


# ── Serialisation helpers ────────────────────────────────────────


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def state_to_dict(state: GameState) -> dict:
    s = state
    return {
        "score": s.score,
        "upgrades": {kind.value: s.level(kind) for kind in ALL_UPGRADES},
        "rebirth_upgrades": {kind.value: s.rebirth_upgrade_level(kind) for kind in REBIRTH_UPGRADES},
        "rebirth_level": s.rebirth_level,
        "cube_count": s.cube_count,
        # Display cache only, recomputed from levels on load
        "score_multiplier": s.derived.score_multiplier,
        "has_won": s.has_won,
    }


_MISSING = object()


def _lookup(d: dict, key: str, *aliases: str):
    """Value under key, its camelCase spelling, or any alias."""
    for name in (key, _camel(key), *aliases):
        if name in d:
            return d[name]
    return _MISSING


def _number(d: dict, key: str, default: float, *aliases: str) -> float:
    value = _lookup(d, key, *aliases)
    if value is _MISSING:
        return default

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        logger.warning("Invalid save field %r=%r, using %r", key, value, default)
        return default
    try:
        value = float(value)
    except OverflowError:
        logger.warning("Out-of-range save field %r (too large), using %r", key, default)
        return default
    if not math.isfinite(value) or value < 0:
        logger.warning("Out-of-range save field %r=%r, using %r", key, value, default)
        return default
    return value


def _count(d: dict, key: str, default: int) -> int:
    value = _number(d, key, float(default))
    if value != int(value):
        logger.warning("Non-integer save field %r=%r, using %r", key, value, default)
        return default
    return int(value)


def _levels(d: dict, key: str, registry: dict) -> dict:
    """Read a kind → level mapping, defaulting each kind independently.

    Accepts plain integers or the older ``{"level": n, ...}`` shape, and
    both snake_case and camelCase kind names. Levels above an upgrade's
    ``max_level`` are clamped to it.
    """
    levels = {kind: 0 for kind in registry}
    raw = _lookup(d, key)
    if raw is _MISSING:
        return levels
    if not isinstance(raw, dict):
        logger.warning("Invalid save field %r=%r, resetting levels", key, raw)
        return levels

    for kind, udef in registry.items():
        entry = _lookup(raw, kind.value)
        if entry is _MISSING:
            continue
        if isinstance(entry, dict):
            entry = entry.get("level", 0)
        if (
            isinstance(entry, bool)
            or not isinstance(entry, (int, float))
            or (isinstance(entry, float) and not (math.isfinite(entry) and entry.is_integer()))
            or entry < 0
        ):
            logger.warning("Invalid level for %s: %r, using 0", kind.value, entry)
            continue
        level = int(entry)
        if level > udef.max_level:
            logger.warning("Level for %s above max %d, clamping", kind.value, udef.max_level)
            level = udef.max_level
        levels[kind] = level
    return levels


def dict_to_state(d: dict) -> GameState:
    """Build a state from a decoded blob, falling back field by field."""
    state = GameState(
        score=_number(d, "score", 0.0, "clickCount"),
        upgrade_levels=_levels(d, "upgrades", ALL_UPGRADES),
        rebirth_upgrade_levels=_levels(d, "rebirth_upgrades", REBIRTH_UPGRADES),
        rebirth_level=_count(d, "rebirth_level", 0),
    )

    has_won = _lookup(d, "has_won")
    state.has_won = has_won is True

    # Cube count is fully determined by the rebirth upgrades
    state.cube_count = cube_count_for(state.rebirth_upgrade_levels)
    stored_cubes = _count(d, "cube_count", state.cube_count)
    if stored_cubes != state.cube_count:
        logger.warning("Stored cube_count %d disagrees with rebirth upgrades (%d)", stored_cubes, state.cube_count)

    # Never trust the stored multiplier: recompute, then flag drift
    derived = compute_derived(state)
    stored_mult = _number(d, "score_multiplier", derived.score_multiplier)
    if not math.isclose(stored_mult, derived.score_multiplier, rel_tol=1e-9):
        logger.warning(
            "Stored score_multiplier %s disagrees with upgrades (%s); using recomputed value",
            stored_mult, derived.score_multiplier,
        )
    return state


def encode(state: GameState) -> str:
    return json.dumps(state_to_dict(state), indent=2)


def decode(blob: str) -> GameState:
    """Parse a blob. Raises InvalidSaveData if it isn't a JSON object."""
    try:
        data = json.loads(blob)
    except (ValueError, TypeError) as exc:
        raise InvalidSaveData(f"save blob is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise InvalidSaveData(f"save blob must be a JSON object, got {type(data).__name__}")
    return dict_to_state(data)


# ── Public API ───────────────────────────────────────────────────


def save_game(store: SaveStore, state: GameState) -> bool:
    """Persist the state. Returns False if the store failed (non-fatal)."""
    try:
        store.write(encode(state))
    except OSError as exc:
        logger.warning("Could not write save: %s", exc)
        return False
    return True


def load_game(store: SaveStore) -> GameState | None:
    """Load a saved state. Returns None if no save exists.

    A blob that can't be read at all yields a fresh default state.
    """
    try:
        blob = store.read()
    except OSError as exc:
        logger.warning("Could not read save: %s", exc)
        return None
    except InvalidSaveData as exc:
        logger.warning("Discarding unreadable save: %s", exc)
        return GameState()

    if blob is None:
        logger.info("No save data found, starting fresh")
        return None

    try:
        state = decode(blob)
    except InvalidSaveData as exc:
        logger.warning("Discarding unreadable save: %s", exc)
        return GameState()

    logger.info("Game loaded: score %s, multiplier %s", state.score, state.derived.score_multiplier)
    return state
