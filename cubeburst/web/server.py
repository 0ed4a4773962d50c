"""Cube Burst Web — Flask server that wraps the game session.

Exposes a JSON API for a browser renderer. Frames are driven lazily: each
request first catches up on elapsed wall time at the fixed frame rate
before returning the current frame snapshot.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import asdict

from flask import Flask, jsonify, request

from cubeburst.data.balance import BALANCE
from cubeburst.data.upgrades import ALL_UPGRADES, REBIRTH_UPGRADES, RebirthUpgradeKind, UpgradeKind
from cubeburst.engine.economy import format_number, get_upgrade_cost
from cubeburst.engine.geometry import Vec3
from cubeburst.engine.rebirth import get_rebirth_cost
from cubeburst.engine.save import FileSaveStore, SaveStore
from cubeburst.engine.session import GameSession

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Flask app
# ---------------------------------------------------------------------------

app = Flask(__name__)

# ---------------------------------------------------------------------------
# Session holder (single-player)
# ---------------------------------------------------------------------------

_lock = threading.Lock()
_session: GameSession | None = None
_store: SaveStore | None = None
_last_tick: float = 0.0


def configure(store: SaveStore) -> None:
    """Choose where the session persists. Drops any running session."""
    global _session, _store
    with _lock:
        _store = store
        _session = None


def _ensure_game() -> GameSession:
    """Load the session on first use."""
    global _session, _last_tick
    if _session is None:
        _session = GameSession.load(_store if _store is not None else FileSaveStore())
        _last_tick = time.time()
    return _session


def _do_frames(session: GameSession) -> None:
    """Catch up whole frames since the last call."""
    global _last_tick
    now = time.time()
    frame_dt = 1.0 / BALANCE.tick_rate_hz
    frames = int((now - _last_tick) / frame_dt)
    if frames <= 0:
        return
    _last_tick += frames * frame_dt
    # Cap catch-up so a long AFK doesn't stall the request
    frames = min(frames, BALANCE.max_catch_up_frames)
    for _ in range(frames):
        session.advance(frame_dt)


def _frame_json(session: GameSession) -> dict:
    """Build the JSON blob sent to the renderer."""
    snap = session.snapshot()
    s = session.state

    store = []
    for kind, udef in ALL_UPGRADES.items():
        cost = get_upgrade_cost(s, kind)
        store.append({
            "kind": kind.value,
            "name": udef.name,
            "description": udef.description,
            "effect": udef.effect,
            "level": s.level(kind),
            "cost": format_number(cost),
            "cost_raw": cost if math.isfinite(cost) else None,
            "can_afford": s.score >= cost,
        })

    rebirth_store = []
    for kind, udef in REBIRTH_UPGRADES.items():
        cost = get_rebirth_cost(s, kind)
        rebirth_store.append({
            "kind": kind.value,
            "name": udef.name,
            "description": udef.description,
            "effect": udef.effect,
            "level": s.rebirth_upgrade_level(kind),
            "cost": format_number(cost),
            "cost_raw": cost if math.isfinite(cost) else None,
            "can_afford": s.score >= cost,
        })

    pending = session.pending_rebirth
    return {
        "score": format_number(snap.score),
        "score_raw": snap.score,
        "score_multiplier": snap.score_multiplier,
        "progress": snap.progress,
        "max_score": snap.max_score,
        "has_won": snap.has_won,
        "cube_count": snap.cube_count,
        "rebirth_level": snap.rebirth_level,
        "phase": snap.phase.name.lower(),
        "camera_distance": snap.camera_distance,
        "cubes": [asdict(c) for c in snap.cubes],
        "fragments": [asdict(f) for f in snap.fragments],
        "store": store,
        "rebirth_store": rebirth_store,
        "pending_rebirth": pending.value if pending is not None else None,
        "notifications": session.drain_notifications(),
        "frame": session.frame,
    }


def _result_json(session: GameSession, key: str, result) -> dict:
    data = _frame_json(session)
    data[key] = result.name.lower()
    data["ok"] = bool(result)
    return data


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@app.route("/api/frame")
def api_frame():
    with _lock:
        session = _ensure_game()
        _do_frames(session)
        return jsonify(_frame_json(session))


@app.route("/api/action/click", methods=["POST"])
def action_click():
    with _lock:
        session = _ensure_game()
        _do_frames(session)
        body = request.get_json(silent=True) or {}
        point = body.get("point")
        try:
            target = Vec3.of(point) if point is not None else None
        except (TypeError, ValueError):
            return jsonify({"error": "point must be [x, y, z]"}), 400
        if target is None:
            accepted = session.click_cube(0)
        else:
            accepted = session.click(target)
        data = _frame_json(session)
        data["click_accepted"] = accepted
        return jsonify(data)


@app.route("/api/action/buy/<kind>", methods=["POST"])
def action_buy(kind: str):
    with _lock:
        session = _ensure_game()
        _do_frames(session)
        try:
            upgrade = UpgradeKind(kind)
        except ValueError:
            return jsonify({"error": f"Unknown upgrade {kind!r}"}), 404
        return jsonify(_result_json(session, "purchase_result", session.buy_upgrade(upgrade)))


@app.route("/api/action/rebirth/request/<kind>", methods=["POST"])
def action_rebirth_request(kind: str):
    with _lock:
        session = _ensure_game()
        _do_frames(session)
        try:
            upgrade = RebirthUpgradeKind(kind)
        except ValueError:
            return jsonify({"error": f"Unknown rebirth upgrade {kind!r}"}), 404
        return jsonify(_result_json(session, "rebirth_result", session.request_rebirth(upgrade)))


@app.route("/api/action/rebirth/commit", methods=["POST"])
def action_rebirth_commit():
    with _lock:
        session = _ensure_game()
        _do_frames(session)
        return jsonify(_result_json(session, "rebirth_result", session.commit_rebirth()))


@app.route("/api/action/rebirth/cancel", methods=["POST"])
def action_rebirth_cancel():
    with _lock:
        session = _ensure_game()
        session.cancel_rebirth()
        return jsonify(_frame_json(session))


@app.route("/api/action/drag", methods=["POST"])
def action_drag():
    with _lock:
        session = _ensure_game()
        body = request.get_json(silent=True) or {}
        try:
            dx = float(body.get("dx", 0.0))
            dy = float(body.get("dy", 0.0))
        except (TypeError, ValueError):
            return jsonify({"error": "dx and dy must be numbers"}), 400
        session.dragging = bool(body.get("dragging", False))
        session.drag(dx, dy)
        return jsonify({"ok": True})


@app.route("/api/action/zoom", methods=["POST"])
def action_zoom():
    with _lock:
        session = _ensure_game()
        body = request.get_json(silent=True) or {}
        try:
            direction = int(body.get("direction", 0))
        except (TypeError, ValueError):
            return jsonify({"error": "direction must be an integer"}), 400
        return jsonify({"camera_distance": session.zoom(direction)})


@app.route("/api/action/save", methods=["POST"])
def action_save():
    with _lock:
        session = _ensure_game()
        return jsonify({"saved": session.save()})


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def run_server(host: str = "127.0.0.1", port: int = 5000, debug: bool = False) -> None:
    """Start the Flask development server."""
    logger.info("Serving on http://%s:%d/", host, port)
    app.run(host=host, port=port, debug=debug, use_reloader=False)
