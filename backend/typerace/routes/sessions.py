from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from ..game.errors import UnknownSession
from ..game.service import GameService

bp = Blueprint("sessions", __name__)


def _service() -> GameService:
    return current_app.extensions["typerace"]


@bp.get("/sessions")
def list_sessions():
    service = _service()
    return jsonify(
        {
            "sessions": service.list_session_states(),
            "queued": service.queued_count(),
            "history": service.history(),
        }
    )


@bp.get("/sessions/<session_id>")
def get_session(session_id: str):
    try:
        state = _service().session_state(session_id)
    except UnknownSession:
        return jsonify({"error": "session_not_found"}), 404
    return jsonify(state)
