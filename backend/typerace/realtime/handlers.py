from __future__ import annotations

from typing import Any, Iterable

from flask import request
from flask_socketio import SocketIO

from ..game.errors import GameError
from . import events
from .events import Broadcast
from .router import EventRouter


def register_socketio_handlers(
    socketio: SocketIO,
    router: EventRouter,
    queue_check_interval: float = 1.0,
) -> None:
    logger = router.logger
    queue_task = {"started": False}

    def _emit_all(broadcasts: Iterable[Broadcast]) -> None:
        for b in broadcasts:
            for sid in b.members:
                socketio.server.enter_room(sid, b.room, namespace="/")
            socketio.emit(b.event, *b.args, to=b.room, skip_sid=b.skip_sid)

    def _dispatch(event: str, data: Any) -> dict:
        sid = request.sid
        try:
            broadcasts = router.handle(event, sid, data)
        except GameError as exc:
            logger.warning(f"[rejected] event={event} sid={sid} error={exc.code} detail={exc}")
            return {"ok": False, "error": exc.code}
        except Exception:
            logger.exception(f"[rejected] event={event} sid={sid} unexpected failure")
            return {"ok": False, "error": "internal_error"}

        try:
            _emit_all(broadcasts)
        except Exception:
            # State already changed; only the broadcast was lost.
            logger.exception(f"[broadcast] event={event} sid={sid} emit failed")
            return {"ok": False, "error": "broadcast_failed"}
        return {"ok": True}

    def _ensure_queue_task() -> None:
        if queue_task["started"] or queue_check_interval <= 0:
            return
        queue_task["started"] = True

        def _runner() -> None:
            while True:
                try:
                    _emit_all(router.drain())
                except Exception:
                    logger.exception("[queue-drain] failed")
                socketio.sleep(queue_check_interval)

        socketio.start_background_task(_runner)

    @socketio.on(events.GAME_SEARCH_INIT)
    def game_search_init(data=None):
        _ensure_queue_task()
        return _dispatch(events.GAME_SEARCH_INIT, data)

    @socketio.on(events.PLAYER_READY_INIT)
    def player_ready_init(data=None):
        return _dispatch(events.PLAYER_READY_INIT, data)

    @socketio.on(events.UPDATE_LOCAL_TEXT)
    def update_local_text(data=None):
        return _dispatch(events.UPDATE_LOCAL_TEXT, data)

    @socketio.on(events.COMPLETE_WORD)
    def complete_word(data=None):
        return _dispatch(events.COMPLETE_WORD, data)

    @socketio.on("disconnect")
    def on_disconnect(*args):
        sid = request.sid
        try:
            _emit_all(router.disconnect(sid))
        except Exception:
            logger.exception(f"[disconnect] sid={sid} cleanup failed")
