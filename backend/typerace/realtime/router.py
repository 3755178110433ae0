from __future__ import annotations

import logging
from typing import Any

from ..game.service import GameService
from . import events
from .events import Broadcast, CompleteWord, GameSearchInit, PlayerReadyInit, UpdateLocalText


class EventRouter:
    """Turns inbound events into service calls and outbound broadcasts.

    Transport-free: the Socket.IO binding feeds it sids and payloads and emits
    whatever it returns. GameError subclasses propagate to the caller.
    """

    def __init__(self, service: GameService, match_on_join: bool = True, logger: logging.Logger | None = None) -> None:
        self.service = service
        self.match_on_join = match_on_join
        self.logger = logger or service.logger

    def handle(self, event: str, sender_id: str, data: Any) -> list[Broadcast]:
        message = events.parse_inbound(event, data)

        if isinstance(message, GameSearchInit):
            return self.search(sender_id, message)
        if isinstance(message, PlayerReadyInit):
            return self.ready(sender_id, message)
        if isinstance(message, UpdateLocalText):
            return self.update_text(sender_id, message)
        if isinstance(message, CompleteWord):
            return self.complete_word(sender_id, message)
        raise AssertionError(f"unhandled message {message!r}")

    def search(self, sender_id: str, message: GameSearchInit) -> list[Broadcast]:
        self.service.enqueue(sender_id, message.display_name)
        if not self.match_on_join:
            return []
        return self.drain()

    def drain(self) -> list[Broadcast]:
        return [
            Broadcast(
                event=events.GAME_SEARCH_SUCCESS,
                payload=m.state,
                session_id=m.session_id,
                members=m.member_ids,
            )
            for m in self.service.drain()
        ]

    def ready(self, sender_id: str, message: PlayerReadyInit) -> list[Broadcast]:
        state, started = self.service.set_ready(sender_id, message.session_id)
        if not started:
            return []
        return [Broadcast(events.GAME_READY_SUCCESS, state, message.session_id)]

    def update_text(self, sender_id: str, message: UpdateLocalText) -> list[Broadcast]:
        state = self.service.set_text(sender_id, message.session_id, message.current_text)
        return [Broadcast(events.GAME_UPDATE, state, message.session_id, skip_sid=sender_id)]

    def complete_word(self, sender_id: str, message: CompleteWord) -> list[Broadcast]:
        state, finished = self.service.complete_word(sender_id, message.session_id, message.error_count)
        event = events.GAME_OVER if finished else events.GAME_UPDATE
        return [Broadcast(event, state, message.session_id)]

    def disconnect(self, sender_id: str) -> list[Broadcast]:
        departure = self.service.disconnect(sender_id)
        if departure.session_id is None or departure.abandoned:
            return []
        return [
            Broadcast(
                events.PLAYER_DISCONNECTED,
                (sender_id, events.session_room(departure.session_id)),
                departure.session_id,
                skip_sid=sender_id,
            )
        ]
