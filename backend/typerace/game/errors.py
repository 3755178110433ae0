from __future__ import annotations


class GameError(Exception):
    """Rejected event. State is left untouched when one of these is raised."""

    code = "game_error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.code)


class UnknownSession(GameError):
    code = "unknown_session"


class UnknownPlayer(GameError):
    code = "unknown_player"


class InvalidTransition(GameError):
    code = "invalid_transition"


class QueueDuplicateEntry(GameError):
    code = "queue_duplicate_entry"


class InvalidPayload(GameError):
    code = "invalid_payload"
