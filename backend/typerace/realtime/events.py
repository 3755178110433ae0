from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..game.errors import InvalidPayload


# Inbound
GAME_SEARCH_INIT = "gameSearchInit"
PLAYER_READY_INIT = "playerReadyInit"
UPDATE_LOCAL_TEXT = "updateLocalText"
COMPLETE_WORD = "completeWord"

# Outbound
GAME_SEARCH_SUCCESS = "gameSearchSuccess"
GAME_READY_SUCCESS = "gameReadySuccess"
GAME_UPDATE = "gameUpdate"
GAME_OVER = "gameOver"
PLAYER_DISCONNECTED = "playerDisconnected"

MAX_NAME_LENGTH = 32
MAX_TEXT_LENGTH = 256


def session_room(session_id: str) -> str:
    return f"game-{session_id}"


def _payload(data: Any) -> Mapping[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise InvalidPayload("payload must be an object")
    return data


def _first(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in payload:
            return payload[key]
    return None


def _session_id(payload: Mapping[str, Any]) -> str:
    # "gameId" is what older clients send
    value = _first(payload, "sessionId", "gameId")
    session_id = str(value).strip() if value is not None else ""
    if not session_id:
        raise InvalidPayload("sessionId is required")
    return session_id


@dataclass(frozen=True)
class GameSearchInit:
    display_name: str

    @classmethod
    def from_payload(cls, data: Any) -> "GameSearchInit":
        payload = _payload(data)
        name = str(_first(payload, "displayName", "name") or "").strip()
        if not name or len(name) > MAX_NAME_LENGTH:
            raise InvalidPayload("displayName must be 1-32 characters")
        if any(ord(ch) < 32 for ch in name):
            raise InvalidPayload("displayName contains control characters")
        return cls(display_name=name)


@dataclass(frozen=True)
class PlayerReadyInit:
    session_id: str

    @classmethod
    def from_payload(cls, data: Any) -> "PlayerReadyInit":
        return cls(session_id=_session_id(_payload(data)))


@dataclass(frozen=True)
class UpdateLocalText:
    session_id: str
    current_text: str

    @classmethod
    def from_payload(cls, data: Any) -> "UpdateLocalText":
        payload = _payload(data)
        text = payload.get("currentText", "")
        if text is None:
            text = ""
        if not isinstance(text, str) or len(text) > MAX_TEXT_LENGTH:
            raise InvalidPayload("currentText must be a short string")
        return cls(session_id=_session_id(payload), current_text=text)


@dataclass(frozen=True)
class CompleteWord:
    session_id: str
    error_count: int

    @classmethod
    def from_payload(cls, data: Any) -> "CompleteWord":
        payload = _payload(data)
        raw = _first(payload, "errorCount", "errors")
        if raw is None:
            raw = 0
        if isinstance(raw, bool):
            raise InvalidPayload("errorCount must be an integer")
        try:
            errors = int(raw)
        except (TypeError, ValueError):
            raise InvalidPayload("errorCount must be an integer")
        if errors < 0:
            raise InvalidPayload("errorCount must not be negative")
        return cls(session_id=_session_id(payload), error_count=errors)


INBOUND = {
    GAME_SEARCH_INIT: GameSearchInit,
    PLAYER_READY_INIT: PlayerReadyInit,
    UPDATE_LOCAL_TEXT: UpdateLocalText,
    COMPLETE_WORD: CompleteWord,
}


def parse_inbound(event: str, data: Any):
    message_cls = INBOUND.get(event)
    if message_cls is None:
        raise InvalidPayload(f"unknown event {event}")
    return message_cls.from_payload(data)


@dataclass(frozen=True)
class Broadcast:
    """One outbound event for a session's broadcast group.

    `members` are added to the group before emitting; `skip_sid` is left out.
    A tuple payload is emitted as positional arguments.
    """

    event: str
    payload: dict | tuple
    session_id: str
    skip_sid: str | None = None
    members: tuple[str, ...] = ()

    @property
    def room(self) -> str:
        return session_room(self.session_id)

    @property
    def args(self) -> tuple:
        if isinstance(self.payload, tuple):
            return self.payload
        return (self.payload,)
