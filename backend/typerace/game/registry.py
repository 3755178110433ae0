from __future__ import annotations

from collections import deque
from typing import Iterable

from .errors import UnknownSession
from .models import Session


class SessionRegistry:
    """Active sessions plus the participant -> session back-references.

    Not thread-safe; the owning service locks around it.
    """

    def __init__(self, history_limit: int = 100) -> None:
        self._sessions: dict[str, Session] = {}
        self._session_by_participant: dict[str, str] = {}
        self.history: deque[dict] = deque(maxlen=max(0, history_limit))

    def __len__(self) -> int:
        return len(self._sessions)

    def register(self, session: Session, participant_ids: Iterable[str]) -> None:
        if session.id in self._sessions:
            raise ValueError(f"session {session.id} already registered")
        self._sessions[session.id] = session
        for pid in participant_ids:
            self._session_by_participant[pid] = session.id

    def lookup_session(self, session_id: str) -> Session:
        session = self._sessions.get(session_id)
        if session is None:
            raise UnknownSession(f"session {session_id} not found")
        return session

    def lookup_session_for_participant(self, participant_id: str) -> str | None:
        return self._session_by_participant.get(participant_id)

    def remove(self, session_id: str, clear_participants: bool = True) -> Session:
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise UnknownSession(f"session {session_id} not found")
        if clear_participants:
            for pid in session.players:
                if self._session_by_participant.get(pid) == session_id:
                    del self._session_by_participant[pid]
        return session

    def forget_participant(self, participant_id: str) -> None:
        self._session_by_participant.pop(participant_id, None)

    def archive(self, state: dict) -> None:
        self.history.append(state)

    def sessions(self) -> list[Session]:
        return list(self._sessions.values())
