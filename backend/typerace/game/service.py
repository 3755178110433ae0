from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from threading import RLock
from typing import Any, Callable, Iterator, Mapping, Sequence

from . import session as ops
from .errors import InvalidTransition, UnknownSession
from .matchmaking import MatchQueue
from .models import Participant, Session
from .registry import SessionRegistry
from .words import WORDS, select_words


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Match:
    session_id: str
    member_ids: tuple[str, ...]
    state: dict


@dataclass(frozen=True)
class Departure:
    participant_id: str
    dropped_from_queue: int = 0
    session_id: str | None = None
    abandoned: bool = False


class GameService:
    """Owns the matchmaking queue, the session registry and their locks.

    One RLock guards the queue and the registry together. Each session gets
    its own RLock; session mutations and serialization happen under it. Lock
    order is session lock -> service lock, never the reverse.
    """

    def __init__(
        self,
        players_per_game: int = 3,
        words_per_game: int = 2,
        words: Sequence[str] = WORDS,
        allow_duplicates: bool = False,
        history_limit: int = 100,
        clock: Callable[[], int] = now_ms,
        logger: logging.Logger | None = None,
    ) -> None:
        if players_per_game < 1:
            raise ValueError("players_per_game must be positive")
        if not 1 <= words_per_game <= len(words):
            raise ValueError("words_per_game must be between 1 and the word list length")

        self.players_per_game = players_per_game
        self.words_per_game = words_per_game
        self.words = tuple(words)
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)

        self._lock = RLock()
        self._queue = MatchQueue(allow_duplicates=allow_duplicates)
        self._registry = SessionRegistry(history_limit=history_limit)
        self._session_locks: dict[str, RLock] = {}

    @classmethod
    def from_config(cls, config: Mapping[str, Any], **kwargs: Any) -> "GameService":
        return cls(
            players_per_game=int(config.get("PLAYERS_PER_GAME", 3)),
            words_per_game=int(config.get("WORDS_PER_GAME", 2)),
            allow_duplicates=bool(config.get("QUEUE_ALLOW_DUPLICATES", False)),
            history_limit=int(config.get("SESSION_HISTORY_LIMIT", 100)),
            **kwargs,
        )

    # ---- queue ----

    def enqueue(self, participant_id: str, display_name: str) -> int:
        """Queue a participant. Returns the queue length afterwards."""
        with self._lock:
            active = self._registry.lookup_session_for_participant(participant_id)
            if active is not None:
                raise InvalidTransition(f"{participant_id} is already playing in session {active}")
            self._queue.enqueue(Participant(id=participant_id, display_name=display_name))
            queued = len(self._queue)

        self.logger.info(f"[queue-join] sid={participant_id} name={display_name!r} queued={queued}")
        return queued

    def drain(self) -> list[Match]:
        """Form as many sessions as the queue allows, earliest arrivals first."""
        matches: list[Match] = []
        with self._lock:
            while True:
                group = self._queue.drain(
                    self.players_per_game,
                    is_busy=lambda pid: self._registry.lookup_session_for_participant(pid) is not None,
                )
                if group is None:
                    break

                session = ops.create_session(
                    group,
                    select_words(self.words, self.words_per_game),
                    created_at=self.clock(),
                )
                member_ids = tuple(p.id for p in group)
                self._registry.register(session, member_ids)
                self._session_locks[session.id] = RLock()
                matches.append(Match(session.id, member_ids, ops.session_public_state(session)))

        for m in matches:
            self.logger.info(f"[match] session={m.session_id} players={list(m.member_ids)}")
        return matches

    def queued_count(self) -> int:
        with self._lock:
            return len(self._queue)

    # ---- sessions ----

    @contextmanager
    def _locked_session(self, session_id: str) -> Iterator[Session]:
        with self._lock:
            self._registry.lookup_session(session_id)
            guard = self._session_locks[session_id]

        with guard:
            with self._lock:
                # Retired while we were waiting for the session lock.
                if self._session_locks.get(session_id) is not guard:
                    raise UnknownSession(f"session {session_id} not found")
                session = self._registry.lookup_session(session_id)
            yield session

    def _retire(self, session: Session, reason: str) -> dict:
        state = ops.session_public_state(session)
        with self._lock:
            self._registry.remove(session.id)
            self._session_locks.pop(session.id, None)
            self._registry.archive({**state, "reason": reason, "finishedAt": session.finished_at})
        return state

    def set_ready(self, player_id: str, session_id: str) -> tuple[dict, bool]:
        """Returns (state, started). `started` is true only on the all-ready edge."""
        with self._locked_session(session_id) as session:
            ops.set_ready(session, player_id)
            started = False
            if ops.all_ready(session):
                ops.start(session, self.clock())
                started = True
            state = ops.session_public_state(session)

        self.logger.info(f"[ready] session={session_id} sid={player_id}")
        if started:
            self.logger.info(f"[start] session={session_id} start_time={state['startTime']}")
        return state, started

    def set_text(self, player_id: str, session_id: str, text: str) -> dict:
        with self._locked_session(session_id) as session:
            ops.set_text(session, player_id, text)
            return ops.session_public_state(session)

    def complete_word(self, player_id: str, session_id: str, errors: int) -> tuple[dict, bool]:
        """Returns (state, finished). A finished session is retired to history."""
        with self._locked_session(session_id) as session:
            now = self.clock()
            points = ops.complete_word(session, player_id, errors, now)
            index = session.players[player_id].current_word_index
            finished = ops.is_over(session)
            if finished:
                ops.finish(session, now)
                state = self._retire(session, reason="finished")
            else:
                state = ops.session_public_state(session)

        self.logger.info(
            f"[complete] session={session_id} sid={player_id} index={index} points={points} errors={errors}"
        )
        if finished:
            self.logger.info(f"[game-over] session={session_id} winner={state['winnerId']}")
        return state, finished

    def disconnect(self, participant_id: str) -> Departure:
        """Drop the participant's queue entries and mark them as a ghost player.

        The player stays in its session so its score remains visible; only the
        back-reference is cleared. A session left with no connected player is
        retired as abandoned.
        """
        with self._lock:
            dropped = self._queue.discard(participant_id)
            session_id = self._registry.lookup_session_for_participant(participant_id)
            self._registry.forget_participant(participant_id)

        if dropped:
            self.logger.info(f"[queue-drop] sid={participant_id} entries={dropped}")
        if session_id is None:
            return Departure(participant_id, dropped)

        try:
            with self._locked_session(session_id) as session:
                player = session.players.get(participant_id)
                if player is not None:
                    player.connected = False
                abandoned = not any(p.connected for p in session.players.values())
                if abandoned:
                    self._retire(session, reason="abandoned")
        except UnknownSession:
            # Finished between the lookup and the lock.
            return Departure(participant_id, dropped)

        self.logger.info(f"[disconnect] session={session_id} sid={participant_id}")
        if abandoned:
            self.logger.info(f"[abandoned] session={session_id}")
        return Departure(participant_id, dropped, session_id, abandoned)

    # ---- inspection ----

    def session_state(self, session_id: str) -> dict:
        with self._locked_session(session_id) as session:
            return ops.session_public_state(session)

    def session_id_for(self, participant_id: str) -> str | None:
        with self._lock:
            return self._registry.lookup_session_for_participant(participant_id)

    def list_session_states(self) -> list[dict]:
        with self._lock:
            ids = [s.id for s in self._registry.sessions()]
        states = []
        for sid in ids:
            try:
                states.append(self.session_state(sid))
            except UnknownSession:
                continue
        return states

    def history(self) -> list[dict]:
        with self._lock:
            return list(self._registry.history)
