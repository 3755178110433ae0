from __future__ import annotations

import uuid
from dataclasses import asdict
from typing import Iterable, Sequence

from .errors import InvalidTransition, UnknownPlayer
from .models import Participant, PlayerState, Session
from .scoring import calc_score


def create_session(
    participants: Sequence[Participant],
    words: Iterable[str],
    created_at: int | None = None,
) -> Session:
    if not participants:
        raise ValueError("cannot create a session without players")

    word_list = tuple(words)
    if not word_list:
        raise ValueError("cannot create a session without words")

    players = {
        p.id: PlayerState(id=p.id, display_name=p.display_name)
        for p in participants
    }
    return Session(
        id=str(uuid.uuid4()),
        words=word_list,
        created_at=created_at,
        players=players,
    )


def _player(session: Session, player_id: str) -> PlayerState:
    player = session.players.get(player_id)
    if player is None:
        raise UnknownPlayer(f"player {player_id} is not in session {session.id}")
    return player


def set_ready(session: Session, player_id: str) -> None:
    player = _player(session, player_id)
    if session.status != "waiting":
        raise InvalidTransition(f"session {session.id} is {session.status}")
    player.is_ready = True


def all_ready(session: Session) -> bool:
    return all(p.is_ready for p in session.players.values())


def start(session: Session, now_ms: int) -> None:
    if session.status != "waiting" or session.start_time is not None:
        raise InvalidTransition(f"session {session.id} already started")
    session.start_time = now_ms
    session.status = "running"


def set_text(session: Session, player_id: str, text: str) -> None:
    player = _player(session, player_id)
    if session.status == "finished":
        raise InvalidTransition(f"session {session.id} is finished")
    player.current_text = text


def complete_word(session: Session, player_id: str, errors: int, now_ms: int) -> int:
    """Score the player's current word and move them to the next one.

    Returns the points awarded. A completion after the last word (a duplicate
    or out-of-order event) is rejected without touching the player.
    """
    player = _player(session, player_id)
    if session.status != "running" or session.start_time is None:
        raise InvalidTransition(f"session {session.id} is {session.status}")
    if player.current_word_index >= len(session.words):
        raise InvalidTransition(f"player {player_id} already completed every word")

    word = session.words[player.current_word_index]
    points = calc_score(word, now_ms - session.start_time, errors)

    player.score += points
    player.current_text = ""
    player.current_word_index += 1
    return points


def is_over(session: Session) -> bool:
    # First finisher ends the race for everyone.
    target = len(session.words)
    return any(p.current_word_index == target for p in session.players.values())


def finish(session: Session, now_ms: int, winner_id: str | None = None) -> None:
    session.status = "finished"
    session.finished_at = now_ms
    if winner_id is None:
        target = len(session.words)
        winner_id = next(
            (p.id for p in session.players.values() if p.current_word_index == target),
            None,
        )
    session.winner_id = winner_id


def session_public_state(session: Session) -> dict:
    players = {}
    for pid, p in session.players.items():
        d = asdict(p)
        players[pid] = {
            "id": d["id"],
            "displayName": d["display_name"],
            "isReady": d["is_ready"],
            "currentText": d["current_text"],
            "currentWordIndex": d["current_word_index"],
            "score": d["score"],
            "connected": d["connected"],
        }

    return {
        "id": session.id,
        "words": list(session.words),
        "startTime": session.start_time,
        "status": session.status,
        "players": players,
        "winnerId": session.winner_id,
    }
