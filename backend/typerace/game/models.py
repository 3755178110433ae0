from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


SessionStatus = Literal["waiting", "running", "finished"]


@dataclass(frozen=True)
class Participant:
    id: str
    display_name: str


@dataclass
class PlayerState:
    id: str
    display_name: str
    is_ready: bool = False
    current_text: str = ""
    current_word_index: int = 0
    score: int = 0
    connected: bool = True


@dataclass
class Session:
    id: str
    words: tuple[str, ...]
    status: SessionStatus = "waiting"
    start_time: int | None = None
    created_at: int | None = None
    finished_at: int | None = None
    winner_id: str | None = None
    players: dict[str, PlayerState] = field(default_factory=dict)
