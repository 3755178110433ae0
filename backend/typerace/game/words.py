from __future__ import annotations

from typing import Sequence


WORDS: tuple[str, ...] = (
    "weather",
    "wedding",
    "week",
    "weekend",
    "weekly",
    "weigh",
    "via",
    "victim",
    "victory",
    "video",
    "view",
    "viewer",
    "village",
    "violate",
    "violation",
    "violence",
    "violent",
    "virtually",
    "virtue",
    "virus",
    "visible",
    "vision",
    "visit",
    "visitor",
    "visual",
    "vital",
)


def select_words(words: Sequence[str], count: int) -> list[str]:
    """First `count` words, in list order. No shuffling: every session of the
    same size races the same words."""
    if count < 1:
        raise ValueError("a session needs at least one word")
    return list(words[:count])


def preview_words(count: int) -> list[str]:
    return select_words(WORDS, max(1, min(count, len(WORDS))))
