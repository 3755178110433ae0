from __future__ import annotations

import math


POINTS_PER_LETTER = 500
SPEED_MULTIPLIER = 5
ERROR_PENALTY = 100


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calc_score(word: str, elapsed_ms: int | float, errors: int = 0) -> int:
    """Points for typing `word` `elapsed_ms` after the session started.

    Every word is worth at least 500 points per letter. Faster completions
    earn up to five times that, minus 100 per reported typing error, but the
    result never drops below the per-letter floor.
    """
    time_in_sec = max(elapsed_ms, 1) / 1000
    min_score = len(word) * POINTS_PER_LETTER
    raw = _round_half_up(min_score * SPEED_MULTIPLIER / time_in_sec) - errors * ERROR_PENALTY
    return max(min_score, raw)
