from __future__ import annotations

import math
from typing import Sequence

from counterduel.counter.engine import MAX_VALUE

# (max difference, base score), checked in order
SCORE_BANDS: tuple[tuple[int, int], ...] = (
    (0, 100),
    (5, 80),
    (10, 60),
    (20, 40),
    (50, 20),
)


def circular_distance(target: int, value: int) -> int:
    """Shortest distance between two positions on the 0-100 dial."""
    direct = abs(target - value)
    return min(direct, MAX_VALUE + 1 - direct)


def base_score(difference: int) -> int:
    for limit, score in SCORE_BANDS:
        if difference <= limit:
            return score
    return 0


def calculate_score(target: int, value: int, strength: int, miss: int) -> int:
    base = base_score(circular_distance(target, value))
    return (base + strength) // (miss + 1)


def calculate_average_score(scores: Sequence[int]) -> int:
    if not scores:
        return 0
    return math.ceil(sum(scores) / len(scores))
