from __future__ import annotations
from typing import Mapping

from .config import DEFAULT_SCORING


def score_for(length: int, table: Mapping[int, int] = DEFAULT_SCORING) -> int:
    """Points for a word of ``length`` letters.

    Lengths past the longest entry earn that entry's value, so every word of
    eight or more letters scores the same under the default table. Lengths
    shorter than the shortest entry earn nothing.
    """
    if length in table:
        return table[length]
    longest = max(table)
    if length > longest:
        return table[longest]
    return 0


def score_word(word: str, table: Mapping[int, int] = DEFAULT_SCORING) -> int:
    return score_for(len(word), table)
