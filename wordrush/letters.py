from __future__ import annotations
import random
from typing import Dict, Iterable, List, Optional, Sequence

from .config import GameConfig


def shuffle_letters(letters: Sequence[str], rng: Optional[random.Random] = None) -> List[str]:
    """Fisher-Yates shuffle into a new list; the input is left untouched."""
    rng = rng or random
    shuffled = list(letters)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def generate(config: Optional[GameConfig] = None, rng: Optional[random.Random] = None) -> List[str]:
    config = config or GameConfig()
    rng = rng or random
    vowels = [rng.choice(config.vowel_pool) for _ in range(config.vowel_count)]
    consonants = [rng.choice(config.consonant_pool) for _ in range(config.pool_size - config.vowel_count)]
    return shuffle_letters([c.upper() for c in vowels + consonants], rng)


def _counts(letters: Iterable[str]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for ch in letters:
        ch = ch.lower()
        counts[ch] = counts.get(ch, 0) + 1
    return counts


def can_form_word(word: str, pool: Iterable[str]) -> bool:
    # each letter of the word consumes one matching letter from the pool
    remaining = _counts(pool)
    for ch in word.lower():
        if remaining.get(ch, 0) <= 0:
            return False
        remaining[ch] -= 1
    return True


def word_complexity(word: str, pool: Iterable[str]) -> float:
    """Rough difficulty: letters that are scarce in the pool count for more."""
    freq = _counts(pool)
    return sum(1 / (freq.get(ch) or 1) for ch in word.lower())
