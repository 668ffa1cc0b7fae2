from __future__ import annotations
import logging
import random
import time
from typing import Callable, Dict, List, Optional, Sequence

from .config import CHARACTERS, GameConfig, MESSAGES
from .letters import can_form_word, shuffle_letters
from .schemas import GameSnapshot, RoundStats, RoundStatus, SubmissionResult, Outcome
from .scoring import score_for
from .utils import format_message, sanitize_input

logger = logging.getLogger(__name__)


class InvalidStateError(RuntimeError):
    pass


def _now_ms() -> int:
    return int(time.time() * 1000)


class RoundState:
    """Per-round state and the word submission pipeline.

    ``found_words`` and ``invalid_words`` are dicts used as insertion-ordered
    sets. The dictionary and the letter pool are only referenced, never owned.
    """

    def __init__(self, config: Optional[GameConfig] = None, clock: Callable[[], int] = _now_ms):
        self.config = config or GameConfig()
        self._now = clock
        self.reset()

    def reset(self):
        self.letters: List[str] = []
        self.found_words: Dict[str, int] = {}
        self.invalid_words: Dict[str, None] = {}
        self.score: int = 0
        self.time_left: int = self.config.duration_seconds
        self.status: RoundStatus = 'idle'
        self.selected_character: Optional[str] = None
        self.start_time: Optional[int] = None
        self.end_time: Optional[int] = None

    @property
    def is_active(self) -> bool:
        return self.status == 'active'

    def select_character(self, character: str):
        if not isinstance(character, str) or character not in CHARACTERS:
            raise ValueError(f"Unknown character: {character!r}")
        self.selected_character = character

    def set_letters(self, letters: Sequence[str]):
        self.letters = [c.upper() for c in letters]

    def set_time_left(self, seconds: int):
        self.time_left = max(0, int(seconds))

    def start_game(self):
        if self.status == 'active':
            raise InvalidStateError('round already active')
        if self.status == 'ended':
            # a new round must not inherit the previous one's words
            self.found_words = {}
            self.invalid_words = {}
            self.score = 0
            self.end_time = None
            self.time_left = self.config.duration_seconds
        self.status = 'active'
        self.start_time = self._now()
        logger.info("Round started")

    def end_game(self) -> bool:
        if self.status != 'active':
            return False
        self.status = 'ended'
        self.end_time = self._now()
        logger.info("Round ended. Duration: %dms, Final score: %d",
                    self.end_time - (self.start_time or self.end_time), self.score)
        return True

    def shuffle(self, rng: Optional[random.Random] = None) -> List[str]:
        if self.status == 'idle':
            raise InvalidStateError('cannot shuffle before the round starts')
        self.letters = shuffle_letters(self.letters, rng)
        return list(self.letters)

    def _result(self, outcome: Outcome, word: str, points: int = 0) -> SubmissionResult:
        message = format_message(
            MESSAGES[outcome],
            word=word.upper(),
            points=points,
            min=self.config.min_word_length,
        )
        return SubmissionResult(outcome=outcome, word=word, points=points, message=message)

    def submit(self, raw: str, dictionary) -> SubmissionResult:
        word = sanitize_input(raw, self.config.max_word_length)
        if not self.is_active:
            return self._result('inactive', word)
        if len(word) < self.config.min_word_length:
            return self._result('too_short', word)
        if word in self.found_words:
            return self._result('already_found', word)
        if word in self.invalid_words:
            return self._result('already_invalid', word)
        if not can_form_word(word, self.letters):
            self.invalid_words[word] = None
            logger.debug("Cannot form %s from %s", word, ''.join(self.letters))
            return self._result('cannot_form', word)
        if not dictionary.has_word(word):
            self.invalid_words[word] = None
            logger.debug("Not in dictionary: %s", word)
            return self._result('not_in_dictionary', word)
        points = score_for(len(word), self.config.scoring)
        self.found_words[word] = points
        self.score += points
        logger.info("Word found: %s, Score: +%d", word, points)
        return self._result('valid', word, points)

    def game_stats(self) -> RoundStats:
        duration = None
        if self.end_time is not None and self.start_time is not None:
            duration = self.end_time - self.start_time
        return RoundStats(
            score=self.score,
            wordsFound=len(self.found_words),
            invalidAttempts=len(self.invalid_words),
            durationMs=duration,
            character=self.selected_character,
            foundWords=list(self.found_words),
            invalidWords=list(self.invalid_words),
        )

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            status=self.status,
            letters=list(self.letters),
            score=self.score,
            timeLeft=self.time_left,
            foundWords=list(self.found_words),
            invalidWords=list(self.invalid_words),
            character=self.selected_character,
        )
