from __future__ import annotations
import json
import os
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_SCORING: Dict[int, int] = {
    2: 1,
    3: 2,
    4: 3,
    5: 5,
    6: 8,
    7: 12,
    8: 20,
}

STORAGE_KEYS = {
    'dictionary': 'wordrush_dictionary',
    'high_score': 'wordrush_high_score',
    'stats': 'wordrush_stats',
    'settings': 'wordrush_settings',
}

DEFAULT_CHARACTER = 'viking'

CHARACTERS = {
    'viking': 'A fierce Norse warrior known for strength and courage',
    'valkyrie': 'A divine maiden who guides fallen warriors to Valhalla',
}

MESSAGES = {
    'round_start': 'Game started! Find as many words as you can.',
    'too_short': 'Words must be at least {min} letters long.',
    'already_found': 'You already found "{word}".',
    'already_invalid': '"{word}" was already marked as invalid or used.',
    'cannot_form': '"{word}" cannot be formed from the given letters.',
    'not_in_dictionary': '"{word}" is not in the dictionary.',
    'valid': 'Great! "{word}" is a valid word! (+{points} points)',
    'inactive': 'Start a new game to play!',
    'round_over': "Time's up! Your final score: {score}.",
}

SEVEN_DAYS_MS = 7 * 24 * 60 * 60 * 1000


class GameConfig(BaseModel):
    """Settings fixed when an engine is built; never changed mid-round."""

    model_config = ConfigDict(frozen=True)

    duration_seconds: int = Field(120, gt=0)
    pool_size: int = Field(10, gt=0)
    vowel_count: int = Field(4, ge=0)
    min_word_length: int = Field(2, ge=1)
    max_word_length: int = Field(20, ge=1)
    vowel_pool: str = 'AEIOU'
    # repeated letters weight the draw
    consonant_pool: str = 'BBCCDDDFFGGHHJJKKLLMMNNPPQQRRSSTTTVVWWXXYYZZ'
    scoring: Dict[int, int] = Field(default_factory=lambda: dict(DEFAULT_SCORING))
    dictionary_url: str = 'http://localhost:8000/static/words.txt'
    dictionary_max_age_ms: int = Field(SEVEN_DAYS_MS, gt=0)
    fetch_timeout_seconds: float = 10.0
    tick_interval: float = Field(1.0, gt=0)
    storage_path: str = 'wordrush_data'
    log_level: str = 'INFO'

    @model_validator(mode='after')
    def _check(self) -> 'GameConfig':
        if self.vowel_count > self.pool_size:
            raise ValueError('vowel_count cannot exceed pool_size')
        if self.max_word_length < self.min_word_length:
            raise ValueError('max_word_length must be >= min_word_length')
        if not self.vowel_pool or (self.vowel_count < self.pool_size and not self.consonant_pool):
            raise ValueError('letter pools must not be empty')
        if not self.scoring:
            raise ValueError('scoring table must not be empty')
        values = [self.scoring[k] for k in sorted(self.scoring)]
        if any(b < a for a, b in zip(values, values[1:])):
            raise ValueError('scoring table must be non-decreasing by length')
        return self

    @classmethod
    def from_env(cls, **overrides) -> 'GameConfig':
        env = os.environ
        values = {}
        ints = {
            'duration_seconds': 'WORDRUSH_DURATION_SECONDS',
            'pool_size': 'WORDRUSH_POOL_SIZE',
            'vowel_count': 'WORDRUSH_VOWEL_COUNT',
            'min_word_length': 'WORDRUSH_MIN_WORD_LENGTH',
            'max_word_length': 'WORDRUSH_MAX_WORD_LENGTH',
            'dictionary_max_age_ms': 'WORDRUSH_DICTIONARY_MAX_AGE_MS',
        }
        for field, var in ints.items():
            if env.get(var):
                values[field] = int(env[var])
        strs = {
            'vowel_pool': 'WORDRUSH_VOWEL_POOL',
            'consonant_pool': 'WORDRUSH_CONSONANT_POOL',
            'dictionary_url': 'WORDRUSH_DICTIONARY_URL',
            'storage_path': 'WORDRUSH_STORAGE_PATH',
            'log_level': 'WORDRUSH_LOG_LEVEL',
        }
        for field, var in strs.items():
            if env.get(var):
                values[field] = env[var]
        if env.get('WORDRUSH_FETCH_TIMEOUT'):
            values['fetch_timeout_seconds'] = float(env['WORDRUSH_FETCH_TIMEOUT'])
        if env.get('WORDRUSH_TICK_INTERVAL'):
            values['tick_interval'] = float(env['WORDRUSH_TICK_INTERVAL'])
        # JSON object, e.g. {"2": 1, "3": 2}
        if env.get('WORDRUSH_SCORING'):
            values['scoring'] = {int(k): int(v) for k, v in json.loads(env['WORDRUSH_SCORING']).items()}
        values.update(overrides)
        return cls(**values)

    def public(self) -> dict:
        return {
            'durationSeconds': self.duration_seconds,
            'poolSize': self.pool_size,
            'vowelCount': self.vowel_count,
            'minWordLength': self.min_word_length,
            'maxWordLength': self.max_word_length,
            'scoring': {str(k): v for k, v in sorted(self.scoring.items())},
            'characters': sorted(CHARACTERS),
        }
