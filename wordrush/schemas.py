from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional


class WireModel(BaseModel):
    # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(populate_by_name=True)


Outcome = Literal[
    'valid',
    'too_short',
    'already_found',
    'already_invalid',
    'cannot_form',
    'not_in_dictionary',
    'inactive',
]

RoundStatus = Literal['idle', 'active', 'ended']

DictionaryStatus = Literal['unloaded', 'loading', 'loaded']

DictionarySource = Literal['cache', 'network', 'fallback']


class SubmissionResult(WireModel):
    outcome: Outcome
    word: str
    points: int = 0
    message: str = ''

    @property
    def accepted(self) -> bool:
        return self.outcome == 'valid'


class RoundStats(WireModel):
    score: int = 0
    words_found: int = Field(0, alias='wordsFound')
    invalid_attempts: int = Field(0, alias='invalidAttempts')
    duration_ms: Optional[int] = Field(None, alias='durationMs')
    character: Optional[str] = None
    found_words: List[str] = Field(default_factory=list, alias='foundWords')
    invalid_words: List[str] = Field(default_factory=list, alias='invalidWords')


class SessionStatsRecord(WireModel):
    games_played: int = Field(0, alias='gamesPlayed', ge=0)
    total_score: int = Field(0, alias='totalScore', ge=0)
    total_words_found: int = Field(0, alias='totalWordsFound', ge=0)
    average_score: int = Field(0, alias='averageScore', ge=0)
    best_score: int = Field(0, alias='bestScore', ge=0)


class DictionaryCacheRecord(BaseModel):
    words: List[str]
    # epoch milliseconds
    timestamp: int


class UserSettings(WireModel):
    sound_enabled: bool = Field(True, alias='soundEnabled')
    reduced_motion: bool = Field(False, alias='reducedMotion')
    volume: float = Field(0.7, ge=0.0, le=1.0)


class TimerState(WireModel):
    remaining: int
    is_paused: bool = Field(False, alias='isPaused')
    is_running: bool = Field(False, alias='isRunning')


class GameSnapshot(WireModel):
    status: RoundStatus
    letters: List[str]
    score: int
    time_left: int = Field(alias='timeLeft')
    found_words: List[str] = Field(alias='foundWords')
    invalid_words: List[str] = Field(alias='invalidWords')
    character: Optional[str] = None
    timer: Optional[TimerState] = None
