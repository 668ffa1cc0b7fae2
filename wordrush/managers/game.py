from __future__ import annotations
import asyncio
import logging
import random
from typing import Dict, List, Optional

from .. import events as ev
from ..config import DEFAULT_CHARACTER, GameConfig, MESSAGES
from ..dictionary import WordDictionary
from ..events import RoundEvents
from ..letters import generate
from ..round_state import RoundState
from ..schemas import GameSnapshot, RoundStats, SubmissionResult
from ..stats import SessionStats
from ..utils import format_message
from .timer import RoundClock

logger = logging.getLogger(__name__)


class GameSession:
    """One player's game: owns the round state, the letter pool and the clock."""

    def __init__(
        self,
        session_id: str,
        config: GameConfig,
        dictionary: WordDictionary,
        stats: SessionStats,
        rng: Optional[random.Random] = None,
    ):
        self.id = session_id
        self.config = config
        self.dictionary = dictionary
        self.stats = stats
        self.rng = rng or random.Random()
        self.events = RoundEvents()
        self.state = RoundState(config)
        self.clock = RoundClock(self._on_tick, self._on_complete, interval=config.tick_interval)
        self._submit_lock = asyncio.Lock()

    def select_character(self, character: str):
        self.state.select_character(character)

    async def start_round(self) -> List[str]:
        if not self.dictionary.is_loaded():
            await self.dictionary.load()
        self.clock.stop()
        character = self.state.selected_character
        self.state.reset()
        self.state.selected_character = character or DEFAULT_CHARACTER
        self.state.set_letters(generate(self.config, self.rng))
        self.state.start_game()
        self.clock.start(self.config.duration_seconds)
        letters = list(self.state.letters)
        await self.events.emit(ev.ROUND_START, {
            'letters': letters,
            'duration': self.config.duration_seconds,
            'message': MESSAGES['round_start'],
        })
        return letters

    async def submit(self, raw: str) -> SubmissionResult:
        # submissions queue on the lock and resolve one at a time
        async with self._submit_lock:
            result = self.state.submit(raw, self.dictionary)
        await self.events.emit(ev.WORD_RESULT, result.model_dump(by_alias=True))
        return result

    async def shuffle(self) -> Optional[List[str]]:
        if not self.state.is_active:
            return None
        letters = self.state.shuffle(self.rng)
        await self.events.emit(ev.LETTERS_SHUFFLED, {'letters': letters})
        return letters

    async def pause(self) -> bool:
        if not self.state.is_active or self.clock.paused:
            return False
        self.clock.pause()
        await self.events.emit(ev.ROUND_PAUSED, self.clock.snapshot().model_dump(by_alias=True))
        return True

    async def resume(self) -> bool:
        if not self.state.is_active or not self.clock.paused:
            return False
        self.clock.resume()
        await self.events.emit(ev.ROUND_RESUMED, self.clock.snapshot().model_dump(by_alias=True))
        return True

    async def end_round(self) -> Optional[RoundStats]:
        # the clock stops first so no tick lands on an ended round
        self.clock.stop()
        if not self.state.end_game():
            return None
        round_stats = self.state.game_stats()
        session_stats = self.stats.record_round(round_stats)
        new_high = self.stats.save_high_score(round_stats.score)
        await self.events.emit(ev.ROUND_END, {
            'round': round_stats.model_dump(by_alias=True),
            'session': session_stats.model_dump(by_alias=True),
            'highScore': self.stats.high_score(),
            'newHighScore': new_high,
            'message': format_message(MESSAGES['round_over'], score=round_stats.score),
        })
        return round_stats

    def new_game(self):
        self.clock.stop()
        self.state.reset()
        logger.info("Session %s: new game", self.id)

    def close(self):
        self.clock.stop()

    def snapshot(self) -> GameSnapshot:
        snap = self.state.snapshot()
        snap.timer = self.clock.snapshot()
        return snap

    async def _on_tick(self, remaining: int):
        self.state.set_time_left(remaining)
        await self.events.emit(ev.ROUND_TICK, {'remaining': remaining})

    async def _on_complete(self):
        await self.end_round()


class GameManager:
    def __init__(self, config: GameConfig, dictionary: WordDictionary, stats: SessionStats):
        self.config = config
        self.dictionary = dictionary
        self.stats = stats
        self.sessions: Dict[str, GameSession] = {}

    def get(self, session_id: str) -> Optional[GameSession]:
        return self.sessions.get(session_id)

    def get_or_create(self, session_id: str) -> GameSession:
        if session_id not in self.sessions:
            self.sessions[session_id] = GameSession(session_id, self.config, self.dictionary, self.stats)
        return self.sessions[session_id]

    def remove(self, session_id: str):
        session = self.sessions.pop(session_id, None)
        if session is not None:
            session.close()
