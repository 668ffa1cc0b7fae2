from __future__ import annotations
import logging
from typing import Optional

from pydantic import ValidationError

from .config import STORAGE_KEYS
from .schemas import RoundStats, SessionStatsRecord, UserSettings
from .storage import KeyValueStore

logger = logging.getLogger(__name__)


class SessionStats:
    """Aggregates across completed rounds, persisted in the key/value store."""

    def __init__(self, store: KeyValueStore):
        self.store = store
        self.record = self.load()
        self._unsaved_high = 0

    def load(self) -> SessionStatsRecord:
        raw = self.store.get(STORAGE_KEYS['stats'])
        if raw is None:
            return SessionStatsRecord()
        try:
            return SessionStatsRecord.model_validate(raw)
        except ValidationError:
            logger.warning("Discarding malformed session stats")
            return SessionStatsRecord()

    def record_round(self, stats: RoundStats) -> SessionStatsRecord:
        r = self.record
        games = r.games_played + 1
        total = r.total_score + stats.score
        self.record = SessionStatsRecord(
            gamesPlayed=games,
            totalScore=total,
            totalWordsFound=r.total_words_found + stats.words_found,
            averageScore=int(total / games + 0.5),
            bestScore=max(r.best_score, stats.score),
        )
        if not self.store.set(STORAGE_KEYS['stats'], self.record.model_dump(by_alias=True)):
            logger.warning("Session stats kept in memory only")
        logger.debug("Session stats saved: %s", self.record)
        return self.record

    def high_score(self) -> int:
        value = self.store.get(STORAGE_KEYS['high_score'], 0)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            logger.warning("Discarding malformed high score %r", value)
            value = 0
        return max(value, self._unsaved_high)

    def save_high_score(self, score: int) -> bool:
        if score <= self.high_score():
            return False
        if not self.store.set(STORAGE_KEYS['high_score'], score):
            self._unsaved_high = score
            logger.warning("High score kept in memory only")
        logger.info("New high score: %d", score)
        return True


def load_settings(store: KeyValueStore) -> UserSettings:
    raw = store.get(STORAGE_KEYS['settings'])
    if raw is None:
        return UserSettings()
    try:
        return UserSettings.model_validate(raw)
    except ValidationError:
        logger.warning("Discarding malformed user settings")
        return UserSettings()


def save_settings(store: KeyValueStore, settings: UserSettings) -> bool:
    ok = store.set(STORAGE_KEYS['settings'], settings.model_dump(by_alias=True))
    if not ok:
        logger.warning("User settings kept in memory only")
    return ok
