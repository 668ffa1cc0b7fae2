from __future__ import annotations
import asyncio
import logging
import random
import time
from typing import Awaitable, Callable, List, Optional, Set

import aiohttp
from pydantic import ValidationError

from .config import GameConfig, STORAGE_KEYS
from .schemas import DictionaryCacheRecord, DictionarySource, DictionaryStatus
from .storage import KeyValueStore, MemoryStore

logger = logging.getLogger(__name__)

# Built-in word list used when the corpus cannot be fetched, so the game
# stays playable offline.
FALLBACK_WORDS = {
    'cat', 'dog', 'house', 'tree', 'run', 'jump', 'play', 'game', 'word', 'letter',
    'apple', 'banana', 'orange', 'computer', 'keyboard', 'mouse', 'ocean', 'mountain',
    'elephant', 'giraffe', 'happiness', 'freedom', 'courage', 'justice', 'wisdom',
    'viking', 'valkyrie', 'norse', 'rune', 'myth', 'legend', 'hero', 'battle', 'sword',
    'shield', 'dragon', 'wolf', 'bear', 'eagle', 'storm', 'thunder', 'lightning',
    'fire', 'ice', 'wind', 'earth', 'water', 'magic', 'spell', 'quest', 'adventure',
}

Fetcher = Callable[[str], Awaitable[str]]


class LoadFailure(Exception):
    """The corpus could not be fetched or parsed."""


def now_ms() -> int:
    return int(time.time() * 1000)


async def fetch_corpus(url: str, timeout: float = 10.0) -> str:
    try:
        async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=timeout)) as session:
            async with session.get(url) as resp:
                if resp.status != 200:
                    raise LoadFailure(f"HTTP error! Status: {resp.status}")
                return await resp.text(encoding='utf-8')
    except (aiohttp.ClientError, asyncio.TimeoutError, UnicodeDecodeError) as exc:
        raise LoadFailure(str(exc) or exc.__class__.__name__) from exc


def parse_corpus(text: str, min_length: int) -> Set[str]:
    words = (line.strip().lower() for line in text.split('\n'))
    return {w for w in words if len(w) >= min_length}


class WordDictionary:
    def __init__(
        self,
        config: Optional[GameConfig] = None,
        store: Optional[KeyValueStore] = None,
        fetcher: Optional[Fetcher] = None,
        clock: Callable[[], int] = now_ms,
    ):
        self.config = config or GameConfig()
        self.store = store if store is not None else MemoryStore()
        self._fetcher = fetcher
        self._now = clock
        self._words: Set[str] = set()
        self.status: DictionaryStatus = 'unloaded'
        self.source: Optional[DictionarySource] = None
        self.fetched_at: Optional[int] = None
        self.last_error: Optional[Exception] = None
        self._load_task: Optional[asyncio.Task] = None

    async def load(self) -> 'WordDictionary':
        # every caller awaits the same task, so the corpus is fetched once
        if self._load_task is None:
            if self.is_loaded():
                return self
            self.status = 'loading'
            self._load_task = asyncio.ensure_future(self._load())
        await asyncio.shield(self._load_task)
        return self

    async def _load(self) -> None:
        try:
            cached = self._load_from_cache()
            if cached is not None:
                self._adopt(set(cached.words), 'cache')
                self.fetched_at = cached.timestamp
                logger.info("Dictionary loaded from cache: %d words", len(self._words))
                return
            await self._load_from_network()
        except Exception as exc:
            self.last_error = exc
            logger.warning("Dictionary load failed, using fallback words: %s", exc)
            self.load_fallback()

    def _load_from_cache(self) -> Optional[DictionaryCacheRecord]:
        key = STORAGE_KEYS['dictionary']
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            record = DictionaryCacheRecord.model_validate(raw)
        except ValidationError:
            logger.warning("Discarding malformed dictionary cache")
            self.store.remove(key)
            return None
        age = self._now() - record.timestamp
        if age < 0 or age >= self.config.dictionary_max_age_ms:
            logger.debug("Dictionary cache expired (age %d ms)", age)
            self.store.remove(key)
            return None
        return record

    async def _load_from_network(self) -> None:
        url = self.config.dictionary_url
        logger.debug("Loading dictionary from %s", url)
        if self._fetcher is not None:
            text = await self._fetcher(url)
        else:
            text = await fetch_corpus(url, self.config.fetch_timeout_seconds)
        words = parse_corpus(text, self.config.min_word_length)
        if not words:
            raise LoadFailure('Dictionary corpus is empty')
        stamp = self._now()
        self._adopt(words, 'network')
        self.fetched_at = stamp
        self._save_to_cache(stamp)
        logger.info("Dictionary loaded from network: %d words", len(self._words))

    def _save_to_cache(self, stamp: int) -> None:
        record = DictionaryCacheRecord(words=sorted(self._words), timestamp=stamp)
        if not self.store.set(STORAGE_KEYS['dictionary'], record.model_dump()):
            logger.warning("Dictionary cache write failed; continuing in memory")

    def _adopt(self, words: Set[str], source: DictionarySource) -> None:
        self._words = words
        self.source = source
        self.status = 'loaded'

    def load_fallback(self) -> None:
        self._adopt(set(FALLBACK_WORDS), 'fallback')
        logger.info("Using fallback dictionary")

    def is_loaded(self) -> bool:
        return self.status == 'loaded'

    def has_word(self, word: str) -> bool:
        if not word:
            return False
        return word.lower() in self._words

    def word_count(self) -> int:
        return len(self._words)

    def random_words(self, count: int = 10, rng: Optional[random.Random] = None) -> List[str]:
        rng = rng or random
        pool = sorted(self._words)
        if not pool:
            return []
        return [rng.choice(pool) for _ in range(min(count, len(pool)))]
