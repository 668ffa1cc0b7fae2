import asyncio
import random

import pytest

from wordrush.config import GameConfig
from wordrush.dictionary import WordDictionary
from wordrush.managers.game import GameSession
from wordrush.stats import SessionStats
from wordrush.storage import MemoryStore

CORPUS = "cat\nact\nscat\ncart\nparts\n  Trace \nrope\nopen\npie\na\n\n"


def run(coro):
    return asyncio.run(coro)


class FakeFetcher:
    def __init__(self, text=CORPUS, error=None, delay=0.0):
        self.text = text
        self.error = error
        self.delay = delay
        self.calls = []

    async def __call__(self, url):
        self.calls.append(url)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.text


class FailingStore(MemoryStore):
    def set(self, key, value):
        return False


@pytest.fixture()
def config():
    # long tick interval: tests drive the clock by hand
    return GameConfig(duration_seconds=3, tick_interval=60.0)


@pytest.fixture()
def store():
    return MemoryStore()


@pytest.fixture()
def fallback_dictionary(config, store):
    d = WordDictionary(config, store)
    d.load_fallback()
    return d


@pytest.fixture()
def session(config, store, fallback_dictionary):
    return GameSession('s1', config, fallback_dictionary, SessionStats(store), rng=random.Random(7))
