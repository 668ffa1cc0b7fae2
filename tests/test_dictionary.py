import asyncio

from conftest import FailingStore, FakeFetcher

from wordrush.config import GameConfig, STORAGE_KEYS
from wordrush.dictionary import FALLBACK_WORDS, LoadFailure, WordDictionary, parse_corpus
from wordrush.storage import MemoryStore

MAX_AGE = GameConfig().dictionary_max_age_ms


def make(store=None, fetcher=None, now=1_000_000):
    return WordDictionary(GameConfig(), store if store is not None else MemoryStore(), fetcher or FakeFetcher(), clock=lambda: now)


def test_parse_corpus_normalizes_and_filters():
    words = parse_corpus(" Cat\r\nDOG\na\n\nox \n", 2)
    assert words == {'cat', 'dog', 'ox'}


def test_network_load_populates_and_caches():
    store = MemoryStore()
    fetcher = FakeFetcher()
    d = make(store, fetcher)
    assert d.status == 'unloaded'
    asyncio.run(d.load())
    assert d.is_loaded()
    assert d.source == 'network'
    assert d.has_word('CAT') and d.has_word('trace')
    assert not d.has_word('a')
    assert d.fetched_at == 1_000_000
    cached = store.get(STORAGE_KEYS['dictionary'])
    assert cached['timestamp'] == 1_000_000
    assert set(cached['words']) == {'cat', 'act', 'scat', 'cart', 'parts', 'trace', 'rope', 'open', 'pie'}


def test_cache_round_trip_within_max_age():
    store = MemoryStore()
    first = make(store, now=5_000)
    asyncio.run(first.load())

    fetcher = FakeFetcher()
    second = make(store, fetcher, now=5_000 + MAX_AGE - 1)
    asyncio.run(second.load())
    assert second.source == 'cache'
    assert fetcher.calls == []
    assert second.word_count() == first.word_count()
    assert all(second.has_word(w) for w in ('cat', 'parts', 'open'))
    assert second.fetched_at == 5_000


def test_stale_cache_is_evicted():
    store = MemoryStore({STORAGE_KEYS['dictionary']: {'words': ['old'], 'timestamp': 0}})
    fetcher = FakeFetcher(error=LoadFailure('offline'))
    d = make(store, fetcher, now=MAX_AGE)
    asyncio.run(d.load())
    assert fetcher.calls
    assert d.source == 'fallback'
    assert store.get(STORAGE_KEYS['dictionary']) is None
    assert not d.has_word('old')


def test_malformed_cache_is_discarded():
    store = MemoryStore({STORAGE_KEYS['dictionary']: {'words': 'nope'}})
    d = make(store)
    asyncio.run(d.load())
    assert d.source == 'network'
    assert store.get(STORAGE_KEYS['dictionary'])['words']


def test_fetch_failure_falls_back():
    d = make(fetcher=FakeFetcher(error=LoadFailure('HTTP error! Status: 404')))
    asyncio.run(d.load())
    assert d.is_loaded()
    assert d.source == 'fallback'
    assert isinstance(d.last_error, LoadFailure)
    assert d.word_count() == len(FALLBACK_WORDS)
    assert d.has_word('Viking')


def test_empty_corpus_falls_back():
    d = make(fetcher=FakeFetcher(text="\n\n"))
    asyncio.run(d.load())
    assert d.source == 'fallback'


def test_cache_write_failure_keeps_words_in_memory():
    d = make(FailingStore())
    asyncio.run(d.load())
    assert d.source == 'network'
    assert d.has_word('cat')


def test_concurrent_loads_share_one_fetch():
    fetcher = FakeFetcher(delay=0.01)
    d = make(fetcher=fetcher)

    async def both():
        return await asyncio.gather(d.load(), d.load())

    a, b = asyncio.run(both())
    assert a is b is d
    assert len(fetcher.calls) == 1
    assert d.is_loaded()


def test_random_words_come_from_corpus():
    d = make()
    asyncio.run(d.load())
    picks = d.random_words(4)
    assert len(picks) == 4
    assert all(d.has_word(w) for w in picks)
    assert WordDictionary().random_words() == []


def test_load_after_fallback_keeps_fallback():
    fetcher = FakeFetcher()
    d = make(fetcher=fetcher)
    d.load_fallback()
    asyncio.run(d.load())
    assert fetcher.calls == []
    assert d.status == 'loaded'
    assert d.source == 'fallback'
    assert d.has_word('viking')
