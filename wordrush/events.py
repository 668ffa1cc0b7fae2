from __future__ import annotations
import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Union

logger = logging.getLogger(__name__)

ROUND_START = 'round:start'
ROUND_TICK = 'round:tick'
ROUND_END = 'round:end'
WORD_RESULT = 'word:result'
LETTERS_SHUFFLED = 'letters:shuffled'
ROUND_PAUSED = 'round:paused'
ROUND_RESUMED = 'round:resumed'

Listener = Callable[[str, Any], Union[None, Awaitable[None]]]


class RoundEvents:
    """Observer list for the signals a game session sends to its client."""

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    async def emit(self, name: str, payload: Any = None):
        for listener in list(self._listeners):
            try:
                result = listener(name, payload)
                if asyncio.iscoroutine(result):
                    await result
            except Exception:
                logger.exception("Listener failed on %s", name)
