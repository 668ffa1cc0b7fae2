from __future__ import annotations
import asyncio
import logging
from typing import Awaitable, Callable, Optional, Union

from ..schemas import TimerState

logger = logging.getLogger(__name__)

TickCallback = Callable[[int], Union[None, Awaitable[None]]]
CompleteCallback = Callable[[], Union[None, Awaitable[None]]]


class RoundClock:
    """Pausable countdown driven by an asyncio task.

    Pausing only suppresses ticks; the background task keeps sleeping on its
    interval so resume takes effect on the very next tick.
    """

    def __init__(
        self,
        on_tick: Optional[TickCallback] = None,
        on_complete: Optional[CompleteCallback] = None,
        interval: float = 1.0,
    ):
        self.on_tick = on_tick
        self.on_complete = on_complete
        self.interval = interval
        self.remaining: int = 0
        self.paused: bool = False
        self.running: bool = False
        self._task: Optional[asyncio.Task] = None

    @property
    def state(self) -> str:
        if not self.running:
            return 'stopped'
        return 'paused' if self.paused else 'running'

    def start(self, duration: int):
        self.stop()
        self.remaining = max(0, int(duration))
        self.paused = False
        self.running = True
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # no loop: the caller drives tick() by hand
            loop = None
        if loop is not None:
            self._task = loop.create_task(self._run())
        logger.debug("Clock started with %d seconds", self.remaining)

    def stop(self):
        was_running = self.running
        self.running = False
        task, self._task = self._task, None
        if task is not None and not task.done():
            try:
                current = asyncio.current_task()
            except RuntimeError:
                current = None
            # completion fires from inside the task; don't cancel ourselves
            if task is not current:
                task.cancel()
        if was_running:
            logger.debug("Clock stopped")

    def pause(self):
        if self.running:
            self.paused = True
            logger.debug("Clock paused at %d", self.remaining)

    def resume(self):
        if self.running:
            self.paused = False
            logger.debug("Clock resumed at %d", self.remaining)

    def add_time(self, seconds: int) -> bool:
        if not self.running or seconds <= 0:
            return False
        self.remaining += int(seconds)
        logger.debug("Added %d seconds to clock", seconds)
        return True

    async def tick(self):
        if not self.running or self.paused:
            return
        self.remaining = max(0, self.remaining - 1)
        await _call(self.on_tick, self.remaining)
        if self.remaining <= 0 and self.running:
            self.stop()
            await _call(self.on_complete)

    async def _run(self):
        me = asyncio.current_task()
        try:
            # a restarted clock owns a new task; this one must bow out
            while self.running and self._task is me:
                await asyncio.sleep(self.interval)
                if self._task is not me:
                    break
                await self.tick()
        except asyncio.CancelledError:
            return

    def snapshot(self) -> TimerState:
        return TimerState(remaining=self.remaining, isPaused=self.paused, isRunning=self.running)


async def _call(callback, *args):
    if callback is None:
        return
    result = callback(*args)
    if asyncio.iscoroutine(result):
        await result
