import asyncio

from wordrush.managers.timer import RoundClock


def recorder(interval=60.0):
    ticks, done = [], []
    clock = RoundClock(ticks.append, lambda: done.append(True), interval=interval)
    return clock, ticks, done


def test_countdown_completes_once():
    async def scenario():
        clock, ticks, done = recorder()
        clock.start(5)
        for _ in range(8):
            await clock.tick()
        return clock, ticks, done

    clock, ticks, done = asyncio.run(scenario())
    assert ticks == [4, 3, 2, 1, 0]
    assert done == [True]
    assert clock.state == 'stopped'
    assert clock.remaining == 0


def test_paused_ticks_are_suppressed():
    async def scenario():
        clock, ticks, done = recorder()
        clock.start(5)
        await clock.tick()
        clock.pause()
        assert clock.state == 'paused'
        await clock.tick()
        await clock.tick()
        clock.resume()
        await clock.tick()
        clock.stop()
        return clock, ticks

    clock, ticks = asyncio.run(scenario())
    assert ticks == [4, 3]
    assert clock.remaining == 3


def test_stop_is_idempotent_and_halts_ticks():
    async def scenario():
        clock, ticks, done = recorder()
        clock.start(3)
        clock.stop()
        clock.stop()
        await clock.tick()
        return ticks, done

    ticks, done = asyncio.run(scenario())
    assert ticks == [] and done == []


def test_background_task_drives_clock():
    async def scenario():
        clock, ticks, done = recorder(interval=0.01)
        clock.start(3)
        await asyncio.sleep(0.3)
        return ticks, done, clock

    ticks, done, clock = asyncio.run(scenario())
    assert ticks == [2, 1, 0]
    assert done == [True]
    assert not clock.running


def test_restart_cancels_previous_countdown():
    async def scenario():
        clock, ticks, done = recorder(interval=0.01)
        clock.start(100)
        first = clock._task
        clock.start(2)
        await asyncio.sleep(0.2)
        return ticks, done, first

    ticks, done, first = asyncio.run(scenario())
    assert ticks == [1, 0]
    assert done == [True]
    assert first.cancelled() or first.done()


def test_add_time_only_while_running():
    async def scenario():
        clock, ticks, done = recorder()
        assert not clock.add_time(5)
        clock.start(2)
        assert clock.add_time(3)
        snap = clock.snapshot()
        clock.stop()
        return snap

    snap = asyncio.run(scenario())
    assert snap.remaining == 5
    assert snap.is_running and not snap.is_paused


def test_completion_callback_may_restart_clock():
    async def scenario():
        starts = []
        clock = RoundClock(interval=0.01)

        def again():
            if not starts:
                starts.append(True)
                clock.start(1)
        clock.on_complete = again
        clock.start(1)
        await asyncio.sleep(0.2)
        return clock, starts

    clock, starts = asyncio.run(scenario())
    assert starts == [True]
    assert not clock.running
