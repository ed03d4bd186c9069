"""Tests for the asyncio-backed clock and the scheduler running on a real loop."""

import asyncio

from speedread.clock import AsyncioClock
from speedread.pacing import PacingScheduler, SessionConfig


def test_asyncio_clock_fires_callback_after_delay():
    async def scenario():
        clock = AsyncioClock()
        fired = []
        started = clock.now()
        clock.call_later(20, lambda: fired.append(clock.now()))
        await asyncio.sleep(0.1)
        return started, fired

    started, fired = asyncio.run(scenario())
    assert len(fired) == 1
    assert fired[0] - started >= 15


def test_asyncio_clock_cancel():
    async def scenario():
        clock = AsyncioClock()
        fired = []
        handle = clock.call_later(10, lambda: fired.append(True))
        handle.cancel()
        await asyncio.sleep(0.05)
        return fired

    assert asyncio.run(scenario()) == []


def test_scheduler_completes_on_event_loop():
    async def scenario():
        done = asyncio.Event()
        positions = []
        engine = PacingScheduler(
            SessionConfig(
                text="one two three four five",
                initial_speed_wpm=6000,
                min_wpm=100,
                max_wpm=6000,
            ),
            on_complete=done.set,
            on_position=lambda index, item: positions.append(item),
        )
        engine.start()
        await asyncio.wait_for(done.wait(), timeout=5)
        engine.dispose()
        return engine, positions

    engine, positions = asyncio.run(scenario())
    assert engine.is_complete
    assert positions == ["one", "two", "three", "four", "five"]
