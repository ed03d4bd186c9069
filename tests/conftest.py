"""Pytest configuration and fixtures."""

import pytest

from speedread.pacing import PacingScheduler, SessionConfig


class FakeTimer:
    def __init__(self, when, seq, callback):
        self.when = when
        self.seq = seq
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeClock:
    """Virtual-time clock. Every timer fires ``lateness_ms`` after its due time."""

    def __init__(self, start=1000.0, lateness_ms=0.0):
        self.time = start
        self.lateness_ms = lateness_ms
        self._timers = []
        self._seq = 0

    def now(self):
        return self.time

    def call_later(self, delay_ms, callback):
        self._seq += 1
        timer = FakeTimer(self.time + max(0.0, delay_ms) + self.lateness_ms, self._seq, callback)
        self._timers.append(timer)
        return timer

    @property
    def pending(self):
        return [t for t in self._timers if not t.cancelled]

    def advance(self, ms):
        """Move time forward by ``ms``, firing due timers in order."""
        target = self.time + ms
        while True:
            due = [t for t in self.pending if t.when <= target]
            if not due:
                break
            timer = min(due, key=lambda t: (t.when, t.seq))
            self._timers.remove(timer)
            self.time = timer.when
            timer.callback()
        self.time = target


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_engine(clock):
    """Build a scheduler on the fake clock; keyword args go to SessionConfig."""
    created = []

    def factory(text="The quick brown fox jumps", on_complete=None, on_progress=None,
                on_position=None, **config):
        config.setdefault("initial_speed_wpm", 300)
        config.setdefault("min_wpm", 100)
        config.setdefault("max_wpm", 1000)
        config.setdefault("wpm_step", 25)
        engine = PacingScheduler(
            SessionConfig(text=text, **config),
            clock=clock,
            on_complete=on_complete,
            on_progress=on_progress,
            on_position=on_position,
        )
        created.append(engine)
        return engine

    yield factory
    for engine in created:
        engine.dispose()
