"""Timer seam between the pacing scheduler and an event loop.

The scheduler only needs a monotonic "now" and single-shot timers it can
cancel. Times are in milliseconds throughout.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Optional, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Clock(Protocol):
    def now(self) -> float:
        """Monotonic time in milliseconds."""
        ...

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` once after ``delay_ms``."""
        ...


class AsyncioClock:
    """Clock backed by an asyncio event loop.

    When no loop is given, the running loop is looked up on each call, so the
    clock can be created before the loop starts as long as it is only used
    from inside it.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self.loop.time() * 1000.0

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(max(0.0, delay_ms) / 1000.0, callback)
