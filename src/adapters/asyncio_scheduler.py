"""asyncio scheduler adapter.

Implements the core SchedulerPort on an asyncio event loop. The returned
asyncio.TimerHandle already satisfies the TimerHandle contract.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Optional


class AsyncioScheduler:
    """Schedule deferred callbacks with loop.call_later."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay, callback)
