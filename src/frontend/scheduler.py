"""Textual scheduler adapter.

Implements the core SchedulerPort with Textual timers so highlight timers
fire on the app's own event loop.
"""

from __future__ import annotations

from typing import Callable

from textual.dom import DOMNode
from textual.timer import Timer


class TextualTimerHandle:
    """TimerHandle wrapper around a one-shot Textual Timer."""

    def __init__(self, timer: Timer) -> None:
        self._timer = timer

    def cancel(self) -> None:
        self._timer.stop()


class TextualScheduler:
    """Schedule deferred callbacks with set_timer on a widget or app."""

    def __init__(self, node: DOMNode) -> None:
        self._node = node

    def call_later(self, delay: float, callback: Callable[[], None]) -> TextualTimerHandle:
        return TextualTimerHandle(self._node.set_timer(delay, callback))
