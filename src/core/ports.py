"""Ports (interfaces) used by the core.

Ports define the minimal contracts for timers and the log viewer so that the
core can run under Textual, a bare asyncio loop, or a manual test clock.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol

from core.log_registry import LogRegistry


class TimerHandle(Protocol):
    """A scheduled callback that can be cancelled before it fires."""

    def cancel(self) -> None:
        ...


class SchedulerPort(Protocol):
    """Deferred callbacks on the same single-threaded loop as the core."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        ...


class ViewerPort(Protocol):
    """An open log viewer window."""

    active_source: Optional[str]

    def focus(self) -> None:
        ...


class ViewerFactory(Protocol):
    """Create a viewer; the viewer calls on_close when it is dismissed."""

    def __call__(self, registry: LogRegistry, on_close: Callable[[], None]) -> ViewerPort:
        ...
