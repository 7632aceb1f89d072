"""Typed observer signals (core domain).

A Signal delivers one argument to every connected handler, synchronously and
in connection order. Connecting the same handler twice is a no-op that hands
back the existing subscription, so a handler can never fire twice per emit.
"""

from __future__ import annotations

import logging
from typing import Callable, Generic, List, Optional, TypeVar

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

Handler = Callable[[T], None]


class Subscription(Generic[T]):
    """Token returned by Signal.connect; call unsubscribe() to detach."""

    def __init__(self, signal: "Signal[T]", handler: Handler) -> None:
        self._signal = signal
        self.handler = handler
        self.active = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self._signal.disconnect(self.handler)


class Signal(Generic[T]):
    """Synchronous signal with an explicit subscribe/unsubscribe contract."""

    def __init__(self, name: str = "signal") -> None:
        self.name = name
        # Handlers need not be hashable (e.g. list.append), so keep a list.
        self._subscriptions: List[Subscription[T]] = []

    def connect(self, handler: Handler) -> Subscription[T]:
        existing = self._find(handler)
        if existing is not None:
            return existing
        subscription = Subscription(self, handler)
        self._subscriptions.append(subscription)
        return subscription

    def disconnect(self, handler: Handler) -> bool:
        subscription = self._find(handler)
        if subscription is None:
            return False
        subscription.active = False
        self._subscriptions.remove(subscription)
        return True

    def emit(self, args: T) -> None:
        """Deliver args to a snapshot of the connected handlers."""

        for subscription in list(self._subscriptions):
            if not subscription.active:
                # Disconnected by an earlier handler during this emit.
                continue
            try:
                subscription.handler(args)
            except Exception:
                LOGGER.exception("Handler for %s failed", self.name)

    def clear(self) -> None:
        for subscription in self._subscriptions:
            subscription.active = False
        self._subscriptions.clear()

    def _find(self, handler: Handler) -> Optional[Subscription[T]]:
        for subscription in self._subscriptions:
            if subscription.handler == handler:
                return subscription
        return None

    def __len__(self) -> int:
        return len(self._subscriptions)
