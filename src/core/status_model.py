"""Read tracking for the output status item.

The model watches every log in the registry, remembers which sources have
entries the user has not looked at yet, and raises state_changed whenever
the status item may need to change: the active source switched, the active
source logged something, or highlighting was suspended or resumed.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from core.log_registry import Log, LogRegistry
from core.models import HighlightState, LogChange, PresentationState, RegistryChange
from core.signals import Signal, Subscription

LOGGER = logging.getLogger(__name__)


class OutputStatusModel:
    """Watched-set, active source pointer and unread count."""

    def __init__(self, registry: LogRegistry) -> None:
        self._registry = registry
        self.state_changed: Signal[None] = Signal("status_model.state_changed")
        # Set by active_source; the highlighter consumes and resets it.
        self.active_source_changed = False
        self._highlighting_enabled = True
        self._active_source: Optional[str] = None
        # source_key -> True when read, False when it has unseen entries.
        self._watched: Dict[str, bool] = {}
        self._log_subscriptions: Dict[str, Subscription[LogChange]] = {}

        self._watch_new_loggers()
        self._registry_subscription = registry.registry_changed.connect(self._on_registry_changed)

    @property
    def active_source(self) -> Optional[str]:
        return self._active_source

    @active_source.setter
    def active_source(self, source_key: Optional[str]) -> None:
        # No equality short-circuit: every assignment refreshes the status item.
        self._active_source = source_key
        self.active_source_changed = True
        LOGGER.debug("Active source is now %s", source_key)
        self.state_changed.emit(None)

    @property
    def highlighting_enabled(self) -> bool:
        return self._highlighting_enabled

    @highlighting_enabled.setter
    def highlighting_enabled(self, enabled: bool) -> None:
        enabled = bool(enabled)
        if enabled == self._highlighting_enabled:
            return
        self._highlighting_enabled = enabled
        LOGGER.debug("Highlighting %s", "enabled" if enabled else "suspended")
        self.state_changed.emit(None)

    @property
    def log_count(self) -> int:
        """Entries in the active source's log, or 0 without an active source."""

        if not self._active_source or not self._registry.has_logger(self._active_source):
            return 0
        return self._registry.get_logger(self._active_source).length

    def mark_source_read(self, source_key: Optional[str]) -> None:
        if source_key is None:
            return
        self._watched[source_key] = True

    def is_source_read(self, source_key: str) -> bool:
        return self._watched.get(source_key, True)

    def unread_sources(self) -> List[str]:
        return [key for key, read in self._watched.items() if not read]

    def presentation(self, highlight: HighlightState) -> PresentationState:
        return PresentationState(
            log_count=self.log_count,
            highlight=highlight,
            active_source=self._active_source,
        )

    def dispose(self) -> None:
        self._registry_subscription.unsubscribe()
        for subscription in self._log_subscriptions.values():
            subscription.unsubscribe()
        self._log_subscriptions.clear()
        self.state_changed.clear()

    def _on_registry_changed(self, change: RegistryChange) -> None:
        self._watch_new_loggers()

    def _watch_new_loggers(self) -> None:
        for logger in self._registry.get_loggers():
            if logger.source_key in self._log_subscriptions:
                continue
            self._watch(logger)

    def _watch(self, logger: Log) -> None:
        self._log_subscriptions[logger.source_key] = logger.log_changed.connect(self._on_log_changed)
        # New sources start out read; logs that already hold entries do not.
        self._watched[logger.source_key] = logger.length == 0

    def _on_log_changed(self, change: LogChange) -> None:
        self._watched[change.source_key] = False
        if change.source_key == self._active_source:
            self.state_changed.emit(None)
