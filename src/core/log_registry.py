"""Per-source output logs and the registry that owns them."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Tuple

from core.models import LogChange, LogEntry, RegistryChange
from core.signals import Signal

LOGGER = logging.getLogger(__name__)


class Log:
    """Append-only, ordered output log for exactly one source."""

    def __init__(self, source_key: str) -> None:
        self.source_key = source_key
        # Last rendering context supplied by the producer, kept for viewers.
        self.render_context: Any = None
        self.log_changed: Signal[LogChange] = Signal(f"log_changed[{source_key}]")
        self._entries: List[LogEntry] = []

    def log(self, entry: LogEntry) -> None:
        """Append one entry and notify synchronously."""

        self._entries.append(entry)
        self.log_changed.emit(LogChange(self.source_key))

    @property
    def length(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> Tuple[LogEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Log({self.source_key!r}, length={len(self._entries)})"


class LogRegistry:
    """Owns one Log per source key and announces newly created logs.

    The registry is constructed by the host application and passed to every
    component that needs it; logs live as long as the registry does.
    """

    def __init__(self) -> None:
        self.registry_changed: Signal[RegistryChange] = Signal("registry_changed")
        self._loggers: Dict[str, Log] = {}

    def get_logger(self, source_key: str) -> Log:
        """Return the log for source_key, creating it on first reference."""

        logger = self._loggers.get(source_key)
        if logger is not None:
            return logger

        logger = Log(source_key)
        self._loggers[source_key] = logger
        LOGGER.info("Created output log for %s", source_key)
        self.registry_changed.emit(RegistryChange(source_key))
        return logger

    def get_loggers(self) -> List[Log]:
        """All logs in creation order."""

        return list(self._loggers.values())

    def has_logger(self, source_key: str) -> bool:
        return source_key in self._loggers

    def sources(self) -> List[str]:
        return list(self._loggers)

    def __len__(self) -> int:
        return len(self._loggers)
