"""Core producer message routing.

This module is integration-agnostic. Host adapters turn their raw messages
into ProducerMessage objects; the router decides whether a message is output
and appends it to the log of the source that declared it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from core.config import FeedConfig
from core.log_registry import LogRegistry
from core.models import LogEntry

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProducerMessage:
    """Minimal producer message used by the core routing step."""

    source_key: str
    msg_type: str
    content: Any
    render_context: Any = None


class MessageRouter:
    """Filters producer messages by kind and appends output to source logs."""

    def __init__(self, registry: LogRegistry, config: Optional[FeedConfig] = None) -> None:
        self._registry = registry
        self._config = config or FeedConfig()

    def handle(self, message: ProducerMessage) -> Optional[LogEntry]:
        """Route one message. Returns the stored entry, or None if ignored."""

        # Status, execute_input and friends are not output; drop them quietly.
        if message.msg_type not in self._config.accepted_kinds:
            LOGGER.debug("Ignoring %s message from %s", message.msg_type, message.source_key)
            return None

        logger = self._registry.get_logger(message.source_key)
        if message.render_context is not None:
            logger.render_context = message.render_context

        entry = LogEntry(
            source_key=message.source_key,
            kind=message.msg_type,
            content=message.content,
            render_context=message.render_context,
        )
        logger.log(entry)
        return entry

    def handle_all(self, messages: Iterable[ProducerMessage]) -> int:
        """Route several messages in order and return how many were stored."""

        stored = 0
        for message in messages:
            if self.handle(message) is not None:
                stored += 1
        return stored
