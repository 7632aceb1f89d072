"""Core domain models.

These dataclasses are shared across the core, adapters and frontend to avoid
tight coupling to any host-specific message types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

DISPLAY_DATA = "display_data"
STREAM = "stream"
ERROR = "error"

# Producer message kinds that end up in a log. Anything else is dropped.
OUTPUT_KINDS = frozenset({DISPLAY_DATA, STREAM, ERROR})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class LogEntry:
    """One output record. The core stores and counts it, never inspects it."""

    source_key: str
    kind: str
    content: Any
    received_at: datetime = field(default_factory=_utcnow)
    render_context: Any = None


@dataclass(frozen=True)
class LogChange:
    """Raised by a Log once per appended entry."""

    source_key: str


@dataclass(frozen=True)
class RegistryChange:
    """Raised by the registry once per newly created Log."""

    source_key: str


class HighlightState(Enum):
    CLEAR = "clear"
    FLASHING = "flashing"
    STEADY = "steady"

    @property
    def css_class(self) -> str:
        """Presentation class used by the status item renderer."""

        return _CSS_CLASSES[self]

    @property
    def highlighted(self) -> bool:
        return self is not HighlightState.CLEAR


_CSS_CLASSES = {
    HighlightState.CLEAR: "",
    HighlightState.FLASHING: "hilite",
    HighlightState.STEADY: "hilited",
}


@dataclass(frozen=True)
class PresentationState:
    """Derived status item state: message count plus attention signal."""

    log_count: int
    highlight: HighlightState
    active_source: Optional[str] = None

    @property
    def css_class(self) -> str:
        return self.highlight.css_class

    @property
    def title(self) -> str:
        return f"{self.log_count} messages in Output Console"
