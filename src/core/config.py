"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so the app layer can build them safely.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from core.models import OUTPUT_KINDS

DEFAULT_DEBOUNCE_MS = 100
DEFAULT_FLASH_MS = 1000


@dataclass(frozen=True)
class HighlightConfig:
    """Timing for the status item attention signal, in seconds."""

    debounce_seconds: float = DEFAULT_DEBOUNCE_MS / 1000
    # None keeps FLASHING until the next event instead of reverting.
    flash_seconds: Optional[float] = DEFAULT_FLASH_MS / 1000

    def __post_init__(self) -> None:
        if self.debounce_seconds < 0:
            raise ValueError(f"debounce must be >= 0, got {self.debounce_seconds}")
        if self.flash_seconds is not None and self.flash_seconds < 0:
            raise ValueError(f"flash duration must be >= 0, got {self.flash_seconds}")

    @classmethod
    def from_millis(cls, debounce_ms: int, flash_ms: Optional[int]) -> "HighlightConfig":
        flash_seconds = flash_ms / 1000 if flash_ms else None
        return cls(debounce_seconds=debounce_ms / 1000, flash_seconds=flash_seconds)


@dataclass(frozen=True)
class FeedConfig:
    """Which producer message kinds are routed into logs."""

    accepted_kinds: frozenset = field(default=OUTPUT_KINDS)

    def __post_init__(self) -> None:
        unknown = set(self.accepted_kinds) - OUTPUT_KINDS
        if unknown:
            raise ValueError(f"Unsupported output kinds: {', '.join(sorted(unknown))}")

    @classmethod
    def from_kinds(cls, kinds: Iterable[str]) -> "FeedConfig":
        return cls(accepted_kinds=frozenset(kinds))
