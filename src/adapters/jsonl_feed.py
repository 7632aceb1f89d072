"""JSONL producer feed reader.

Each line holds one record: {"source": "<document path>", "msg": {...}}
where msg is a kernel IOPub message. An optional "delay" (seconds) lets a
recorded session be replayed with its original pacing.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Union

from adapters.kernel_mapper import build_message
from core.router import ProducerMessage

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedRecord:
    """One replayable feed line."""

    delay: float
    message: ProducerMessage


def read_feed(path: Union[str, Path]) -> Iterator[FeedRecord]:
    """Yield feed records from a JSONL file, skipping malformed lines."""

    path = Path(path)
    with path.open("r", encoding="utf-8") as handle:
        for line_no, line in enumerate(handle, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                obj = json.loads(line)
                source_key = obj["source"]
                message = build_message(obj["msg"], source_key)
                delay = float(obj.get("delay", 0.0))
            except (json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
                LOGGER.warning("Skipping %s:%s (%s)", path.name, line_no, exc)
                continue
            yield FeedRecord(delay=max(delay, 0.0), message=message)
