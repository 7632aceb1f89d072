"""Static configuration for outputconsole.

All user-editable settings (highlight timing, accepted output kinds, logging)
live in a single JSON file for quick edits without touching Python. The file
is optional; every setting has a default.
"""

import json
import os

from dotenv import load_dotenv

from core.config import DEFAULT_DEBOUNCE_MS, DEFAULT_FLASH_MS, FeedConfig, HighlightConfig
from core.models import OUTPUT_KINDS

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

load_dotenv()

# OUTPUTCONSOLE_CONFIG may point at another file (e.g. per-machine overrides).
CONFIG_PATH = os.getenv("OUTPUTCONSOLE_CONFIG") or os.path.join(PROJECT_ROOT, "config.json")


def _load_json_config(path: str) -> dict:
    """Load the config file with a flat, user-friendly schema."""

    if not os.path.exists(path):
        return {}

    with open(path, "r", encoding="utf-8") as handle:
        loaded = json.load(handle)
    if not isinstance(loaded, dict):
        raise ValueError(f"Config root must be an object: {path}")
    return loaded


def build_highlight_config(config: dict) -> HighlightConfig:
    """Build highlight timing from the "highlight" section."""

    section = config.get("highlight", {})
    debounce_ms = int(section.get("debounce_ms", DEFAULT_DEBOUNCE_MS))
    flash_ms = section.get("flash_ms", DEFAULT_FLASH_MS)
    return HighlightConfig.from_millis(debounce_ms, int(flash_ms) if flash_ms is not None else None)


def build_feed_config(config: dict) -> FeedConfig:
    """Build the accepted output kinds from the "feed" section."""

    section = config.get("feed", {})
    return FeedConfig.from_kinds(section.get("accepted_kinds", sorted(OUTPUT_KINDS)))


_CONFIG = _load_json_config(CONFIG_PATH)

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Debounce window and flash duration for the status item highlight.
HIGHLIGHT = build_highlight_config(_CONFIG)

# Producer message kinds routed into logs.
FEED = build_feed_config(_CONFIG)

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
