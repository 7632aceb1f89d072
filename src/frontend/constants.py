"""Shared constants for the Textual UI."""

from __future__ import annotations

ACCENT_ORANGE = "#F37726"
DEMO_DOCUMENTS = ("analysis.ipynb", "training.ipynb", "scratch.ipynb")
STATUS_ICON = "≡"
