"""Status bar item showing the active source's message count."""

from __future__ import annotations

from typing import Any

from rich.text import Text
from textual import events
from textual.message import Message
from textual.widgets import Static

from core.models import HighlightState, PresentationState

from .constants import STATUS_ICON

_HIGHLIGHT_CLASSES = tuple(state.css_class for state in HighlightState if state.css_class)


class OutputStatusItem(Static):
    """Renders a PresentationState: count text plus hilite/hilited classes."""

    class Pressed(Message):
        """Posted when the item is clicked."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__("", **kwargs)
        self.presentation = PresentationState(log_count=0, highlight=HighlightState.CLEAR)

    def on_mount(self) -> None:
        self.show(self.presentation)

    def show(self, presentation: PresentationState) -> None:
        self.presentation = presentation
        self.update(Text.assemble((f"{STATUS_ICON} ", "bold"), str(presentation.log_count)))
        self.tooltip = presentation.title
        self.remove_class(*_HIGHLIGHT_CLASSES)
        if presentation.css_class:
            self.add_class(presentation.css_class)

    def on_click(self, event: events.Click) -> None:
        event.stop()
        self.post_message(self.Pressed())
