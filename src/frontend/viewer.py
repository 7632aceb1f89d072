"""Log viewer pane for the active source."""

from __future__ import annotations

from typing import Any, Callable, Optional

from rich.text import Text
from textual.containers import Vertical
from textual.widgets import RichLog, Static

from adapters.kernel_mapper import summarize_content
from core.log_registry import LogRegistry
from core.models import ERROR, LogChange, LogEntry
from core.signals import Subscription


class LogViewerPane(Vertical):
    """Shows the entries of one source and follows new output live."""

    def __init__(
        self,
        registry: LogRegistry,
        on_close: Callable[[], None],
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._registry = registry
        self._on_close = on_close
        self._active_source: Optional[str] = None
        self._subscription: Optional[Subscription[LogChange]] = None
        self._rendered = 0

    def compose(self):
        yield Static("Output Console", id="viewer-title")
        yield RichLog(id="viewer-log", wrap=True, markup=False, highlight=False)

    def on_mount(self) -> None:
        self._rerender()
        self.query_one("#viewer-log", RichLog).focus()

    def focus(self, scroll_visible: bool = True) -> "LogViewerPane":
        # The container itself can't take focus; hand it to the log.
        for log_widget in self.query("#viewer-log").results(RichLog):
            log_widget.focus(scroll_visible)
        return self

    @property
    def active_source(self) -> Optional[str]:
        return self._active_source

    @active_source.setter
    def active_source(self, source_key: Optional[str]) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        self._active_source = source_key
        if source_key:
            logger = self._registry.get_logger(source_key)
            self._subscription = logger.log_changed.connect(self._on_log_changed)
        if self.is_mounted:
            self._rerender()

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        self.remove()
        self._on_close()

    def _rerender(self) -> None:
        title = self.query_one("#viewer-title", Static)
        log_widget = self.query_one("#viewer-log", RichLog)
        log_widget.clear()
        self._rendered = 0
        if not self._active_source:
            title.update("Output Console - no active document")
            return
        title.update(f"Output Console - {self._active_source}")
        self._write_new_entries()

    def _on_log_changed(self, change: LogChange) -> None:
        if self.is_mounted:
            self._write_new_entries()

    def _write_new_entries(self) -> None:
        log_widget = self.query_one("#viewer-log", RichLog)
        entries = self._registry.get_logger(self._active_source).entries
        for entry in entries[self._rendered:]:
            log_widget.write(_render_entry(entry))
        self._rendered = len(entries)


def _render_entry(entry: LogEntry) -> Text:
    content = entry.content if isinstance(entry.content, dict) else {}
    summary = summarize_content(entry.kind, content) or repr(entry.content)
    stamp = entry.received_at.astimezone().strftime("%H:%M:%S")
    style = "bold red" if entry.kind == ERROR else ""
    return Text.assemble((f"[{stamp}] ", "dim"), (f"{entry.kind:<12} ", "cyan"), (summary, style))
