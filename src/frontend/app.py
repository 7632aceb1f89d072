"""Main Textual app for the output console."""

from __future__ import annotations

import asyncio
import logging
import random
from pathlib import Path
from typing import Any, Callable, Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import DataTable, Footer, Static

from adapters.jsonl_feed import read_feed
from adapters.kernel_mapper import build_message
from core.config import FeedConfig, HighlightConfig
from core.console import OutputConsole
from core.log_registry import LogRegistry
from core.models import LogChange, PresentationState, RegistryChange
from core.router import MessageRouter

from .constants import ACCENT_ORANGE, DEMO_DOCUMENTS
from .scheduler import TextualScheduler
from .status_item import OutputStatusItem
from .viewer import LogViewerPane

LOGGER = logging.getLogger(__name__)


class OutputConsoleApp(App):
    """Documents on the left, log viewer on the right, status item at the bottom."""

    BINDINGS = [
        ("o", "open_viewer", "Output"),
        ("escape", "close_viewer", "Close output"),
        ("q", "quit", "Quit"),
    ]

    CSS = """
    Screen {
        background: #14181c;
        color: #e6e9ec;
    }

    #header {
        height: 3;
        padding: 1 2;
        border-bottom: solid #2c343b;
    }

    #body {
        height: 1fr;
    }

    #sources-table {
        width: 48;
        height: 1fr;
    }

    #viewer-host {
        width: 1fr;
        height: 1fr;
        border-left: solid #2c343b;
    }

    #viewer-title {
        text-style: bold;
        padding: 0 1;
    }

    #status-bar {
        height: 1;
        background: #1d2329;
    }

    OutputStatusItem {
        width: auto;
        padding: 0 2;
    }

    OutputStatusItem.hilite {
        background: #f37726;
        color: #000000;
        text-style: bold;
    }

    OutputStatusItem.hilited {
        background: #8a4214;
    }
    """

    def __init__(
        self,
        highlight_config: Optional[HighlightConfig] = None,
        feed_config: Optional[FeedConfig] = None,
        feed_path: Optional[Path] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.registry = LogRegistry()
        self.router = MessageRouter(self.registry, feed_config)
        self._highlight_config = highlight_config
        self._feed_path = feed_path
        self.console: Optional[OutputConsole] = None

    def compose(self) -> ComposeResult:
        with Container(id="header"):
            yield Static(self._title_text(), id="title")
        with Horizontal(id="body"):
            yield DataTable(id="sources-table", cursor_type="row")
            yield Vertical(id="viewer-host")
        with Horizontal(id="status-bar"):
            yield OutputStatusItem(id="output-status")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#sources-table", DataTable)
        table.add_column("document", key="source", width=28)
        table.add_column("entries", key="entries", width=8)
        table.add_column("unread", key="unread", width=6)
        table.zebra_stripes = True

        self.console = OutputConsole(
            self.registry,
            TextualScheduler(self),
            self._mount_viewer,
            self._highlight_config,
        )
        self.console.highlighter.state_changed.connect(self._on_presentation_changed)
        self.registry.registry_changed.connect(self._on_registry_changed)

        if self._feed_path is not None:
            self.run_worker(self._replay_feed(self._feed_path), exclusive=True)
        else:
            for document in DEMO_DOCUMENTS:
                self.registry.get_logger(document)
            self.set_interval(0.4, self._demo_tick)

    def on_unmount(self) -> None:
        if self.console is not None:
            self.console.dispose()

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        if self.console is None or event.row_key is None:
            return
        self.console.activate_source(str(event.row_key.value))

    def on_output_status_item_pressed(self, event: OutputStatusItem.Pressed) -> None:
        self.action_open_viewer()

    def action_open_viewer(self) -> None:
        if self.console is None:
            return
        self.console.open_viewer()
        self._refresh_source_row(self.console.status_model.active_source)

    def action_close_viewer(self) -> None:
        for pane in self.query(LogViewerPane):
            pane.close()
        if self.console is not None:
            self._refresh_source_row(self.console.status_model.active_source)

    def _mount_viewer(self, registry: LogRegistry, on_close: Callable[[], None]) -> LogViewerPane:
        pane = LogViewerPane(registry, on_close)
        self.query_one("#viewer-host", Vertical).mount(pane)
        return pane

    def _on_presentation_changed(self, presentation: PresentationState) -> None:
        self.query_one("#output-status", OutputStatusItem).show(presentation)

    def _on_registry_changed(self, change: RegistryChange) -> None:
        table = self.query_one("#sources-table", DataTable)
        table.add_row(change.source_key, "0", "", key=change.source_key)
        self.registry.get_logger(change.source_key).log_changed.connect(self._on_log_changed)

    def _on_log_changed(self, change: LogChange) -> None:
        self._refresh_source_row(change.source_key)

    def _refresh_source_row(self, source_key: Optional[str]) -> None:
        if not source_key or self.console is None or not self.registry.has_logger(source_key):
            return
        table = self.query_one("#sources-table", DataTable)
        length = self.registry.get_logger(source_key).length
        read = self.console.status_model.is_source_read(source_key)
        table.update_cell(source_key, "entries", str(length))
        table.update_cell(source_key, "unread", "" if read else "*")

    async def _replay_feed(self, path: Path) -> None:
        for record in read_feed(path):
            if record.delay:
                await asyncio.sleep(record.delay)
            self.router.handle(record.message)
        LOGGER.info("Feed %s replayed", path)

    def _demo_tick(self) -> None:
        document = random.choice(DEMO_DOCUMENTS)
        roll = random.random()
        if roll < 0.1:
            raw = {
                "header": {"msg_type": "error"},
                "content": {"ename": "ValueError", "evalue": "demo failure", "traceback": []},
            }
            self.router.handle(build_message(raw, document))
            return
        if roll < 0.2:
            # Not output; the router drops it.
            raw = {"header": {"msg_type": "status"}, "content": {"execution_state": "idle"}}
            self.router.handle(build_message(raw, document))
            return
        for index in range(random.randint(1, 4)):
            raw = {
                "header": {"msg_type": "stream"},
                "content": {"name": "stdout", "text": f"step {index}: loss={random.random():.4f}\n"},
            }
            self.router.handle(build_message(raw, document))

    @staticmethod
    def _title_text() -> Text:
        return Text.assemble(
            ("OUTPUT", ACCENT_ORANGE),
            (" CONSOLE", "bold"),
        )
