from __future__ import annotations

import asyncio

from textual.app import App, ComposeResult
from textual.widgets import Button, RichLog

from core.log_registry import LogRegistry
from frontend.scheduler import TextualScheduler
from frontend.viewer import LogViewerPane


class ViewerHostApp(App):
    def __init__(self) -> None:
        super().__init__()
        self.registry = LogRegistry()

    def compose(self) -> ComposeResult:
        yield Button("elsewhere", id="elsewhere")
        yield LogViewerPane(self.registry, lambda: None)


def test_viewer_focus_moves_to_log_widget() -> None:
    async def scenario() -> None:
        app = ViewerHostApp()
        async with app.run_test() as pilot:
            app.query_one("#elsewhere", Button).focus()
            await pilot.pause()
            assert isinstance(app.focused, Button)

            pane = app.query_one(LogViewerPane)
            assert pane.focus() is pane
            await pilot.pause()
            assert app.focused is pane.query_one("#viewer-log", RichLog)

    asyncio.run(scenario())


def test_textual_scheduler_cancelled_callback_never_fires() -> None:
    async def scenario() -> list[str]:
        fired: list[str] = []
        app = App()
        async with app.run_test() as pilot:
            scheduler = TextualScheduler(app)
            handle = scheduler.call_later(0.05, lambda: fired.append("cancelled"))
            handle.cancel()
            scheduler.call_later(0.01, lambda: fired.append("kept"))
            await pilot.pause(0.2)
        return fired

    assert asyncio.run(scenario()) == ["kept"]
