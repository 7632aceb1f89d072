"""Application entry point for the output console."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from art import tprint

import settings
from adapters.asyncio_scheduler import AsyncioScheduler
from adapters.jsonl_feed import read_feed
from core.config import FeedConfig, HighlightConfig
from core.console import OutputConsole
from core.log_registry import LogRegistry
from core.router import MessageRouter

NAME = "OUTPUT"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    # Console logging fights with the TUI for the terminal, so it is opt-in.
    if config.get("console", False):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/outputconsole.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


async def replay_feed(
    path: Path,
    active_source: Optional[str],
    highlight_config: HighlightConfig,
    feed_config: FeedConfig,
) -> OutputConsole:
    """Push a recorded feed through the core on the running asyncio loop."""

    logger = logging.getLogger(__name__)
    registry = LogRegistry()
    router = MessageRouter(registry, feed_config)
    console = OutputConsole(registry, AsyncioScheduler(), highlight_config=highlight_config)
    if active_source:
        console.activate_source(active_source)

    stored = 0
    ignored = 0
    for record in read_feed(path):
        if record.delay:
            await asyncio.sleep(record.delay)
        if router.handle(record.message) is None:
            ignored += 1
        else:
            stored += 1

    # Let a queued flash land before reporting.
    if console.highlighter.pending:
        await asyncio.sleep(highlight_config.debounce_seconds)

    logger.info("Replay complete: stored=%s, ignored=%s, sources=%s", stored, ignored, len(registry))
    return console


def _print_summary(console: OutputConsole) -> None:
    model = console.status_model
    loggers = console.registry.get_loggers()
    if not loggers:
        print("No output in feed.")
        return

    for index, logger in enumerate(loggers, start=1):
        state = "read" if model.is_source_read(logger.source_key) else "unread"
        marker = " (active)" if logger.source_key == model.active_source else ""
        print(f"{index}. {logger.source_key}{marker} | {logger.length} entries | {state}")

    presentation = console.presentation
    print(f"status: {presentation.log_count} messages | highlight={presentation.highlight.value}")


def _replay(path: str, active_source: Optional[str]) -> None:
    _print_banner()
    feed_path = Path(path)
    if not feed_path.exists():
        raise RuntimeError(f"Feed file not found: {feed_path}")

    console = asyncio.run(replay_feed(feed_path, active_source, settings.HIGHLIGHT, settings.FEED))
    _print_summary(console)
    console.dispose()


def _run(feed: Optional[str]) -> None:
    from frontend.app import OutputConsoleApp

    logging.getLogger(__name__).info("Starting output console")
    feed_path = Path(feed) if feed else None
    OutputConsoleApp(
        highlight_config=settings.HIGHLIGHT,
        feed_config=settings.FEED,
        feed_path=feed_path,
    ).run()


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="outputconsole")
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Start the console TUI")
    run_parser.add_argument("--feed", help="JSONL feed to replay instead of the demo producer")

    replay_parser = subparsers.add_parser("replay", help="Replay a JSONL feed headless and print a summary")
    replay_parser.add_argument("feed", help="JSONL feed file")
    replay_parser.add_argument("--active", help="Source to treat as the active document")

    args = parser.parse_args(argv)
    _configure_logging()
    if args.command == "replay":
        _replay(args.feed, args.active)
        return
    _run(getattr(args, "feed", None))


if __name__ == "__main__":
    main()
