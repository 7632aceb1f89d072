"""Output console controller.

Wires the status model, highlighter and log viewer together the way the host
application expects: documents becoming active move the active source, and
opening the viewer marks that source read and suspends highlighting until
the viewer closes again.
"""

from __future__ import annotations

import logging
from typing import Optional

from core.config import HighlightConfig
from core.highlight import HighlightStateMachine
from core.log_registry import LogRegistry
from core.models import PresentationState
from core.ports import SchedulerPort, ViewerFactory, ViewerPort
from core.status_model import OutputStatusModel

LOGGER = logging.getLogger(__name__)


class OutputConsole:
    """Host-facing entry point for the output console status item."""

    def __init__(
        self,
        registry: LogRegistry,
        scheduler: SchedulerPort,
        viewer_factory: Optional[ViewerFactory] = None,
        highlight_config: Optional[HighlightConfig] = None,
    ) -> None:
        self.registry = registry
        self.status_model = OutputStatusModel(registry)
        self.highlighter = HighlightStateMachine(self.status_model, scheduler, highlight_config)
        self._viewer_factory = viewer_factory
        self._viewer: Optional[ViewerPort] = None

    @property
    def viewer(self) -> Optional[ViewerPort]:
        return self._viewer

    @property
    def viewer_open(self) -> bool:
        return self._viewer is not None

    @property
    def presentation(self) -> PresentationState:
        return self.highlighter.presentation

    def activate_source(self, source_key: Optional[str]) -> None:
        """Called when the host's current document changes."""

        if self._viewer is not None:
            self._viewer.active_source = source_key
        self.status_model.active_source = source_key

    def open_viewer(self) -> ViewerPort:
        """Open the log viewer, or focus it when it is already open."""

        if self._viewer is None:
            self._viewer = self._create_viewer()
        else:
            self._viewer.focus()

        model = self.status_model
        model.mark_source_read(model.active_source)
        if model.highlighting_enabled:
            model.highlighting_enabled = False
        else:
            # Already suspended; still refresh the status item.
            model.state_changed.emit(None)
        return self._viewer

    def close_viewer(self) -> None:
        if self._viewer is None:
            return
        LOGGER.info("Output viewer closed")
        self._viewer = None
        # The viewer was showing the active source up to now.
        self.status_model.mark_source_read(self.status_model.active_source)
        self.status_model.highlighting_enabled = True

    def dispose(self) -> None:
        self.highlighter.dispose()
        self.status_model.dispose()

    def _create_viewer(self) -> ViewerPort:
        if self._viewer_factory is None:
            raise RuntimeError("No log viewer is available in this host")
        viewer = self._viewer_factory(self.registry, self.close_viewer)
        active_source = self.status_model.active_source
        if active_source:
            viewer.active_source = active_source
        LOGGER.info("Output viewer opened for %s", active_source)
        return viewer
