"""Debounced attention signal for the output status item.

Transition rules, evaluated on every model state change in this order:
1) Highlighting suspended (viewer focused): CLEAR.
2) Active source switched, or highlighting just resumed: CLEAR if the
   source is read or missing, otherwise STEADY. No debounce.
3) New entry on the active source: when already highlighted (or a flash is
   queued) drop to CLEAR and re-arm the flash timer; otherwise flash now.

Re-arming on every entry means a burst of output produces a single flash
once the stream goes quiet for the debounce window.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Callable, Optional

from core.config import HighlightConfig
from core.models import HighlightState, PresentationState
from core.ports import SchedulerPort, TimerHandle
from core.signals import Signal
from core.status_model import OutputStatusModel

LOGGER = logging.getLogger(__name__)


class HighlightStateMachine:
    """Owns the highlight state and its single pending timer."""

    def __init__(
        self,
        model: OutputStatusModel,
        scheduler: SchedulerPort,
        config: Optional[HighlightConfig] = None,
    ) -> None:
        self._model = model
        self._scheduler = scheduler
        self._config = config or HighlightConfig()
        self._state = HighlightState.CLEAR
        self._timer: Optional[TimerHandle] = None
        self._flash_pending = False
        # Set while highlighting is suspended; resuming re-evaluates like a switch.
        self._suspended = not model.highlighting_enabled
        self.state_changed: Signal[PresentationState] = Signal("highlight.state_changed")
        # Number of times each state was entered; handy for diagnostics.
        self.transitions: Counter = Counter()
        self._subscription = model.state_changed.connect(self._on_model_changed)

    @property
    def state(self) -> HighlightState:
        return self._state

    @property
    def pending(self) -> bool:
        return self._timer is not None

    @property
    def presentation(self) -> PresentationState:
        return self._model.presentation(self._state)

    def dispose(self) -> None:
        self._cancel_timer()
        self._subscription.unsubscribe()
        self.state_changed.clear()

    def _on_model_changed(self, _: None) -> None:
        model = self._model

        if not model.highlighting_enabled:
            self._suspended = True
            self._cancel_timer()
            self._set_state(HighlightState.CLEAR)
        elif model.active_source_changed or self._suspended:
            self._suspended = False
            self._cancel_timer()
            source = model.active_source
            if not source or model.is_source_read(source):
                self._set_state(HighlightState.CLEAR)
            else:
                self._set_state(HighlightState.STEADY)
            model.active_source_changed = False
        elif self._state.highlighted or self._flash_pending:
            self._set_state(HighlightState.CLEAR)
            self._schedule(self._config.debounce_seconds, self._on_flash_due, flash=True)
        else:
            self._flash()

        self.state_changed.emit(self.presentation)

    def _on_flash_due(self) -> None:
        self._timer = None
        self._flash_pending = False
        if not self._model.highlighting_enabled:
            return
        self._flash()
        self.state_changed.emit(self.presentation)

    def _flash(self) -> None:
        self._set_state(HighlightState.FLASHING)
        flash_seconds = self._config.flash_seconds
        if flash_seconds:
            self._schedule(flash_seconds, self._on_flash_done)

    def _on_flash_done(self) -> None:
        self._timer = None
        source = self._model.active_source
        if source and not self._model.is_source_read(source):
            self._set_state(HighlightState.STEADY)
        else:
            self._set_state(HighlightState.CLEAR)
        self.state_changed.emit(self.presentation)

    def _schedule(self, delay: float, callback: Callable[[], None], flash: bool = False) -> None:
        self._cancel_timer()
        self._timer = self._scheduler.call_later(delay, callback)
        self._flash_pending = flash

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._flash_pending = False

    def _set_state(self, state: HighlightState) -> None:
        if state is self._state:
            return
        LOGGER.debug("Highlight %s -> %s", self._state.value, state.value)
        self._state = state
        self.transitions[state] += 1
