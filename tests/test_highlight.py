from __future__ import annotations

from typing import Callable, Optional

from core.config import HighlightConfig
from core.highlight import HighlightStateMachine
from core.log_registry import LogRegistry
from core.models import STREAM, HighlightState, LogEntry, PresentationState
from core.status_model import OutputStatusModel


class FakeTimer:
    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Deterministic clock: timers fire only when advance() passes them."""

    def __init__(self) -> None:
        self.now = 0.0
        self.timers: list[FakeTimer] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(self.now + delay, callback)
        self.timers.append(timer)
        return timer

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [t for t in self.timers if not t.cancelled and t.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.due)
            self.timers.remove(timer)
            self.now = timer.due
            timer.callback()
        self.now = target

    @property
    def outstanding(self) -> int:
        return sum(1 for t in self.timers if not t.cancelled)


def _setup(
    flash_seconds: Optional[float] = None,
) -> tuple[LogRegistry, OutputStatusModel, HighlightStateMachine, ManualScheduler]:
    registry = LogRegistry()
    model = OutputStatusModel(registry)
    scheduler = ManualScheduler()
    machine = HighlightStateMachine(
        model,
        scheduler,
        HighlightConfig(debounce_seconds=0.1, flash_seconds=flash_seconds),
    )
    return registry, model, machine, scheduler


def _log(registry: LogRegistry, source_key: str) -> None:
    registry.get_logger(source_key).log(LogEntry(source_key=source_key, kind=STREAM, content={"text": "x\n"}))


def test_initial_state_is_clear() -> None:
    _, _, machine, _ = _setup()

    assert machine.state is HighlightState.CLEAR
    assert not machine.pending


def test_switch_to_read_source_is_clear() -> None:
    registry, model, machine, _ = _setup()
    registry.get_logger("a.ipynb")

    model.active_source = "a.ipynb"

    assert machine.state is HighlightState.CLEAR
    assert not model.active_source_changed


def test_switch_to_unread_source_is_steady_immediately() -> None:
    registry, model, machine, scheduler = _setup()
    _log(registry, "a.ipynb")

    model.active_source = "a.ipynb"

    assert machine.state is HighlightState.STEADY
    assert scheduler.outstanding == 0


def test_switch_to_no_source_is_clear() -> None:
    registry, model, machine, _ = _setup()
    _log(registry, "a.ipynb")
    model.active_source = "a.ipynb"

    model.active_source = None

    assert machine.state is HighlightState.CLEAR


def test_first_message_flashes_immediately() -> None:
    registry, model, machine, scheduler = _setup()
    model.active_source = "a.ipynb"

    _log(registry, "a.ipynb")

    assert machine.state is HighlightState.FLASHING
    assert scheduler.outstanding == 0


def test_inactive_source_never_changes_highlight() -> None:
    registry, model, machine, _ = _setup()
    model.active_source = "a.ipynb"

    _log(registry, "b.ipynb")
    _log(registry, "b.ipynb")

    assert machine.state is HighlightState.CLEAR
    assert machine.transitions[HighlightState.FLASHING] == 0


def test_burst_on_highlighted_source_flashes_once_after_last_entry() -> None:
    registry, model, machine, scheduler = _setup()
    _log(registry, "a.ipynb")
    model.active_source = "a.ipynb"
    assert machine.state is HighlightState.STEADY

    for _ in range(3):
        _log(registry, "a.ipynb")
        assert machine.state is HighlightState.CLEAR
        scheduler.advance(0.01)

    assert machine.transitions[HighlightState.FLASHING] == 0
    assert scheduler.outstanding == 1

    # Last entry arrived at t=0.02; its window ends at t=0.12.
    scheduler.advance(0.08)
    assert machine.state is HighlightState.CLEAR
    scheduler.advance(0.02)

    assert machine.state is HighlightState.FLASHING
    assert machine.transitions[HighlightState.FLASHING] == 1
    assert scheduler.outstanding == 0


def test_burst_from_clear_flashes_then_debounces() -> None:
    registry, model, machine, scheduler = _setup()
    model.active_source = "a.ipynb"

    for _ in range(3):
        _log(registry, "a.ipynb")
        scheduler.advance(0.01)

    assert machine.transitions[HighlightState.FLASHING] == 1
    assert machine.pending

    scheduler.advance(1.0)

    assert machine.state is HighlightState.FLASHING
    assert machine.transitions[HighlightState.FLASHING] == 2


def test_at_most_one_timer_outstanding() -> None:
    registry, model, machine, scheduler = _setup()
    _log(registry, "a.ipynb")
    model.active_source = "a.ipynb"

    for _ in range(10):
        _log(registry, "a.ipynb")
        assert scheduler.outstanding <= 1


def test_disabling_forces_clear_and_drops_pending_flash() -> None:
    registry, model, machine, scheduler = _setup()
    _log(registry, "a.ipynb")
    model.active_source = "a.ipynb"
    _log(registry, "a.ipynb")
    assert machine.pending

    model.highlighting_enabled = False
    scheduler.advance(1.0)

    assert machine.state is HighlightState.CLEAR
    assert machine.transitions[HighlightState.FLASHING] == 0


def test_disabled_machine_ignores_output_and_switches() -> None:
    registry, model, machine, scheduler = _setup()
    model.highlighting_enabled = False
    _log(registry, "b.ipynb")

    model.active_source = "a.ipynb"
    _log(registry, "a.ipynb")
    model.active_source = "b.ipynb"
    scheduler.advance(1.0)

    assert machine.state is HighlightState.CLEAR
    assert not machine.pending


def test_stale_timer_cannot_flash_while_disabled() -> None:
    registry, model, machine, scheduler = _setup()
    _log(registry, "a.ipynb")
    model.active_source = "a.ipynb"
    _log(registry, "a.ipynb")
    stale = [t for t in scheduler.timers if not t.cancelled][0]

    model.highlighting_enabled = False
    # Fire the callback even though it was cancelled.
    stale.callback()

    assert machine.state is HighlightState.CLEAR


def test_switch_cancels_pending_flash() -> None:
    registry, model, machine, scheduler = _setup()
    _log(registry, "a.ipynb")
    model.active_source = "a.ipynb"
    _log(registry, "a.ipynb")
    assert machine.pending

    registry.get_logger("b.ipynb")
    model.active_source = "b.ipynb"
    scheduler.advance(1.0)

    assert machine.state is HighlightState.CLEAR
    assert machine.transitions[HighlightState.FLASHING] == 0


def test_flash_reverts_to_steady_when_source_unread() -> None:
    registry, model, machine, scheduler = _setup(flash_seconds=1.0)
    model.active_source = "a.ipynb"
    _log(registry, "a.ipynb")
    assert machine.state is HighlightState.FLASHING

    scheduler.advance(1.0)

    assert machine.state is HighlightState.STEADY


def test_flash_reverts_to_clear_when_source_read() -> None:
    registry, model, machine, scheduler = _setup(flash_seconds=1.0)
    model.active_source = "a.ipynb"
    _log(registry, "a.ipynb")
    model.mark_source_read("a.ipynb")

    scheduler.advance(1.0)

    assert machine.state is HighlightState.CLEAR


def test_flash_without_duration_stays_until_next_event() -> None:
    registry, model, machine, scheduler = _setup(flash_seconds=None)
    model.active_source = "a.ipynb"
    _log(registry, "a.ipynb")

    scheduler.advance(10.0)

    assert machine.state is HighlightState.FLASHING


def test_presentation_is_emitted_on_every_evaluation() -> None:
    registry, model, machine, scheduler = _setup()
    seen: list[PresentationState] = []
    machine.state_changed.connect(seen.append)

    model.active_source = "a.ipynb"
    _log(registry, "a.ipynb")
    _log(registry, "a.ipynb")
    scheduler.advance(0.1)

    assert [p.highlight for p in seen] == [
        HighlightState.CLEAR,
        HighlightState.FLASHING,
        HighlightState.CLEAR,
        HighlightState.FLASHING,
    ]
    assert [p.log_count for p in seen] == [0, 1, 2, 2]
    assert seen[-1].css_class == "hilite"


def test_dispose_cancels_timer_and_detaches() -> None:
    registry, model, machine, scheduler = _setup()
    _log(registry, "a.ipynb")
    model.active_source = "a.ipynb"
    _log(registry, "a.ipynb")

    machine.dispose()
    _log(registry, "a.ipynb")
    scheduler.advance(1.0)

    assert scheduler.outstanding == 0
    assert machine.state is HighlightState.CLEAR


def test_resuming_reevaluates_without_flashing() -> None:
    registry, model, machine, _ = _setup()
    model.active_source = "a.ipynb"
    model.highlighting_enabled = False
    _log(registry, "a.ipynb")

    model.highlighting_enabled = True

    assert machine.state is HighlightState.STEADY
    assert machine.transitions[HighlightState.FLASHING] == 0


def test_resuming_on_read_source_is_clear() -> None:
    registry, model, machine, _ = _setup()
    model.active_source = "a.ipynb"
    model.highlighting_enabled = False
    _log(registry, "a.ipynb")
    model.mark_source_read("a.ipynb")

    model.highlighting_enabled = True
    assert machine.state is HighlightState.CLEAR

    _log(registry, "a.ipynb")
    assert machine.state is HighlightState.FLASHING


def test_switch_to_source_populated_before_model_is_steady() -> None:
    registry = LogRegistry()
    _log(registry, "early.ipynb")
    model = OutputStatusModel(registry)
    machine = HighlightStateMachine(model, ManualScheduler(), HighlightConfig(flash_seconds=None))

    model.active_source = "early.ipynb"

    assert not model.is_source_read("early.ipynb")
    assert machine.state is HighlightState.STEADY
