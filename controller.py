# Timer-driven session control: owns the tick timer and the next-word pause.
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Protocol

try:
    from .game_logic import Direction
    from .session import GameStateMachine, RoundPhase, StepResult, TickEvent
except ImportError:
    from game_logic import Direction
    from session import GameStateMachine, RoundPhase, StepResult, TickEvent


logger = logging.getLogger(__name__)

Sink = Callable[[StepResult], None]


class Scheduler(Protocol):
    """Anything with Tk-style one-shot timers (tk.Tk satisfies this)."""
    def after(self, ms: int, func: Callable[[], None]) -> Any: ...

    def after_cancel(self, id: Any) -> None: ...


class GameController:
    """Session control surface: start/restart/menu/pause/wrap plus the timers.

    Every scheduled callback is tracked by handle so ending a session can
    cancel it before a stale callback touches freshly reset state.
    """
    def __init__(
        self,
        machine: GameStateMachine,
        scheduler: Scheduler,
        sink: Sink | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.machine = machine
        self.scheduler = scheduler
        self.sink = sink
        self.clock = clock  # seconds
        self.tick_id: Any | None = None     # pending tick timer
        self.advance_id: Any | None = None  # pending word-complete -> next word transition
        self.paused = False
        self.advance_due: float | None = None  # clock time the next word is due
        self.advance_left_ms: int | None = None  # next-word time left while paused

    @property
    def running(self) -> bool:
        return self.machine.is_active and not self.paused

    def _emit(self, result: StepResult | None) -> None:
        if result is None:
            return
        if self.sink is not None:
            self.sink(result)

    def _cancel_tick(self) -> None:
        if self.tick_id is not None:
            self.scheduler.after_cancel(self.tick_id)
            self.tick_id = None

    def _cancel_advance(self) -> None:
        if self.advance_id is not None:
            self.scheduler.after_cancel(self.advance_id)
            self.advance_id = None
        self.advance_due = None

    def cancel_all(self) -> None:
        self._cancel_tick()
        self._cancel_advance()

    def _schedule_tick(self) -> None:
        self._cancel_tick()
        self.tick_id = self.scheduler.after(self.machine.speed_ms, self.tick)

    def _schedule_advance(self, delay_ms: int | None = None) -> None:
        if delay_ms is None:
            delay_ms = self.machine.config.word_pause_ms
        self._cancel_advance()
        self.advance_due = self.clock() + delay_ms / 1000.0
        self.advance_id = self.scheduler.after(delay_ms, self._advance_word)

    def start(self) -> StepResult | None:
        """Start a fresh session (also used for restart)."""
        self.cancel_all()
        self.paused = False
        self.advance_left_ms = None
        result = self.machine.start()
        self._emit(result)
        if self.machine.is_active:
            self._schedule_tick()
        return result

    def restart(self) -> StepResult | None:
        return self.start()

    def return_to_menu(self) -> None:
        self.cancel_all()
        self.paused = False
        self.advance_left_ms = None
        self.machine.return_to_menu()

    def set_wrap_mode(self, wrap: bool) -> None:
        self.machine.set_wrap_mode(wrap)

    def push_direction(self, direction: Direction) -> bool:
        if self.paused:
            return False
        return self.machine.push_direction(direction)

    def toggle_pause(self) -> None:
        """Pause/resume without losing current board state."""
        if not self.machine.is_active:
            return
        self.paused = not self.paused
        if self.paused:
            if self.advance_due is not None:
                left = (self.advance_due - self.clock()) * 1000
                self.advance_left_ms = max(0, int(round(left)))
            self.cancel_all()
            return
        if self.machine.phase is RoundPhase.WORD_COMPLETE:
            # Resume the next-word countdown where it stopped.
            self._schedule_advance(self.advance_left_ms)
        self.advance_left_ms = None
        self._schedule_tick()

    def tick(self) -> StepResult | None:
        """Single frame of the game loop; reschedules itself while running."""
        self.tick_id = None
        if not self.running:
            return None

        result = self.machine.tick()
        self._emit(result)
        if result is None or result.event is TickEvent.GAME_OVER:
            self.cancel_all()
            return result

        if result.event is TickEvent.WORD_COMPLETE:
            self._schedule_advance()
        # Rescheduling each tick picks up speed changes at the new interval.
        self._schedule_tick()
        return result

    def _advance_word(self) -> None:
        self.advance_id = None
        self.advance_due = None
        result = self.machine.advance_level()
        self._emit(result)
        if result is not None and result.event is TickEvent.GAME_OVER:
            self.cancel_all()
