"""Timer state machine and tick loop for TimerWidget.

Transitions
-----------
start(id)    timer exists             → RUNNING, any other active timer → IDLE
pause(id)    RUNNING | OVERRUN        → PAUSED
resume(id)   PAUSED                   → RUNNING
stop(id)     any                      → IDLE, current restored to original
reset(id)    any                      → same as stop
tick         RUNNING | OVERRUN        → current - 1; OVERRUN once below zero

The engine keeps no copy of any timer.  Every command and every tick is a
single :meth:`TimerStore.mutate`, so a command that lands between two ticks
is never overwritten by a stale value.

Only one :class:`Ticker` exists per engine, so at most one timer is ever
being advanced.  Commands that take a timer out of RUNNING cancel it
directly; the tick body also re-reads the timer and stops on its own when
the timer was paused, stopped or evicted behind the engine's back.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..errors import StoreError
from .models import Timer, TimerState, active_timer, find_timer, replace_timer

if TYPE_CHECKING:
    from ..database.store import TimerStore

logger = logging.getLogger(__name__)


# ── constants ─────────────────────────────────────────────────────────────

TICK_INTERVAL_MS = 1000


# ── ticker ────────────────────────────────────────────────────────────────


class Ticker(QObject):
    """Cancellable one-second schedule bound to a single timer id.

    ``start`` replaces whatever was scheduled before; ``cancel`` drops the
    pending wait immediately.
    """

    fired = pyqtSignal(str)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        interval_ms: int = TICK_INTERVAL_MS,
    ) -> None:
        super().__init__(parent)
        self._timer_id: str | None = None
        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(interval_ms)
        self._qt_timer.timeout.connect(self._on_timeout)

    @property
    def timer_id(self) -> str | None:
        return self._timer_id

    @property
    def is_active(self) -> bool:
        return self._timer_id is not None and self._qt_timer.isActive()

    def start(self, timer_id: str) -> None:
        self._qt_timer.stop()
        self._timer_id = timer_id
        self._qt_timer.start()

    def cancel(self) -> None:
        self._qt_timer.stop()
        self._timer_id = None

    def _on_timeout(self) -> None:
        if self._timer_id is not None:
            self.fired.emit(self._timer_id)


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine(QObject):
    """Drives timer lifecycle on top of a :class:`TimerStore`.

    Signals
    -------
    tick(timer_id: str, current_seconds: int)
        Emitted after every persisted tick.
    state_changed(timer_id: str, new_state: TimerState)
        Emitted on every state transition, including timers stopped
        because another one was started.
    overrun_started(timer_id: str)
        Emitted once when a running timer first ticks below zero.

    Every command returns ``True`` if it changed something and ``False``
    when the timer is unknown or not in a state the command applies to.
    """

    tick = pyqtSignal(str, int)
    state_changed = pyqtSignal(str, object)
    overrun_started = pyqtSignal(str)

    def __init__(
        self,
        store: TimerStore,
        parent: QObject | None = None,
        *,
        tick_interval_ms: int = TICK_INTERVAL_MS,
    ) -> None:
        super().__init__(parent)
        self._store = store
        self._ticker = Ticker(self, interval_ms=tick_interval_ms)
        self._ticker.fired.connect(self._on_tick)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def store(self) -> TimerStore:
        return self._store

    @property
    def ticking_timer_id(self) -> str | None:
        """Id of the timer the tick loop is advancing, if any."""
        return self._ticker.timer_id if self._ticker.is_active else None

    @property
    def is_ticking(self) -> bool:
        return self._ticker.is_active

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self, timer_id: str) -> bool:
        """Make *timer_id* the running timer.

        Any other active timer is stopped first.  Starting a timer that is
        already ticking leaves its loop alone.  An unknown id leaves the
        current loop untouched.
        """
        transitions: list[Timer] = []

        def _start(timers: list[Timer]) -> list[Timer]:
            if find_timer(timers, timer_id) is None:
                return timers
            out = []
            for t in timers:
                if t.id == timer_id and not t.state.is_ticking:
                    t = t.evolve(state=TimerState.RUNNING)
                    transitions.append(t)
                elif t.id != timer_id and t.state.is_active:
                    t = t.stopped()
                    transitions.append(t)
                out.append(t)
            return out

        timers = self._store.mutate(_start)
        target = find_timer(timers, timer_id)
        if target is None:
            logger.debug("start: unknown timer %s", timer_id)
            return False

        # Ticker.start drops the previous timer's schedule
        if not (self._ticker.is_active and self._ticker.timer_id == timer_id):
            self._ticker.start(timer_id)
        self._emit_transitions(transitions)
        logger.info("Started timer %s at %ss", timer_id, target.current_duration_sec)
        return True

    def pause(self, timer_id: str) -> bool:
        """RUNNING/OVERRUN → PAUSED."""
        paused = self._transition(
            timer_id,
            lambda t: t.evolve(state=TimerState.PAUSED) if t.state.is_ticking else None,
        )
        if paused is None:
            logger.debug("pause: timer %s is not running", timer_id)
            return False
        self._cancel_for(timer_id)
        self._emit_transitions([paused])
        return True

    def resume(self, timer_id: str) -> bool:
        """PAUSED → RUNNING."""
        resumed = self._transition(
            timer_id,
            lambda t: t.evolve(state=TimerState.RUNNING)
            if t.state is TimerState.PAUSED else None,
        )
        if resumed is None:
            logger.debug("resume: timer %s is not paused", timer_id)
            return False
        self._ticker.start(timer_id)
        self._emit_transitions([resumed])
        return True

    def stop(self, timer_id: str) -> bool:
        """Any state → IDLE with the original duration restored."""
        prior: list[TimerState] = []

        def _stop(timer: Timer) -> Timer:
            prior.append(timer.state)
            return timer.stopped()

        stopped = self._transition(timer_id, _stop)
        self._cancel_for(timer_id)
        if stopped is None:
            logger.debug("stop: unknown timer %s", timer_id)
            return False
        if prior[0] is not TimerState.IDLE:
            self._emit_transitions([stopped])
        return True

    def reset(self, timer_id: str) -> bool:
        """Same effect as :meth:`stop`."""
        return self.stop(timer_id)

    def restore(self) -> str | None:
        """Restart the tick loop for a timer persisted as RUNNING/OVERRUN.

        Called once at startup so a timer that was running when the
        process went away keeps counting.  Returns the restored id.
        """
        timer = active_timer(self._store.snapshot())
        if timer is None or not timer.state.is_ticking:
            return None
        self._ticker.start(timer.id)
        logger.info("Restored tick loop for timer %s at %ss", timer.id, timer.current_duration_sec)
        return timer.id

    def shutdown(self) -> None:
        """Stop ticking.  Persisted state is left as-is for :meth:`restore`."""
        self._ticker.cancel()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: tick loop
    # ══════════════════════════════════════════════════════════════════

    def _on_tick(self, timer_id: str | None = None) -> None:
        timer_id = timer_id or self._ticker.timer_id
        if timer_id is None:
            return

        seen: dict[str, Timer] = {}

        def _advance(timers: list[Timer]) -> list[Timer]:
            timer = find_timer(timers, timer_id)
            if timer is None or not timer.state.is_ticking:
                return timers
            current = timer.current_duration_sec - 1
            state = TimerState.OVERRUN if current < 0 else TimerState.RUNNING
            seen["before"] = timer
            seen["after"] = timer.evolve(current_duration_sec=current, state=state)
            return replace_timer(timers, seen["after"])

        try:
            self._store.mutate(_advance)
        except StoreError as exc:
            # Nothing was written; the next tick starts from the stored value
            logger.warning("Tick for timer %s not persisted, retrying: %s", timer_id, exc)
            return

        if "after" not in seen:
            logger.debug("Timer %s no longer running, stopping tick loop", timer_id)
            self._cancel_for(timer_id)
            return

        before, after = seen["before"], seen["after"]
        self.tick.emit(timer_id, after.current_duration_sec)
        if after.state is not before.state:
            self.state_changed.emit(timer_id, after.state)
        if before.current_duration_sec >= 0 > after.current_duration_sec:
            logger.info("Timer %s overran", timer_id)
            self.overrun_started.emit(timer_id)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: helpers
    # ══════════════════════════════════════════════════════════════════

    def _transition(
        self,
        timer_id: str,
        change: Callable[[Timer], Timer | None],
    ) -> Timer | None:
        """Apply *change* to one timer atomically.

        *change* returns the new timer, or ``None`` to leave the
        collection untouched.  Returns the new timer or ``None``.
        """
        result: list[Timer | None] = [None]

        def _apply(timers: list[Timer]) -> list[Timer]:
            timer = find_timer(timers, timer_id)
            if timer is None:
                return timers
            updated = change(timer)
            if updated is None:
                return timers
            result[0] = updated
            return replace_timer(timers, updated)

        self._store.mutate(_apply)
        return result[0]

    def _cancel_for(self, timer_id: str) -> None:
        if self._ticker.timer_id == timer_id:
            self._ticker.cancel()

    def _emit_transitions(self, timers: list[Timer]) -> None:
        for t in timers:
            self.state_changed.emit(t.id, t.state)
