"""Command boundary between the outside world and the timer engine.

Widget clicks, the editor dialog and anything else that wants to control a
timer sends a :class:`Command` through :meth:`CommandDispatcher.dispatch`.
``dispatch`` is safe to call from any thread: the command travels through a
Qt signal and is handled on the dispatcher's own thread, the same thread
that owns the engine's tick timer.  Called from that thread, the command is
handled before ``dispatch`` returns.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from PyQt6.QtCore import QObject, QThread, pyqtSignal

from .database.store import TimerStore
from .errors import StoreError
from .timer.engine import TimerEngine

logger = logging.getLogger(__name__)


class Command(Enum):
    ADD_TIMER = "add_timer"
    START = "start"
    PAUSE = "pause"
    RESUME = "resume"
    STOP = "stop"
    RESET = "reset"


@dataclass(frozen=True)
class CommandRequest:
    command: Command
    timer_id: str | None = None
    duration_sec: int | None = None


class CommandDispatcher(QObject):
    """Routes commands to :class:`TimerEngine` and :class:`TimerStore`.

    Signals
    -------
    command_handled(request: CommandRequest, ok: bool)
        Emitted after every command, successful or not.
    """

    command_handled = pyqtSignal(object, bool)
    _received = pyqtSignal(object)

    def __init__(
        self,
        engine: TimerEngine,
        store: TimerStore,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._engine = engine
        self._store = store
        self._received.connect(self._handle)

    def dispatch(
        self,
        command: Command,
        *,
        timer_id: str | None = None,
        duration_sec: int | None = None,
    ) -> bool | None:
        """Send *command*.

        Returns the outcome when handled synchronously (caller on the
        dispatcher's thread), ``None`` when it was queued for that thread.
        """
        request = CommandRequest(command, timer_id, duration_sec)
        if QThread.currentThread() is self.thread():
            return self._handle(request)
        self._received.emit(request)
        return None

    # ── handling ──────────────────────────────────────────────────────────

    def _handle(self, request: CommandRequest) -> bool:
        try:
            ok = self._execute(request)
        except StoreError:
            logger.exception("Command %s failed", request.command.value)
            ok = False
        self.command_handled.emit(request, ok)
        return ok

    def _execute(self, request: CommandRequest) -> bool:
        command = request.command
        if command is Command.ADD_TIMER:
            duration = request.duration_sec
            if isinstance(duration, bool) or not isinstance(duration, int) or duration <= 0:
                logger.warning("Rejected add-timer with duration %r", duration)
                return False
            self._store.add_timer(duration)
            return True

        if not request.timer_id:
            logger.warning("Command %s needs a timer id", command.value)
            return False

        handler = {
            Command.START: self._engine.start,
            Command.PAUSE: self._engine.pause,
            Command.RESUME: self._engine.resume,
            Command.STOP: self._engine.stop,
            Command.RESET: self._engine.reset,
        }[command]
        logger.debug("Dispatching %s for %s", command.value, request.timer_id)
        return handler(request.timer_id)
