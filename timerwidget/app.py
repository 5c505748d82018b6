"""Main application window for TimerWidget."""

from __future__ import annotations

import logging
from pathlib import Path

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QCloseEvent
from PyQt6.QtWidgets import QMainWindow

from .database.db import Database, default_url
from .database.store import TimerStore
from .dispatcher import Command, CommandDispatcher
from .settings import Settings, save_settings
from .timer.engine import TimerEngine
from .ui.editor import EditorDialog
from .ui.styles import build_stylesheet
from .ui.timer_widget import TimerWidget

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def open_store(settings: Settings) -> TimerStore:
    """Open the store named by *settings* and seed presets on first run."""
    db_path = Path(settings.db_path).expanduser() if settings.db_path else None
    store = TimerStore(Database(default_url(db_path)))
    store.open()
    store.ensure_initialized()
    return store


class TimerWidgetApp(QMainWindow):
    """Frameless window hosting the timer widget.

    Owns the engine and dispatcher for the lifetime of the window; the
    store is handed in already open and closed again in :meth:`shutdown`.
    """

    def __init__(self, store: TimerStore, settings: Settings) -> None:
        super().__init__()
        self.setWindowTitle("TimerWidget")
        self._settings = settings
        self._store = store
        self._closed = False

        flags = Qt.WindowType.Tool | Qt.WindowType.FramelessWindowHint
        if settings.always_on_top:
            flags |= Qt.WindowType.WindowStaysOnTopHint
        self.setWindowFlags(flags)

        # ── engines ───────────────────────────────────────────────────
        self._engine = TimerEngine(store, parent=self)
        self._dispatcher = CommandDispatcher(self._engine, store, parent=self)
        self._engine.overrun_started.connect(self._on_overrun)

        # ── ui ────────────────────────────────────────────────────────
        self._widget = TimerWidget(store, self._dispatcher, parent=self)
        self._widget.add_requested.connect(self.open_editor)
        self.setCentralWidget(self._widget)
        self.setStyleSheet(build_stylesheet())

        if settings.window_x is not None and settings.window_y is not None:
            self.move(settings.window_x, settings.window_y)

        self._engine.restore()

    @property
    def engine(self) -> TimerEngine:
        return self._engine

    @property
    def dispatcher(self) -> CommandDispatcher:
        return self._dispatcher

    @property
    def timer_widget(self) -> TimerWidget:
        return self._widget

    # ── slots ─────────────────────────────────────────────────────────────

    def open_editor(self) -> None:
        dialog = EditorDialog(self)
        dialog.timer_requested.connect(
            lambda seconds: self._dispatcher.dispatch(Command.ADD_TIMER, duration_sec=seconds)
        )
        dialog.exec()

    def _on_overrun(self, timer_id: str) -> None:
        logger.info("Timer %s is now overrunning", timer_id)

    # ── lifecycle ─────────────────────────────────────────────────────────

    def shutdown(self) -> None:
        """Stop ticking, remember the window position and close the store."""
        if self._closed:
            return
        self._closed = True
        self._engine.shutdown()
        self._settings.window_x = self.x()
        self._settings.window_y = self.y()
        try:
            save_settings(self._settings)
        except OSError as exc:
            logger.warning("Could not save settings: %s", exc)
        self._store.close()

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802
        self.shutdown()
        super().closeEvent(event)
