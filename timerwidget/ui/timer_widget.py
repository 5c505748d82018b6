"""The desktop timer widget.

Draws whatever :func:`render` produces for the current snapshot and turns
clicks into dispatcher commands.  Redraws are queued from the store's
``changed`` signal, so a mutation never waits on (or hears about) a redraw.

Layout (top → bottom):
    - Active row: countdown + pause/resume toggle + reset/stop
    - Timer slots (click to start)
    - Empty-state hint
    - "+" add button (opens the keypad editor)
"""

from __future__ import annotations

import logging
from typing import Sequence

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QFrame, QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget,
)

from ..database.store import TimerStore
from ..dispatcher import CommandDispatcher
from ..timer.models import Timer
from .renderer import ButtonTarget, WidgetView, render
from .styles import STATE_COLORS

logger = logging.getLogger(__name__)


class TimerWidget(QWidget):
    """Compact always-on-top timer card."""

    add_requested = pyqtSignal()

    def __init__(
        self,
        store: TimerStore,
        dispatcher: CommandDispatcher,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._store = store
        self._dispatcher = dispatcher
        self._view = WidgetView(empty=True)
        self._build_ui()
        self._store.changed.connect(
            self._on_timers_changed, Qt.ConnectionType.QueuedConnection,
        )
        self.refresh(self._store.snapshot())

    @property
    def view(self) -> WidgetView:
        """The view model currently on screen."""
        return self._view

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        card = QFrame(self)
        card.setObjectName("card")
        root.addWidget(card)

        layout = QVBoxLayout(card)
        layout.setContentsMargins(20, 16, 20, 16)
        layout.setSpacing(8)

        # ── active timer row ─────────────────────────────────────────
        self._active_row = QWidget(card)
        active_layout = QHBoxLayout(self._active_row)
        active_layout.setContentsMargins(0, 0, 0, 0)
        self._countdown = QLabel("", self._active_row)
        self._countdown.setObjectName("countdown")
        self._toggle_btn = QPushButton("", self._active_row)
        self._toggle_btn.setObjectName("primaryButton")
        self._secondary_btn = QPushButton("", self._active_row)
        self._secondary_btn.setObjectName("dangerButton")
        active_layout.addWidget(self._countdown, 1)
        active_layout.addWidget(self._toggle_btn)
        active_layout.addWidget(self._secondary_btn)
        layout.addWidget(self._active_row)

        # Clicking the countdown text toggles too
        self._countdown.mousePressEvent = lambda _e: self._click(
            self._view.active.toggle if self._view.active else None
        )
        self._toggle_btn.clicked.connect(
            lambda: self._click(self._view.active.toggle if self._view.active else None)
        )
        self._secondary_btn.clicked.connect(
            lambda: self._click(self._view.active.secondary if self._view.active else None)
        )

        # ── slots ────────────────────────────────────────────────────
        self._slot_btns: list[QPushButton] = []
        for i in range(2):
            btn = QPushButton("", card)
            btn.setObjectName("slotButton")
            btn.clicked.connect(lambda _checked=False, idx=i: self._on_slot_clicked(idx))
            layout.addWidget(btn)
            self._slot_btns.append(btn)

        # ── empty state ──────────────────────────────────────────────
        self._empty_label = QLabel("No timers yet", card)
        self._empty_label.setObjectName("emptyHint")
        self._empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._empty_label)

        # ── add button ───────────────────────────────────────────────
        self._add_btn = QPushButton("+", card)
        self._add_btn.setObjectName("addButton")
        self._add_btn.setToolTip("New timer")
        self._add_btn.clicked.connect(self.add_requested.emit)
        layout.addWidget(self._add_btn, alignment=Qt.AlignmentFlag.AlignRight)

    # ── rendering ─────────────────────────────────────────────────────────

    def _on_timers_changed(self, timers: Sequence[Timer]) -> None:
        try:
            self.refresh(timers)
        except Exception:
            logger.exception("Widget redraw failed")

    def refresh(self, timers: Sequence[Timer]) -> None:
        view = render(timers)
        self._view = view

        active = view.active
        self._active_row.setVisible(active is not None)
        if active is not None:
            self._countdown.setText(active.time_text)
            self._countdown.setStyleSheet(f"color: {STATE_COLORS[active.state]};")
            self._toggle_btn.setText(active.toggle.label)
            self._secondary_btn.setText(active.secondary.label)

        for i, btn in enumerate(self._slot_btns):
            if i < len(view.slots):
                btn.setText(view.slots[i].label)
                btn.setVisible(True)
            else:
                btn.setVisible(False)

        self._empty_label.setVisible(view.empty)
        self._add_btn.setVisible(view.show_add)

    # ── clicks ────────────────────────────────────────────────────────────

    def _on_slot_clicked(self, index: int) -> None:
        if index < len(self._view.slots):
            self._click(self._view.slots[index])

    def _click(self, target: ButtonTarget | None) -> None:
        if target is None:
            return
        self._dispatcher.dispatch(target.command, timer_id=target.timer_id)
