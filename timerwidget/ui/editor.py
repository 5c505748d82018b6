"""New-timer editor — a phone-style keypad.

Digits fill ``HH:MM:SS`` from the right, like a microwave: typing
``1``, ``3``, ``0`` gives ``00:01:30``.  Up to six digits; the Start button
only enables at ten seconds or more.
"""

from __future__ import annotations

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QDialog, QGridLayout, QLabel, QPushButton, QVBoxLayout, QWidget,
)

from ..timer.models import MIN_TIMER_SECONDS
from .styles import PALETTE

MAX_DIGITS = 6

KEYPAD_ROWS: tuple[tuple[str, ...], ...] = (
    ("1", "2", "3"),
    ("4", "5", "6"),
    ("7", "8", "9"),
    ("", "0", "DEL"),
)


class KeypadInput:
    """Digit buffer behind the keypad."""

    def __init__(self, digits: str = "") -> None:
        self._digits = ""
        for d in digits:
            self.press_digit(d)

    @property
    def digits(self) -> str:
        return self._digits

    @property
    def padded(self) -> str:
        return self._digits.rjust(MAX_DIGITS, "0")

    @property
    def total_seconds(self) -> int:
        p = self.padded
        hours, minutes, seconds = int(p[0:2]), int(p[2:4]), int(p[4:6])
        return hours * 3600 + minutes * 60 + seconds

    @property
    def can_start(self) -> bool:
        return self.total_seconds >= MIN_TIMER_SECONDS

    @property
    def display(self) -> str:
        p = self.padded
        return f"{p[0:2]}:{p[2:4]}:{p[4:6]}"

    @property
    def entered_positions(self) -> int:
        """How many trailing digits of :attr:`display` the user typed."""
        return len(self._digits)

    def press_digit(self, digit: str) -> bool:
        """Append *digit*.  Returns False once the buffer is full."""
        if len(digit) != 1 or digit not in "0123456789":
            raise ValueError(f"not a digit: {digit!r}")
        if len(self._digits) >= MAX_DIGITS:
            return False
        self._digits += digit
        return True

    def backspace(self) -> None:
        self._digits = self._digits[:-1]

    def clear(self) -> None:
        self._digits = ""


class EditorDialog(QDialog):
    """Modal keypad that asks for a new timer duration."""

    timer_requested = pyqtSignal(int)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("New timer")
        self.setModal(True)
        self._input = KeypadInput()
        self._build_ui()
        self._refresh()

    @property
    def keypad(self) -> KeypadInput:
        return self._input

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(16)

        self._display = QLabel("", self)
        self._display.setObjectName("editorDisplay")
        self._display.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._display.setTextFormat(Qt.TextFormat.RichText)
        layout.addWidget(self._display)

        grid = QGridLayout()
        grid.setSpacing(12)
        self._keys: dict[str, QPushButton] = {}
        for row, keys in enumerate(KEYPAD_ROWS):
            for col, key in enumerate(keys):
                if not key:
                    continue
                btn = QPushButton(key, self)
                btn.setObjectName("keypadButton")
                btn.clicked.connect(lambda _checked=False, k=key: self.press(k))
                grid.addWidget(btn, row, col)
                self._keys[key] = btn
        layout.addLayout(grid)

        self._start_btn = QPushButton("Start", self)
        self._start_btn.setObjectName("primaryButton")
        self._start_btn.clicked.connect(self._on_start)
        layout.addWidget(self._start_btn)

    # ── slots ─────────────────────────────────────────────────────────────

    def press(self, key: str) -> None:
        if key == "DEL":
            self._input.backspace()
        else:
            self._input.press_digit(key)
        self._refresh()

    def _on_start(self) -> None:
        if not self._input.can_start:
            return
        self.timer_requested.emit(self._input.total_seconds)
        self.accept()

    def _refresh(self) -> None:
        self._start_btn.setEnabled(self._input.can_start)
        self._display.setText(self._highlighted_display())

    def _highlighted_display(self) -> str:
        """Dim the padding zeros, keep typed digits bright."""
        text = self._input.display
        typed = self._input.entered_positions
        muted = PALETTE["text_muted"]
        out: list[str] = []
        digit_index = 0
        total_digits = MAX_DIGITS
        for ch in text:
            if ch == ":":
                out.append(ch)
                continue
            entered = digit_index >= total_digits - typed
            out.append(ch if entered else f'<span style="color:{muted}">{ch}</span>')
            digit_index += 1
        return "".join(out)
