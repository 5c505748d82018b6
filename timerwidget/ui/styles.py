"""QSS stylesheet and state colours for the timer widget."""

from __future__ import annotations

from ..timer.models import TimerState

# ── countdown colour per state ───────────────────────────────────────────

STATE_COLORS: dict[TimerState, str] = {
    TimerState.RUNNING: "#E2E2F0",
    TimerState.PAUSED:  "#7A7A9A",
    TimerState.OVERRUN: "#F38BA8",
    TimerState.IDLE:    "#7A7A9A",
}

# ── palette (dark, translucent-looking widget card) ──────────────────────

PALETTE: dict[str, str] = {
    "bg":           "#121212",
    "bg_secondary": "#1E1B20",
    "accent":       "#D0BCFF",
    "accent_text":  "#381E72",
    "text":         "#FEF7FF",
    "text_muted":   "#7A7A9A",
    "danger":       "#F38BA8",
    "border":       "#313154",
}

_resolved_font: str | None = None


def resolve_font_family() -> str:
    """Pick the best available system font.  Needs a QApplication."""
    global _resolved_font
    if _resolved_font is None:
        from PyQt6.QtGui import QFontDatabase
        families = set(QFontDatabase.families())
        for candidate in ("SF Pro", ".AppleSystemUIFont", "Roboto"):
            if candidate in families:
                _resolved_font = candidate
                break
        else:
            _resolved_font = "Helvetica Neue"
    return _resolved_font


# ── QSS builder ───────────────────────────────────────────────────────


def build_stylesheet(palette: dict[str, str] | None = None) -> str:
    p = palette or PALETTE
    font = resolve_font_family()
    return f"""
    QWidget {{
        background-color: {p['bg']};
        color: {p['text']};
        font-family: "{font}", "Helvetica Neue", Arial;
        font-size: 14px;
    }}

    QLabel#countdown {{
        font-size: 40px;
        font-weight: 300;
    }}

    QLabel#emptyHint, QLabel#editorDisplay {{
        color: {p['text_muted']};
    }}

    QLabel#editorDisplay {{
        font-size: 36px;
        color: {p['text']};
    }}

    QPushButton {{
        background-color: {p['bg_secondary']};
        color: {p['text']};
        border: 1px solid {p['border']};
        border-radius: 10px;
        padding: 8px 18px;
        font-weight: 600;
    }}

    QPushButton:hover {{
        border-color: {p['accent']};
    }}

    QPushButton#primaryButton, QPushButton#addButton {{
        background-color: {p['accent']};
        color: {p['accent_text']};
        border: none;
        border-radius: 18px;
        font-weight: 700;
    }}

    QPushButton#primaryButton:disabled {{
        background-color: {p['bg_secondary']};
        color: {p['text_muted']};
    }}

    QPushButton#slotButton {{
        background-color: transparent;
        color: {p['text_muted']};
        font-size: 28px;
        font-weight: 300;
        border: none;
    }}

    QPushButton#slotButton:hover {{
        color: {p['text']};
    }}

    QPushButton#dangerButton {{
        background-color: transparent;
        color: {p['danger']};
        border: 1px solid {p['border']};
    }}

    QPushButton#keypadButton {{
        font-size: 22px;
        min-width: 64px;
        min-height: 48px;
        border-radius: 24px;
    }}
    """
