"""Timer package."""

from .models import (
    Timer,
    TimerState,
    MAX_TIMERS,
    MIN_TIMER_SECONDS,
    PRESET_DURATIONS,
)
from .formatter import format_time
from .engine import TimerEngine, Ticker, TICK_INTERVAL_MS

__all__ = [
    "Timer",
    "TimerState",
    "MAX_TIMERS",
    "MIN_TIMER_SECONDS",
    "PRESET_DURATIONS",
    "format_time",
    "TimerEngine",
    "Ticker",
    "TICK_INTERVAL_MS",
]
