"""TimerWidget — two countdown timers on a desktop widget."""

__version__ = "0.1.0"
