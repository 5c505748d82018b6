"""Exception types shared across TimerWidget."""


class TimerWidgetError(Exception):
    """Base class for all TimerWidget errors."""


class StoreError(TimerWidgetError):
    """The timer store could not read or write its backing database."""


class StoreCorrupt(StoreError):
    """The persisted timer collection could not be decoded."""
