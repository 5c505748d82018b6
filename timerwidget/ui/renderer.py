"""Pure view model for the timer widget.

:func:`render` turns a timer snapshot into a :class:`WidgetView`: the text
to show and, for every clickable element, the command it sends.  It has no
Qt dependency, so the layout rules can be checked without a display.

Layouts
-------
empty    No timers: a hint plus the add button.
idle     No active timer: one slot per timer (max two), click → START.
active   One RUNNING/PAUSED/OVERRUN timer: countdown text, a pause/resume
         toggle, reset (RUNNING/PAUSED) or stop (OVERRUN), and the first
         other idle timer as a START slot below.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from ..dispatcher import Command
from ..timer.formatter import format_time
from ..timer.models import MAX_TIMERS, Timer, TimerState, active_timer


@dataclass(frozen=True)
class ButtonTarget:
    """A clickable element and the command it dispatches."""

    label: str
    command: Command
    timer_id: str


@dataclass(frozen=True)
class ActiveView:
    timer_id: str
    state: TimerState
    time_text: str
    toggle: ButtonTarget
    secondary: ButtonTarget


@dataclass(frozen=True)
class WidgetView:
    empty: bool = False
    active: ActiveView | None = None
    slots: tuple[ButtonTarget, ...] = field(default_factory=tuple)
    show_add: bool = True


TOGGLE_LABELS: dict[Command, str] = {
    Command.PAUSE:  "Pause",
    Command.RESUME: "Resume",
}

SECONDARY_LABELS: dict[Command, str] = {
    Command.RESET: "Reset",
    Command.STOP:  "Stop",
}


def render(timers: Sequence[Timer]) -> WidgetView:
    if not timers:
        return WidgetView(empty=True)

    active = active_timer(timers)
    if active is None:
        slots = tuple(_start_slot(t) for t in timers[:MAX_TIMERS])
        return WidgetView(slots=slots)

    toggle_cmd = Command.RESUME if active.state is TimerState.PAUSED else Command.PAUSE
    secondary_cmd = Command.STOP if active.state is TimerState.OVERRUN else Command.RESET
    view = ActiveView(
        timer_id=active.id,
        state=active.state,
        time_text=format_time(active.current_duration_sec),
        toggle=ButtonTarget(TOGGLE_LABELS[toggle_cmd], toggle_cmd, active.id),
        secondary=ButtonTarget(SECONDARY_LABELS[secondary_cmd], secondary_cmd, active.id),
    )
    idle = next(
        (t for t in timers if t.state is TimerState.IDLE and t.id != active.id),
        None,
    )
    slots = (_start_slot(idle),) if idle is not None else ()
    return WidgetView(active=view, slots=slots)


def _start_slot(timer: Timer) -> ButtonTarget:
    return ButtonTarget(format_time(timer.original_duration_sec), Command.START, timer.id)
