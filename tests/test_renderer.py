"""Tests for the pure widget view model."""

from timerwidget.dispatcher import Command
from timerwidget.timer.models import Timer, TimerState
from timerwidget.ui.renderer import render


def _timer(seconds, state=TimerState.IDLE, current=None):
    t = Timer.create(seconds)
    return t.evolve(state=state, current_duration_sec=seconds if current is None else current)


class TestEmptyAndIdle:

    def test_empty(self):
        view = render([])
        assert view.empty is True
        assert view.active is None
        assert view.slots == ()
        assert view.show_add is True

    def test_single_idle_slot(self):
        t = _timer(600)
        view = render([t])
        assert view.empty is False
        assert view.active is None
        [slot] = view.slots
        assert slot.label == "10:00"
        assert slot.command == Command.START
        assert slot.timer_id == t.id

    def test_two_idle_slots_in_order(self):
        a, b = _timer(600), _timer(300)
        view = render([a, b])
        assert [s.timer_id for s in view.slots] == [a.id, b.id]
        assert [s.label for s in view.slots] == ["10:00", "05:00"]
        assert view.show_add is True

    def test_idle_slot_shows_original_duration(self):
        t = _timer(600, current=17)
        assert render([t]).slots[0].label == "10:00"


class TestActive:

    def test_running_timer(self):
        t = _timer(600, TimerState.RUNNING, 75)
        view = render([t])
        assert view.active.timer_id == t.id
        assert view.active.time_text == "01:15"
        assert view.active.toggle.command == Command.PAUSE
        assert view.active.secondary.command == Command.RESET
        assert view.slots == ()

    def test_paused_timer_toggles_to_resume(self):
        t = _timer(600, TimerState.PAUSED, 75)
        view = render([t])
        assert view.active.toggle.command == Command.RESUME
        assert view.active.toggle.label == "Resume"
        assert view.active.secondary.command == Command.RESET

    def test_overrun_offers_pause_and_stop(self):
        t = _timer(600, TimerState.OVERRUN, -5)
        view = render([t])
        assert view.active.time_text == "-00:05"
        assert view.active.toggle.command == Command.PAUSE
        assert view.active.secondary.command == Command.STOP
        assert view.active.secondary.label == "Stop"

    def test_active_with_idle_companion(self):
        idle = _timer(300)
        running = _timer(600, TimerState.RUNNING, 500)
        view = render([idle, running])
        assert view.active.timer_id == running.id
        [slot] = view.slots
        assert slot.timer_id == idle.id
        assert slot.command == Command.START

    def test_targets_point_at_active_timer(self):
        t = _timer(600, TimerState.RUNNING, 30)
        view = render([t])
        assert view.active.toggle.timer_id == t.id
        assert view.active.secondary.timer_id == t.id
