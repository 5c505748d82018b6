"""Tests for the command boundary."""

import threading

import pytest

from timerwidget.dispatcher import Command, CommandRequest
from timerwidget.errors import StoreError
from timerwidget.timer.models import TimerState

from helpers import SignalCollector


class TestAddTimer:

    def test_adds_timer(self, dispatcher, store):
        assert dispatcher.dispatch(Command.ADD_TIMER, duration_sec=90) is True
        [t] = store.load()
        assert t.original_duration_sec == 90

    @pytest.mark.parametrize("bad", [0, -1, None, 2.5, True])
    def test_rejects_bad_duration(self, dispatcher, store, bad):
        assert dispatcher.dispatch(Command.ADD_TIMER, duration_sec=bad) is False
        assert store.load() == []

    def test_third_add_evicts_oldest(self, dispatcher, store):
        for seconds in (60, 120, 180):
            dispatcher.dispatch(Command.ADD_TIMER, duration_sec=seconds)
        assert [t.original_duration_sec for t in store.load()] == [120, 180]


class TestRouting:

    def test_full_lifecycle(self, dispatcher, engine, store):
        t = store.add_timer(600)

        assert dispatcher.dispatch(Command.START, timer_id=t.id) is True
        assert store.find(t.id).state == TimerState.RUNNING

        engine._on_tick()
        assert dispatcher.dispatch(Command.PAUSE, timer_id=t.id) is True
        assert store.find(t.id).state == TimerState.PAUSED

        assert dispatcher.dispatch(Command.RESUME, timer_id=t.id) is True
        assert store.find(t.id).state == TimerState.RUNNING

        assert dispatcher.dispatch(Command.RESET, timer_id=t.id) is True
        assert store.find(t.id).current_duration_sec == 600

        dispatcher.dispatch(Command.START, timer_id=t.id)
        assert dispatcher.dispatch(Command.STOP, timer_id=t.id) is True
        assert store.find(t.id).state == TimerState.IDLE

    def test_unknown_timer_is_noop(self, dispatcher):
        for command in (Command.START, Command.PAUSE, Command.RESUME, Command.STOP, Command.RESET):
            assert dispatcher.dispatch(command, timer_id="evicted") is False

    def test_missing_timer_id(self, dispatcher):
        assert dispatcher.dispatch(Command.START) is False

    def test_command_handled_signal(self, dispatcher, store):
        c = SignalCollector()
        dispatcher.command_handled.connect(c)
        t = store.add_timer(60)
        dispatcher.dispatch(Command.START, timer_id=t.id)
        request, ok = c.last
        assert request == CommandRequest(Command.START, t.id, None)
        assert ok is True


class TestFailures:

    def test_store_error_is_contained(self, dispatcher, store, monkeypatch):
        def broken(duration_sec):
            raise StoreError("disk full")

        monkeypatch.setattr(store, "add_timer", broken)
        c = SignalCollector()
        dispatcher.command_handled.connect(c)

        assert dispatcher.dispatch(Command.ADD_TIMER, duration_sec=60) is False
        assert c.last[1] is False


class TestThreads:

    def test_dispatch_from_worker_thread_is_queued(self, qapp, dispatcher, store):
        t = store.add_timer(60)
        result = {}

        def worker():
            result["value"] = dispatcher.dispatch(Command.START, timer_id=t.id)

        th = threading.Thread(target=worker)
        th.start()
        th.join(5)

        assert result["value"] is None
        qapp.processEvents()
        assert store.find(t.id).state == TimerState.RUNNING
