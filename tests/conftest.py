"""Shared pytest fixtures for TimerWidget tests."""

import os
import sys

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from PyQt6.QtWidgets import QApplication

from timerwidget.database.db import Database
from timerwidget.database.store import TimerStore
from timerwidget.dispatcher import CommandDispatcher
from timerwidget.timer.engine import TimerEngine


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture
def store(qapp):
    """A fresh store backed by an in-memory SQLite database."""
    s = TimerStore(Database("sqlite:///:memory:"))
    s.open()
    yield s
    s.close()


@pytest.fixture
def engine(store):
    """TimerEngine on the in-memory store.  Ticks are driven by hand."""
    e = TimerEngine(store)
    yield e
    e.shutdown()


@pytest.fixture
def dispatcher(engine, store):
    return CommandDispatcher(engine, store)
