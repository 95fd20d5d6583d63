"""Shared pytest fixtures for StudyScrum tests."""

import os
import sys

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from PyQt6.QtWidgets import QApplication

from studyscrum.controller import StudyController
from studyscrum.database.db import configure_engine, init_db
from studyscrum.state import AppState
from studyscrum.timer.engine import TimerEngine

from helpers import FakeClock


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture(autouse=True)
def app_home(tmp_path, monkeypatch):
    """Keep settings files out of the real home directory."""
    monkeypatch.setenv("STUDYSCRUM_HOME", str(tmp_path / "home"))
    return tmp_path / "home"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def engine(qapp, clock):
    """Fresh TimerEngine on default state, driven by the fake clock."""
    return TimerEngine(clock=clock)


@pytest.fixture
def controller(qapp, clock):
    """Controller over an empty record, persisting to the test DB."""
    return StudyController(AppState(), clock=clock)
