"""Shared pytest fixtures for dailylog tests."""

import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from dailylog.config import DailyLogConfig
from dailylog.controller import InteractionController
from dailylog.index import NoteIndex
from dailylog.store import NoteStore

# Fixed wall clock for deterministic filenames and timestamps
FIXED_NOW = datetime(2024, 3, 5, 14, 7, 30)


@pytest.fixture
def temp_root():
    """Create a temporary storage root."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config(temp_root):
    """Create a test configuration."""
    return DailyLogConfig(base_dir=temp_root)


@pytest.fixture
def store(config):
    """Create a store with its log directory prepared."""
    s = NoteStore(config)
    s.ensure_directories()
    return s


@pytest.fixture
def index(store):
    """Create an index over the test store."""
    return NoteIndex(store)


@pytest.fixture
def controller(store, index):
    """Create a started controller with a fixed clock."""
    ctl = InteractionController(store, index, clock=lambda: FIXED_NOW)
    ctl.start()
    return ctl
