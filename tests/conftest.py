import sqlite3
from dataclasses import dataclass, replace
from unittest.mock import MagicMock

import pytest

from dbseed.engine import DbSetupTracker, Destination

pytest_plugins = ["pytester"]


@dataclass(frozen=True)
class RecordingDestination(Destination):
    """Stands in for a real destination; equal when the wrapped ones are equal."""
    wrapped: Destination

    def connect(self):
        connection = MagicMock()
        connection.__enter__.return_value = connection
        return connection


class RecordingTracker(DbSetupTracker):
    """Tracker recording every decision and launch instead of touching a database."""

    def __init__(self):
        super().__init__()
        self.decisions = []
        self.launched = []
        self.skips = 0

    def launch_if_necessary(self, setup):
        self.decisions.append(setup)
        launched = super().launch_if_necessary(
            replace(setup, destination=RecordingDestination(setup.destination))
        )
        if launched:
            self.launched.append(setup)
        return launched

    def skip_next_launch(self):
        self.skips += 1
        super().skip_next_launch()


@pytest.fixture
def connection():
    conn = sqlite3.connect(":memory:")
    conn.execute("CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT)")
    conn.execute("CREATE TABLE orders (id INTEGER PRIMARY KEY, user_id INTEGER, total REAL)")
    conn.commit()
    yield conn
    conn.close()


@pytest.fixture
def recording_trackers():
    """Factory collecting every RecordingTracker it creates."""
    created = []

    def factory():
        tracker = RecordingTracker()
        created.append(tracker)
        return tracker

    factory.created = created
    return factory


@pytest.fixture(autouse=True)
def no_config_env(monkeypatch):
    monkeypatch.delenv("DBSEED_CONFIG", raising=False)
    yield
