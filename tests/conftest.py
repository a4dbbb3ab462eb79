"""Shared fixtures."""

import random
from datetime import datetime, timezone
from pathlib import Path

import pytest

from factlet.logging import JSONLLogger
from factlet.manager import FactletManager
from factlet.notifications import MemoryNotificationCenter, NotificationScheduler
from factlet.preferences import PreferenceStore

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "factlet.db"


@pytest.fixture
def store(db_path: Path) -> PreferenceStore:
    """A PreferenceStore on a temporary database."""
    store = PreferenceStore(db_path)
    store.init_db()
    yield store
    store.close()


@pytest.fixture
def event_log(tmp_path: Path) -> JSONLLogger:
    return JSONLLogger(log_dir=tmp_path / "logs")


@pytest.fixture
def center() -> MemoryNotificationCenter:
    return MemoryNotificationCenter()


@pytest.fixture
def manager(store: PreferenceStore, center: MemoryNotificationCenter, event_log: JSONLLogger) -> FactletManager:
    rng = random.Random(1234)
    scheduler = NotificationScheduler(center, rng=rng)
    return FactletManager(store, scheduler, rng=rng, event_log=event_log, clock=lambda: NOW)
