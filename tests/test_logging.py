"""Tests for JSONL event logging."""

import json
from pathlib import Path

import pytest

import factlet.logging as event_logging
from factlet.logging import JSONLLogger, LogEntry, configure_logger, get_logger


@pytest.fixture
def logger(tmp_path: Path) -> JSONLLogger:
    return JSONLLogger(log_dir=tmp_path)


def _read(logger: JSONLLogger) -> list[dict]:
    with open(logger.log_path) as f:
        return [json.loads(line) for line in f]


def test_log_entry_to_dict():
    """Test LogEntry excludes None values."""
    entry = LogEntry(timestamp="2026-01-01T00:00:00Z", event="test")
    data = entry.to_dict()

    assert "timestamp" in data
    assert "event" in data
    assert "factlet_id" not in data  # None excluded
    assert "extra" not in data  # Empty dict excluded


def test_log_entry_keeps_false_and_zero():
    entry = LogEntry(timestamp="t", event="e", value=False, count=0)
    data = entry.to_dict()
    assert data["value"] is False
    assert data["count"] == 0


def test_log_creates_file(logger: JSONLLogger):
    """Test that logging creates the log file."""
    logger.log("test_event")

    assert logger.log_path.exists()
    assert logger.log_path.name == "events.jsonl"


def test_log_writes_jsonl(logger: JSONLLogger):
    """Test that logs are written in JSONL format."""
    logger.log("event1", factlet_id="F001")
    logger.log("event2", factlet_id="F002")

    entries = _read(logger)
    assert len(entries) == 2
    assert entries[0]["event"] == "event1"
    assert entries[0]["factlet_id"] == "F001"
    assert entries[1]["event"] == "event2"


def test_log_refresh(logger: JSONLLogger):
    logger.log_refresh("F010", category="History", level="level1", pool_size=64)

    entry = _read(logger)[0]
    assert entry["event"] == "factlet_refresh"
    assert entry["factlet_id"] == "F010"
    assert entry["count"] == 64
    assert entry["extra"] == {"category": "History", "level": "level1"}


def test_log_preference_change(logger: JSONLLogger):
    logger.log_preference_change("text_color", "Light")

    entry = _read(logger)[0]
    assert entry["event"] == "preference_change"
    assert entry["setting"] == "text_color"
    assert entry["value"] == "Light"


def test_log_notifications_scheduled(logger: JSONLLogger):
    logger.log_notifications_scheduled("Daily", 60)

    entry = _read(logger)[0]
    assert entry["event"] == "notifications_scheduled"
    assert entry["value"] == "Daily"
    assert entry["count"] == 60


def test_log_permission(logger: JSONLLogger):
    logger.log_permission(False)
    assert _read(logger)[0]["value"] is False


def test_surface_tag(logger: JSONLLogger):
    logger.set_surface("widget")
    logger.log("a")
    logger.log("b", surface="cli")

    entries = _read(logger)
    assert entries[0]["surface"] == "widget"
    assert entries[1]["surface"] == "cli"


def test_rotation(tmp_path: Path):
    """Test log rotation when file exceeds max size."""
    logger = JSONLLogger(log_dir=tmp_path, max_size_mb=0.0001)  # ~100 bytes

    for i in range(10):
        logger.log("test_event", value="x" * 50, index=i)

    rotated = list(tmp_path.glob("events_*.jsonl"))
    assert len(rotated) >= 1
    assert logger.log_path.exists()


def test_configure_logger_replaces_global(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(event_logging, "_logger", None)

    configured = configure_logger(log_dir=tmp_path, max_size_mb=1)
    assert get_logger() is configured
    assert configured.log_dir == tmp_path
