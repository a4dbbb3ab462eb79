"""JSONL event logging."""

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


@dataclass
class LogEntry:
    """A single log entry."""

    timestamp: str
    event: str
    surface: str | None = None
    factlet_id: str | None = None
    setting: str | None = None
    value: Any = None
    count: int | None = None
    error: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict, excluding None values."""
        data = asdict(self)
        return {k: v for k, v in data.items() if v is not None and v != {} and v != []}


class JSONLLogger:
    """Logger that writes structured events in JSONL format."""

    def __init__(
        self,
        log_dir: str | Path | None = None,
        filename: str = "events.jsonl",
        max_size_mb: float = 10.0,
    ) -> None:
        if log_dir is None:
            log_dir = Path.home() / ".factlet" / "logs"
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.filename = filename
        self.max_size_bytes = int(max_size_mb * 1024 * 1024)
        self._surface: str | None = None

    @property
    def log_path(self) -> Path:
        """Current log file path."""
        return self.log_dir / self.filename

    def set_surface(self, surface: str | None) -> None:
        """Tag all subsequent events with the surface that wrote them."""
        self._surface = surface

    def _rotate_if_needed(self) -> None:
        """Rotate log file if it exceeds max size."""
        if not self.log_path.exists():
            return

        if self.log_path.stat().st_size >= self.max_size_bytes:
            timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S_%f")
            rotated_name = f"{self.log_path.stem}_{timestamp}.jsonl"
            self.log_path.rename(self.log_dir / rotated_name)

    def _write(self, entry: LogEntry) -> None:
        """Write a log entry to the file."""
        self._rotate_if_needed()

        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry.to_dict()) + "\n")

    def log(
        self,
        event: str,
        *,
        surface: str | None = None,
        factlet_id: str | None = None,
        setting: str | None = None,
        value: Any = None,
        count: int | None = None,
        error: str | None = None,
        **extra: Any,
    ) -> None:
        """Log an event."""
        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            event=event,
            surface=surface or self._surface,
            factlet_id=factlet_id,
            setting=setting,
            value=value,
            count=count,
            error=error,
            extra=extra if extra else {},
        )
        self._write(entry)

    def log_refresh(self, factlet_id: str, *, category: str, level: str, pool_size: int) -> None:
        """Log a newly selected factlet."""
        self.log(
            "factlet_refresh",
            factlet_id=factlet_id,
            count=pool_size,
            category=category,
            level=level,
        )

    def log_preference_change(self, setting: str, value: Any) -> None:
        """Log a changed preference."""
        self.log("preference_change", setting=setting, value=value)

    def log_notifications_scheduled(self, frequency: str, count: int) -> None:
        """Log a notification batch."""
        self.log("notifications_scheduled", value=frequency, count=count)

    def log_permission(self, granted: bool) -> None:
        """Log the outcome of a notification permission request."""
        self.log("notification_permission", value=granted)


# Global logger instance
_logger: JSONLLogger | None = None


def get_logger() -> JSONLLogger:
    """Get the global logger instance."""
    global _logger
    if _logger is None:
        _logger = JSONLLogger()
    return _logger


def configure_logger(log_dir: str | Path | None = None, max_size_mb: float = 10.0) -> JSONLLogger:
    """Configure and return the global logger."""
    global _logger
    _logger = JSONLLogger(log_dir=log_dir, max_size_mb=max_size_mb)
    return _logger
