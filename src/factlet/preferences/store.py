"""SQLite key-value storage for preferences.

Several surfaces (the interactive CLI, the widget timeline) open their own
PreferenceStore on the same database file. Every read goes to the database
and falls back to a default when a key is missing or cannot be decoded, so
a reader never depends on another writer having finished. Writes are
best-effort: failures are logged and swallowed.
"""

import copy
import json
import logging
import sqlite3
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from ..corpus import Category, Factlet, Level
from .migration import MigrationResult, migrate_schema
from .models import NotificationFrequency, Preferences, RefreshInterval, TextColor

logger = logging.getLogger(__name__)

# Preferences field -> store key
FIELD_KEYS: dict[str, str] = {
    "current_factlet": "currentFactlet",
    "last_update": "lastUpdate",
    "refresh_interval": "refreshInterval",
    "text_color": "textColor",
    "selected_categories": "selectedCategories",
    "category_levels": "categoryLevels",
    "notification_frequency": "notificationFrequency",
    "notifications_enabled": "notificationsEnabled",
    "has_completed_onboarding": "hasCompletedOnboarding",
}

_DEFAULTS = Preferences()


def _decode_factlet(raw: Any) -> Factlet:
    if not isinstance(raw, dict):
        raise TypeError("factlet record must be an object")
    return Factlet.from_dict(raw)


def _decode_datetime(raw: Any) -> datetime:
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return datetime.fromtimestamp(raw, tz=timezone.utc)
    value = datetime.fromisoformat(raw)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _decode_categories(raw: Any) -> frozenset[Category]:
    if not isinstance(raw, list):
        raise TypeError("selected categories must be a list")
    known = {c.value: c for c in Category}
    selected = {known[tag] for tag in raw if tag in known}
    if not selected or Category.ALL in selected:
        return frozenset({Category.ALL})
    return frozenset(selected)


def _decode_category_levels(raw: Any) -> dict[Category, frozenset[Level]]:
    if not isinstance(raw, dict):
        raise TypeError("category levels must be an object")
    categories = {c.value: c for c in Category.concrete()}
    levels = {lv.value: lv for lv in Level}
    result: dict[Category, frozenset[Level]] = {}
    for tag, values in raw.items():
        if tag not in categories or not isinstance(values, list):
            continue
        decoded = frozenset(levels[v] for v in values if v in levels)
        if decoded:
            result[categories[tag]] = decoded
    return result


def _decode_bool(raw: Any) -> bool:
    if not isinstance(raw, bool):
        raise TypeError("expected a boolean")
    return raw


_DECODERS: dict[str, Callable[[Any], Any]] = {
    "current_factlet": _decode_factlet,
    "last_update": _decode_datetime,
    "refresh_interval": RefreshInterval,
    "text_color": TextColor,
    "selected_categories": _decode_categories,
    "category_levels": _decode_category_levels,
    "notification_frequency": NotificationFrequency,
    "notifications_enabled": _decode_bool,
    "has_completed_onboarding": _decode_bool,
}


def _encode(field_name: str, value: Any) -> Any:
    """Encode a Preferences field value as JSON-compatible data."""
    if value is None:
        return None
    if field_name == "current_factlet":
        return value.to_dict()
    if field_name == "last_update":
        return value.isoformat()
    if field_name == "selected_categories":
        return sorted(c.value for c in value)
    if field_name == "category_levels":
        return {c.value: sorted(lv.value for lv in levels) for c, levels in value.items()}
    if hasattr(value, "value"):
        return value.value
    return value


class PreferenceStore:
    """Persistent key-value storage for preferences using SQLite.

    Values are stored as JSON text, one row per key.
    """

    def __init__(self, db_path: Path) -> None:
        """Initialize the store with a database path.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create the database connection."""
        if self._conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path, timeout=5.0)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def init_db(self) -> MigrationResult:
        """Create the preferences table and migrate older schemas.

        Returns:
            The result of the migration pass.
        """
        conn = self._get_connection()
        conn.execute("""
            CREATE TABLE IF NOT EXISTS preferences (
                key         TEXT PRIMARY KEY,
                value       TEXT NOT NULL,
                updated_at  TEXT NOT NULL DEFAULT (datetime('now'))
            )
        """)
        conn.commit()
        return migrate_schema(self)

    # Raw access

    def get_json(self, key: str, default: Any = None) -> Any:
        """Read and decode a key, returning default when absent or corrupt."""
        try:
            row = self._get_connection().execute(
                "SELECT value FROM preferences WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            logger.warning("Cannot read %s: %s", key, e)
            return default

        if row is None:
            return default

        try:
            return json.loads(row["value"])
        except json.JSONDecodeError as e:
            logger.warning("Ignoring undecodable value for %s: %s", key, e)
            return default

    def set_json(self, key: str, value: Any) -> bool:
        """Write a single key. Returns False if the write failed."""
        return self.set_many({key: value})

    def set_many(self, values: dict[str, Any]) -> bool:
        """Write several keys in one transaction. None values delete the key.

        Returns:
            False if the write failed (the failure is logged, not raised).
        """
        if not values:
            return True
        try:
            conn = self._get_connection()
            with conn:
                for key, value in values.items():
                    if value is None:
                        conn.execute("DELETE FROM preferences WHERE key = ?", (key,))
                        continue
                    conn.execute(
                        """
                        INSERT INTO preferences (key, value) VALUES (?, ?)
                        ON CONFLICT(key) DO UPDATE SET
                            value = excluded.value,
                            updated_at = datetime('now')
                        """,
                        (key, json.dumps(value)),
                    )
        except (sqlite3.Error, TypeError, ValueError) as e:
            logger.warning("Failed to save %s: %s", sorted(values), e)
            return False
        return True

    def delete(self, *keys: str) -> int:
        """Delete keys. Returns the number of rows removed."""
        if not keys:
            return 0
        try:
            conn = self._get_connection()
            with conn:
                cursor = conn.executemany(
                    "DELETE FROM preferences WHERE key = ?", [(k,) for k in keys]
                )
        except sqlite3.Error as e:
            logger.warning("Failed to delete %s: %s", keys, e)
            return 0
        return cursor.rowcount

    def keys(self) -> list[str]:
        """All stored keys, sorted."""
        try:
            rows = self._get_connection().execute(
                "SELECT key FROM preferences ORDER BY key"
            ).fetchall()
        except sqlite3.Error as e:
            logger.warning("Cannot list keys: %s", e)
            return []
        return [row["key"] for row in rows]

    # Typed access

    def read(self, field_name: str) -> Any:
        """Read one Preferences field, falling back to its default.

        Raises:
            KeyError: If field_name is not a Preferences field.
        """
        key = FIELD_KEYS[field_name]
        default = copy.copy(getattr(_DEFAULTS, field_name))
        raw = self.get_json(key)
        if raw is None:
            return default
        try:
            return _DECODERS[field_name](raw)
        except (KeyError, TypeError, ValueError, OverflowError, OSError) as e:
            logger.warning("Ignoring invalid value for %s: %s", key, e)
            return default

    def load(self) -> Preferences:
        """Load every field, each independently defaulted."""
        return Preferences(**{name: self.read(name) for name in FIELD_KEYS})

    def save(self, prefs: Preferences, fields: Iterable[str] | None = None) -> bool:
        """Persist fields of prefs (all of them when fields is None).

        Returns:
            False if the write failed.
        """
        names = list(fields) if fields is not None else list(FIELD_KEYS)
        values = {FIELD_KEYS[name]: _encode(name, getattr(prefs, name)) for name in names}
        return self.set_many(values)

    def current_factlet(self) -> Factlet | None:
        return self.read("current_factlet")

    def last_update(self) -> datetime | None:
        return self.read("last_update")

    def refresh_interval(self) -> RefreshInterval:
        return self.read("refresh_interval")

    def text_color(self) -> TextColor:
        return self.read("text_color")

    def selected_categories(self) -> frozenset[Category]:
        return self.read("selected_categories")

    def category_levels(self) -> dict[Category, frozenset[Level]]:
        return self.read("category_levels")

    def notification_frequency(self) -> NotificationFrequency:
        return self.read("notification_frequency")

    def has_completed_onboarding(self) -> bool:
        return self.read("has_completed_onboarding")

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
