"""Versioned preference schema migration.

Version 1 stored a single flat list of levels under ``selectedLevels`` and
offered "15 Minutes" and "30 Minutes" refresh intervals. Version 2 keeps a
per-category level map under ``categoryLevels`` and only the intervals in
RefreshInterval. Migration runs once per store; afterwards only the
canonical shape is written.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..corpus import Category, Level
from .models import SCHEMA_VERSION, RefreshInterval

if TYPE_CHECKING:
    from .store import PreferenceStore

logger = logging.getLogger(__name__)

SCHEMA_VERSION_KEY = "schemaVersion"
LEGACY_LEVELS_KEY = "selectedLevels"
CATEGORY_LEVELS_KEY = "categoryLevels"
REFRESH_INTERVAL_KEY = "refreshInterval"

LEGACY_REFRESH_INTERVALS = {
    "15 Minutes": RefreshInterval.HOURLY,
    "30 Minutes": RefreshInterval.HOURLY,
}


@dataclass
class MigrationResult:
    """Outcome of a schema migration pass."""

    from_version: int | None
    to_version: int = SCHEMA_VERSION
    changed_keys: list[str] = field(default_factory=list)

    @property
    def migrated(self) -> bool:
        return bool(self.changed_keys)


def _legacy_levels(raw: Any) -> list[str]:
    """Valid level tags from a v1 flat list, never empty."""
    if not isinstance(raw, list):
        return [level.value for level in Level]
    known = {level.value for level in Level}
    levels = sorted({v for v in raw if v in known})
    return levels or [Level.lowest().value]


def migrate_schema(store: PreferenceStore) -> MigrationResult:
    """Bring a store up to SCHEMA_VERSION.

    Args:
        store: An initialized PreferenceStore.

    Returns:
        MigrationResult describing what changed.
    """
    version = store.get_json(SCHEMA_VERSION_KEY)
    if not isinstance(version, int):
        version = None

    result = MigrationResult(from_version=version)
    if version == SCHEMA_VERSION:
        return result

    updates: dict[str, Any] = {}
    deletes: list[str] = []

    flat = store.get_json(LEGACY_LEVELS_KEY)
    if flat is not None:
        if store.get_json(CATEGORY_LEVELS_KEY) is None:
            levels = _legacy_levels(flat)
            updates[CATEGORY_LEVELS_KEY] = {c.value: levels for c in Category.concrete()}
        deletes.append(LEGACY_LEVELS_KEY)

    interval = store.get_json(REFRESH_INTERVAL_KEY)
    if interval in LEGACY_REFRESH_INTERVALS:
        updates[REFRESH_INTERVAL_KEY] = LEGACY_REFRESH_INTERVALS[interval].value

    result.changed_keys = sorted(set(updates) | set(deletes))
    updates[SCHEMA_VERSION_KEY] = SCHEMA_VERSION

    store.set_many(updates)
    if deletes:
        store.delete(*deletes)

    if result.migrated:
        logger.info("Migrated preferences from v%s: %s", version or 1, result.changed_keys)
    return result
