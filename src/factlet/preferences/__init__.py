"""User preferences: schema, storage, migration and transitions."""

from . import mutators
from .migration import MigrationResult, migrate_schema
from .models import (
    SCHEMA_VERSION,
    NotificationFrequency,
    Preferences,
    RefreshInterval,
    TextColor,
)
from .store import FIELD_KEYS, PreferenceStore

__all__ = [
    "FIELD_KEYS",
    "MigrationResult",
    "NotificationFrequency",
    "PreferenceStore",
    "Preferences",
    "RefreshInterval",
    "SCHEMA_VERSION",
    "TextColor",
    "migrate_schema",
    "mutators",
]
