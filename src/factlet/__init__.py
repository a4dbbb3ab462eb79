"""Factlet: a small piece of knowledge, on your schedule."""

from .corpus import CORPUS, Category, Factlet, Level
from .manager import FactletManager, OnboardingChoices
from .preferences import (
    NotificationFrequency,
    PreferenceStore,
    Preferences,
    RefreshInterval,
    TextColor,
)
from .timeline import Timeline, TimelineEntry, TimelineProvider

__version__ = "0.1.0"

__all__ = [
    "CORPUS",
    "Category",
    "Factlet",
    "FactletManager",
    "Level",
    "NotificationFrequency",
    "OnboardingChoices",
    "PreferenceStore",
    "Preferences",
    "RefreshInterval",
    "TextColor",
    "Timeline",
    "TimelineEntry",
    "TimelineProvider",
]
