"""Preference schema: enums and the Preferences aggregate."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from ..corpus import Category, Factlet, Level

SCHEMA_VERSION = 2


def _normalize(name: str) -> str:
    """Lowercase and map "_"/"-" to spaces so member names match values."""
    return name.strip().lower().replace("_", " ").replace("-", " ")


class RefreshInterval(Enum):
    """How often the displayed factlet may change."""

    HOURLY = "Hourly"
    TWICE_DAILY = "Twice Daily"
    DAILY = "Daily"

    @property
    def seconds(self) -> int:
        return _REFRESH_SECONDS[self]

    @property
    def display_name(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: str) -> RefreshInterval:
        """Resolve an interval from its value or member name.

        Raises:
            ValueError: If the name matches no interval.
        """
        key = _normalize(name)
        for interval in cls:
            if key == interval.value.lower():
                return interval
        raise ValueError(f"Unknown refresh interval: {name}")


_REFRESH_SECONDS = {
    RefreshInterval.HOURLY: 60 * 60,
    RefreshInterval.TWICE_DAILY: 12 * 60 * 60,
    RefreshInterval.DAILY: 24 * 60 * 60,
}


class TextColor(Enum):
    """Text color used by the widget surface."""

    LIGHT = "Light"
    DARK = "Dark"

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def primary_color(self) -> float:
        """Gray level of the primary text (1.0 is white)."""
        return 1.0 if self is TextColor.LIGHT else 0.0

    @classmethod
    def parse(cls, name: str) -> TextColor:
        key = _normalize(name)
        for color in cls:
            if key == color.value.lower():
                return color
        raise ValueError(f"Unknown text color: {name}")


class NotificationFrequency(Enum):
    """Cadence of scheduled factlet notifications."""

    OFF = "Off"
    HOURLY = "Hourly"
    EVERY_THREE_HOURS = "Every 3 Hours"
    EVERY_SIX_HOURS = "Every 6 Hours"
    TWICE_DAILY = "Twice Daily"
    DAILY = "Daily"

    @property
    def seconds(self) -> int | None:
        """Spacing between notifications, None when off."""
        return _NOTIFICATION_SECONDS.get(self)

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def description(self) -> str:
        return _NOTIFICATION_DESCRIPTIONS.get(self, "")

    @property
    def is_off(self) -> bool:
        return self is NotificationFrequency.OFF

    @classmethod
    def parse(cls, name: str) -> NotificationFrequency:
        """Resolve a frequency from its value or member name ("every_three_hours").

        Raises:
            ValueError: If the name matches no frequency.
        """
        key = _normalize(name).replace("three", "3").replace("six", "6")
        for frequency in cls:
            if key == frequency.value.lower():
                return frequency
        raise ValueError(f"Unknown notification frequency: {name}")


_NOTIFICATION_SECONDS = {
    NotificationFrequency.HOURLY: 60 * 60,
    NotificationFrequency.EVERY_THREE_HOURS: 3 * 60 * 60,
    NotificationFrequency.EVERY_SIX_HOURS: 6 * 60 * 60,
    NotificationFrequency.TWICE_DAILY: 12 * 60 * 60,
    NotificationFrequency.DAILY: 24 * 60 * 60,
}

_NOTIFICATION_DESCRIPTIONS = {
    NotificationFrequency.HOURLY: "~24 factlets per day",
    NotificationFrequency.EVERY_THREE_HOURS: "~8 factlets per day",
    NotificationFrequency.EVERY_SIX_HOURS: "~4 factlets per day",
    NotificationFrequency.TWICE_DAILY: "Morning & evening",
    NotificationFrequency.DAILY: "Once per day",
}


def all_levels() -> frozenset[Level]:
    return frozenset(Level)


@dataclass(frozen=True)
class Preferences:
    """Everything the user has chosen, plus the currently shown factlet.

    A category without an entry in category_levels uses every level.
    """

    current_factlet: Factlet | None = None
    last_update: datetime | None = None
    refresh_interval: RefreshInterval = RefreshInterval.HOURLY
    text_color: TextColor = TextColor.DARK
    selected_categories: frozenset[Category] = frozenset({Category.ALL})
    category_levels: dict[Category, frozenset[Level]] = field(default_factory=dict)
    notification_frequency: NotificationFrequency = NotificationFrequency.OFF
    notifications_enabled: bool = False
    has_completed_onboarding: bool = False

    def levels_for(self, category: Category) -> frozenset[Level]:
        """Level set applicable to a category."""
        levels = self.category_levels.get(category)
        return levels if levels else all_levels()

    def is_category_selected(self, category: Category) -> bool:
        return category in self.selected_categories

    def active_categories(self) -> tuple[Category, ...]:
        """Concrete categories the selection covers, wildcard expanded."""
        if Category.ALL in self.selected_categories:
            return Category.concrete()
        return tuple(c for c in Category.concrete() if c in self.selected_categories)
