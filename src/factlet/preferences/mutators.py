"""Pure preference transitions.

Each function takes a Preferences value and returns a new one. None of
them can leave the category selection or any category's level set empty.
Persistence and the reload signal are the caller's job (see FactletManager).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime

from ..corpus import Category, Factlet, Level
from .models import NotificationFrequency, Preferences, RefreshInterval, TextColor


def toggle_category(prefs: Preferences, category: Category) -> Preferences:
    """Select or deselect a category.

    Selecting the wildcard clears every concrete category. Toggling a
    concrete category drops the wildcard; deselecting the last concrete
    category falls back to the wildcard.
    """
    if category.is_wildcard:
        return replace(prefs, selected_categories=frozenset({Category.ALL}))

    selected = set(prefs.selected_categories)
    selected.discard(Category.ALL)

    if category in selected:
        selected.remove(category)
        if not selected:
            selected = {Category.ALL}
    else:
        selected.add(category)

    return replace(prefs, selected_categories=frozenset(selected))


def _toggled(levels: frozenset[Level], level: Level, select: bool) -> frozenset[Level]:
    result = set(levels)
    if select:
        result.add(level)
    else:
        result.discard(level)
        if not result:
            result.add(Level.lowest())
    return frozenset(result)


def toggle_level(
    prefs: Preferences,
    level: Level,
    category: Category | None = None,
) -> Preferences:
    """Select or deselect a difficulty level.

    With a concrete category only that category's level set changes; the
    wildcard category is rejected and returns prefs unchanged.

    Without a category the toggle applies to every selected concrete
    category (all of them when the wildcard is selected). The direction is
    decided once: if the level is selected everywhere it is removed
    everywhere, otherwise it is added everywhere.
    """
    if category is not None and category.is_wildcard:
        return prefs

    targets = (category,) if category is not None else prefs.active_categories()
    select = not all(level in prefs.levels_for(c) for c in targets)

    levels = dict(prefs.category_levels)
    for target in targets:
        levels[target] = _toggled(prefs.levels_for(target), level, select)

    return replace(prefs, category_levels=levels)


def is_level_selected(prefs: Preferences, level: Level, category: Category | None = None) -> bool:
    """Whether a level is selected for a category, or for every active one."""
    if category is not None and not category.is_wildcard:
        return level in prefs.levels_for(category)
    return all(level in prefs.levels_for(c) for c in prefs.active_categories())


def set_category_levels(
    prefs: Preferences,
    category_levels: dict[Category, Iterable[Level]],
) -> Preferences:
    """Replace the level map, dropping the wildcard and empty entries."""
    levels = {
        category: frozenset(values)
        for category, values in category_levels.items()
        if not category.is_wildcard and values
    }
    return replace(prefs, category_levels=levels)


def set_selected_categories(prefs: Preferences, categories: Iterable[Category]) -> Preferences:
    """Replace the selection, keeping the wildcard exclusive and the set non-empty."""
    selected = set(categories)
    if not selected or Category.ALL in selected:
        selected = {Category.ALL}
    return replace(prefs, selected_categories=frozenset(selected))


def set_refresh_interval(prefs: Preferences, interval: RefreshInterval) -> Preferences:
    return replace(prefs, refresh_interval=interval)


def set_text_color(prefs: Preferences, color: TextColor) -> Preferences:
    return replace(prefs, text_color=color)


def set_notification_frequency(
    prefs: Preferences,
    frequency: NotificationFrequency,
) -> Preferences:
    """Replace the frequency; notifications are enabled for any non-off value."""
    return replace(
        prefs,
        notification_frequency=frequency,
        notifications_enabled=not frequency.is_off,
    )


def set_current_factlet(prefs: Preferences, factlet: Factlet, now: datetime) -> Preferences:
    """Show a new factlet and stamp the update time."""
    return replace(prefs, current_factlet=factlet, last_update=now)


def complete_onboarding(prefs: Preferences) -> Preferences:
    return replace(prefs, has_completed_onboarding=True)
