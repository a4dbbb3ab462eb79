"""Factlet selection: filtering, random picks and refresh timing.

Everything here is a pure function of its arguments. Randomness comes
from an injectable ``random.Random`` so callers (and tests) can seed it.
"""

from __future__ import annotations

import random
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import datetime, timedelta
from typing import Union

from ..corpus import CORPUS, Category, Factlet, Level
from ..preferences.models import RefreshInterval

LevelSelector = Union[
    Iterable[Level],
    Mapping[Category, Iterable[Level]],
    Callable[[Category], Union[Iterable[Level], None]],
]


def _expand_categories(selected: Iterable[Category]) -> set[Category]:
    selected = set(selected)
    if Category.ALL in selected:
        return set(Category.concrete())
    return selected


def _level_resolver(level_selector: LevelSelector) -> Callable[[Category], frozenset[Level]]:
    """Turn either selector shape into a category -> levels function."""
    if isinstance(level_selector, Mapping):
        level_selector = level_selector.get

    if callable(level_selector):
        cache: dict[Category, frozenset[Level]] = {}

        def resolve(category: Category) -> frozenset[Level]:
            if category not in cache:
                levels = level_selector(category)
                cache[category] = frozenset(levels) if levels else frozenset(Level)
            return cache[category]

        return resolve

    flat = frozenset(level_selector)
    return lambda category: flat


def filter_corpus(
    corpus: Sequence[Factlet],
    selected_categories: Iterable[Category],
    level_selector: LevelSelector,
) -> list[Factlet]:
    """Return the factlets matching the category and level selection.

    Args:
        corpus: Factlets to filter, in order.
        selected_categories: Selected categories; the wildcard expands to
            every concrete category.
        level_selector: Either a flat collection of levels, or a function
            (or mapping) from a category to its levels; None/empty means
            all levels.

    Returns:
        The ordered subsequence of matching factlets. May be empty.
    """
    categories = _expand_categories(selected_categories)
    levels_for = _level_resolver(level_selector)
    return [
        factlet
        for factlet in corpus
        if factlet.category in categories and factlet.level in levels_for(factlet.category)
    ]


def pick_random(
    filtered: Sequence[Factlet],
    exclude_id: str | None = None,
    rng: random.Random | None = None,
    corpus: Sequence[Factlet] = CORPUS,
) -> Factlet:
    """Pick a factlet at random, avoiding an immediate repeat when possible.

    An empty selection falls back to the whole corpus. A single candidate is
    returned even if it is the excluded one. Otherwise draws are resampled
    while they hit ``exclude_id``, at most ``len(filtered)`` times, then the
    pick is made among the remaining alternatives directly.
    """
    rng = rng or random.Random()

    if not filtered:
        return rng.choice(corpus)

    if len(filtered) == 1:
        return filtered[0]

    for _ in range(len(filtered)):
        candidate = rng.choice(filtered)
        if candidate.id != exclude_id:
            return candidate

    alternatives = [f for f in filtered if f.id != exclude_id]
    if not alternatives:
        return filtered[0]
    return rng.choice(alternatives)


def is_refresh_due(
    last_update: datetime | None,
    interval: RefreshInterval,
    now: datetime,
) -> bool:
    """True when a full interval has elapsed since the last update.

    A missing last update (first run) is always due.
    """
    if last_update is None:
        return True
    return (now - last_update).total_seconds() >= interval.seconds


def next_refresh_time(now: datetime, interval: RefreshInterval) -> datetime:
    """When the next refresh becomes due, counting from now.

    Clamped to the largest representable datetime.
    """
    try:
        return now + timedelta(seconds=interval.seconds)
    except OverflowError:
        return datetime.max.replace(tzinfo=now.tzinfo)
