"""Factlet selection engine."""

from .engine import (
    LevelSelector,
    filter_corpus,
    is_refresh_due,
    next_refresh_time,
    pick_random,
)

__all__ = [
    "LevelSelector",
    "filter_corpus",
    "is_refresh_due",
    "next_refresh_time",
    "pick_random",
]
