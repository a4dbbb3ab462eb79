"""Timeline queries for a background widget surface.

The provider only reads the shared store; it never writes and does not
need the interactive app to be running.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import datetime

from .corpus import CORPUS, Factlet, random_factlet
from .preferences import PreferenceStore, TextColor
from .selection import next_refresh_time

PLACEHOLDER_FACTLET = CORPUS[0]


@dataclass(frozen=True)
class TimelineEntry:
    """What the widget renders at a given date."""

    date: datetime
    factlet: Factlet
    text_color: TextColor


@dataclass(frozen=True)
class Timeline:
    """Entries to render plus when to ask for the next timeline."""

    entries: list[TimelineEntry]
    refresh_after: datetime


class TimelineProvider:
    """Answers widget snapshot and timeline requests from the store."""

    def __init__(self, store: PreferenceStore, rng: random.Random | None = None) -> None:
        self.store = store
        self.rng = rng or random.Random()

    def placeholder(self, now: datetime) -> TimelineEntry:
        """Fixed sample entry shown while the widget loads."""
        return TimelineEntry(date=now, factlet=PLACEHOLDER_FACTLET, text_color=TextColor.DARK)

    def snapshot(self, now: datetime) -> TimelineEntry:
        """Entry for the current instant."""
        factlet = self.store.current_factlet() or random_factlet(self.rng)
        return TimelineEntry(date=now, factlet=factlet, text_color=self.store.text_color())

    def timeline(self, now: datetime) -> Timeline:
        """Single-entry timeline that expires one refresh interval from now."""
        entry = self.snapshot(now)
        interval = self.store.refresh_interval()
        return Timeline(entries=[entry], refresh_after=next_refresh_time(now, interval))
