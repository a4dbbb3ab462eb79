"""Factlet manager: the API every presentation surface talks to.

The manager owns no preference state of its own. Each call reads the
shared PreferenceStore, applies a pure transition, writes back only the
keys it touched and notifies reload listeners so other surfaces re-read.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from .corpus import CORPUS, Category, Factlet, Level, get_factlet
from .logging import JSONLLogger, get_logger
from .notifications import (
    MemoryNotificationCenter,
    NotificationPayload,
    NotificationScheduler,
)
from .preferences import (
    NotificationFrequency,
    PreferenceStore,
    Preferences,
    RefreshInterval,
    TextColor,
    mutators,
)
from .selection import filter_corpus, is_refresh_due, next_refresh_time, pick_random

logger = logging.getLogger(__name__)

ReloadListener = Callable[[], None]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class OnboardingChoices:
    """Selections gathered by the onboarding flow."""

    categories: set[Category] = field(default_factory=set)
    category_levels: dict[Category, set[Level]] = field(default_factory=dict)
    refresh_interval: RefreshInterval = RefreshInterval.HOURLY
    notification_frequency: NotificationFrequency = NotificationFrequency.OFF


class FactletManager:
    """Selects, persists and schedules factlets for one surface."""

    def __init__(
        self,
        store: PreferenceStore,
        scheduler: NotificationScheduler | None = None,
        rng: random.Random | None = None,
        event_log: JSONLLogger | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.store = store
        self.rng = rng or random.Random()
        self.scheduler = scheduler or NotificationScheduler(MemoryNotificationCenter(), rng=self.rng)
        self.event_log = event_log or get_logger()
        self.clock = clock
        self._listeners: list[ReloadListener] = []
        self._background: set[asyncio.Task] = set()

    # Reload signal

    def add_reload_listener(self, listener: ReloadListener) -> None:
        """Register a callback run after every persisted change."""
        self._listeners.append(listener)

    def remove_reload_listener(self, listener: ReloadListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _reload(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("Reload listener failed")

    def _commit(self, prefs: Preferences, fields: Iterable[str]) -> Preferences:
        """Persist the given fields and signal surfaces to reload."""
        self.store.save(prefs, fields)
        self._reload()
        return prefs

    # Reads

    def _load(self, now: datetime) -> Preferences:
        """Load preferences, dropping a last update more than one interval ahead of now."""
        prefs = self.store.load()
        last = prefs.last_update
        if last is not None and (last - now).total_seconds() > prefs.refresh_interval.seconds:
            logger.warning("Ignoring last update %s, later than %s", last.isoformat(), now.isoformat())
            return replace(prefs, last_update=None)
        return prefs

    @property
    def preferences(self) -> Preferences:
        """Fresh snapshot of the shared preferences."""
        return self._load(self.clock())

    def get_current_factlet(self) -> Factlet:
        """The factlet to show; picks and persists one on first use."""
        current = self.store.current_factlet()
        if current is not None:
            return current
        return self.refresh()

    def get_refresh_interval(self) -> RefreshInterval:
        return self.store.refresh_interval()

    def get_text_color(self) -> TextColor:
        return self.store.text_color()

    def get_filtered_factlets(self, prefs: Preferences | None = None) -> list[Factlet]:
        """Corpus entries matching the selected categories and levels."""
        prefs = prefs or self.preferences
        return filter_corpus(CORPUS, prefs.selected_categories, prefs.levels_for)

    def count_for_category(self, category: Category) -> int:
        """Factlets a category contributes under its current level selection."""
        prefs = self.preferences
        return len(filter_corpus(CORPUS, {category}, prefs.levels_for))

    def count_for_level(self, level: Level) -> int:
        """Factlets of a level across the selected categories."""
        prefs = self.preferences
        return len(filter_corpus(CORPUS, prefs.selected_categories, {level}))

    def is_due(self, now: datetime | None = None) -> bool:
        now = now or self.clock()
        prefs = self._load(now)
        return is_refresh_due(prefs.last_update, prefs.refresh_interval, now)

    def next_refresh(self, now: datetime | None = None) -> datetime:
        """When the current factlet may next change."""
        now = now or self.clock()
        prefs = self._load(now)
        if prefs.last_update is None:
            return now
        return next_refresh_time(prefs.last_update, prefs.refresh_interval)

    # Refresh

    def refresh(self, now: datetime | None = None) -> Factlet:
        """Pick a new factlet, avoiding the current one, and persist it."""
        prefs = self.preferences
        filtered = self.get_filtered_factlets(prefs)
        exclude = prefs.current_factlet.id if prefs.current_factlet else None
        factlet = pick_random(filtered, exclude, self.rng)

        prefs = mutators.set_current_factlet(prefs, factlet, now or self.clock())
        self._commit(prefs, ("current_factlet", "last_update"))
        self.event_log.log_refresh(
            factlet.id,
            category=factlet.category.value,
            level=factlet.level.value,
            pool_size=len(filtered),
        )
        return factlet

    def check_and_refresh_if_needed(self, now: datetime | None = None) -> Factlet:
        """Refresh when due, then return the factlet to show."""
        now = now or self.clock()
        if self.is_due(now) or self.store.current_factlet() is None:
            return self.refresh(now)
        return self.get_current_factlet()

    def handle_notification_tap(self, payload: NotificationPayload) -> Factlet:
        """A delivered notification was opened: refresh once."""
        tapped = get_factlet(payload.factlet_id)
        if tapped is None:
            logger.warning("Notification for unknown factlet %s", payload.factlet_id)
            self.event_log.log("notification_tap", factlet_id=payload.factlet_id)
        else:
            self.event_log.log(
                "notification_tap",
                factlet_id=tapped.id,
                category=tapped.category.value,
                level=tapped.level.value,
            )
        return self.refresh()

    # Mutators

    def toggle_category(self, category: Category) -> Preferences:
        prefs = mutators.toggle_category(self.preferences, category)
        self.event_log.log_preference_change(
            "selected_categories", sorted(c.value for c in prefs.selected_categories)
        )
        self._commit(prefs, ("selected_categories",))
        self._reschedule_for_selection(prefs)
        return prefs

    def toggle_level(self, level: Level, category: Category | None = None) -> Preferences:
        before = self.preferences
        prefs = mutators.toggle_level(before, level, category)
        if prefs is before:
            return prefs
        self.event_log.log_preference_change(
            "category_levels",
            {c.value: sorted(lv.value for lv in levels) for c, levels in prefs.category_levels.items()},
        )
        self._commit(prefs, ("category_levels",))
        self._reschedule_for_selection(prefs)
        return prefs

    def is_level_selected(self, level: Level, category: Category | None = None) -> bool:
        return mutators.is_level_selected(self.preferences, level, category)

    def set_refresh_interval(self, interval: RefreshInterval) -> Preferences:
        prefs = mutators.set_refresh_interval(self.preferences, interval)
        self.event_log.log_preference_change("refresh_interval", interval.value)
        return self._commit(prefs, ("refresh_interval",))

    def set_text_color(self, color: TextColor) -> Preferences:
        prefs = mutators.set_text_color(self.preferences, color)
        self.event_log.log_preference_change("text_color", color.value)
        return self._commit(prefs, ("text_color",))

    # Notifications

    async def request_notification_permission(self) -> bool:
        """Ask the notification center for permission."""
        granted = await self.scheduler.center.request_authorization()
        self.event_log.log_permission(granted)
        return granted

    async def set_notification_frequency(self, frequency: NotificationFrequency) -> int | None:
        """Store the frequency, then cancel or rebuild pending notifications.

        Any frequency other than Off first asks for permission; on denial
        nothing is stored or scheduled.

        Returns:
            Number of notifications scheduled, or None if permission was denied.
        """
        if not frequency.is_off and not await self.request_notification_permission():
            return None

        prefs = mutators.set_notification_frequency(self.preferences, frequency)
        self.event_log.log_preference_change("notification_frequency", frequency.value)
        self._commit(prefs, ("notification_frequency", "notifications_enabled"))

        if frequency.is_off:
            removed = self.scheduler.cancel_all()
            self.event_log.log("notifications_cancelled", count=removed)
            return 0
        return await self.reschedule_notifications(prefs)

    async def reschedule_notifications(self, prefs: Preferences | None = None) -> int:
        """Rebuild the pending batch from the current selection."""
        prefs = prefs or self.preferences
        if not prefs.notifications_enabled or prefs.notification_frequency.is_off:
            return 0
        count = await self.scheduler.reschedule(
            prefs.notification_frequency,
            self.get_filtered_factlets(prefs),
            self.clock(),
        )
        self.event_log.log_notifications_scheduled(prefs.notification_frequency.value, count)
        return count

    def _reschedule_for_selection(self, prefs: Preferences) -> None:
        """Redraw pending notifications after the topic or level filter changed."""
        if not prefs.notifications_enabled or prefs.notification_frequency.is_off:
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self.reschedule_notifications(prefs))
        else:
            self.start_notification_reschedule()

    def start_notification_reschedule(self) -> asyncio.Task:
        """Fire-and-forget variant of reschedule_notifications.

        Must be called from within a running event loop.
        """
        task = asyncio.get_running_loop().create_task(self.reschedule_notifications())
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    # Onboarding

    async def complete_onboarding(self, choices: OnboardingChoices) -> bool:
        """Apply onboarding selections and mark onboarding complete.

        Returns:
            True if notifications were enabled.
        """
        prefs = mutators.set_selected_categories(self.preferences, choices.categories)

        if choices.category_levels:
            levels = dict(choices.category_levels)
        else:
            targets = prefs.active_categories()
            levels = {category: set(Level) for category in targets}
        prefs = mutators.set_category_levels(prefs, levels)
        prefs = mutators.set_refresh_interval(prefs, choices.refresh_interval)
        self._commit(prefs, ("selected_categories", "category_levels", "refresh_interval"))

        enabled = False
        if not choices.notification_frequency.is_off:
            enabled = await self.set_notification_frequency(choices.notification_frequency) is not None

        prefs = mutators.complete_onboarding(self.preferences)
        self._commit(prefs, ("has_completed_onboarding",))
        self.event_log.log_preference_change("has_completed_onboarding", True)
        return enabled
