"""Pre-materialized notification batches.

Local notifications have no server push behind them and the platform caps
how many can be pending, so a bounded window of future notifications is
generated up front and replaced wholesale on every change.
"""

from __future__ import annotations

import random
import uuid
from collections.abc import Sequence
from datetime import datetime, timedelta

from ..config import DEFAULT_NOTIFICATION_CAP
from ..corpus import CORPUS, Factlet
from ..preferences.models import NotificationFrequency
from ..selection import pick_random
from .base import NotificationCenter, NotificationPayload, NotificationRequest


class NotificationScheduler:
    """Builds and installs notification batches on a NotificationCenter."""

    def __init__(
        self,
        center: NotificationCenter,
        rng: random.Random | None = None,
        cap: int = DEFAULT_NOTIFICATION_CAP,
        corpus: Sequence[Factlet] = CORPUS,
    ) -> None:
        if cap < 1:
            raise ValueError("cap must be at least 1")
        self.center = center
        self.rng = rng or random.Random()
        self.cap = cap
        self.corpus = corpus

    def build_batch(
        self,
        frequency: NotificationFrequency,
        filtered: Sequence[Factlet],
        now: datetime,
    ) -> list[NotificationRequest]:
        """Requests at now + d, now + 2d, ... now + cap*d.

        Each request carries an independent uniform pick from filtered
        (the whole corpus when filtered is empty); repeats are allowed.
        """
        seconds = frequency.seconds
        if seconds is None:
            return []

        step = timedelta(seconds=seconds)
        batch = []
        for k in range(1, self.cap + 1):
            factlet = pick_random(filtered, None, self.rng, self.corpus)
            batch.append(
                NotificationRequest(
                    identifier=f"factlet-{uuid.uuid4().hex[:12]}",
                    fire_at=now + k * step,
                    payload=NotificationPayload.for_factlet(factlet),
                )
            )
        return batch

    async def reschedule(
        self,
        frequency: NotificationFrequency,
        filtered: Sequence[Factlet],
        now: datetime,
    ) -> int:
        """Replace every pending request with a fresh batch.

        Returns:
            Number of requests now pending from this batch (0 when off).
        """
        self.center.remove_all_pending()
        if frequency.is_off:
            return 0
        return await self.center.add(self.build_batch(frequency, filtered, now))

    def cancel_all(self) -> int:
        """Drop every pending request."""
        return self.center.remove_all_pending()
