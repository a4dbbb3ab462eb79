"""Notification payloads and the notification center interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ..corpus import Factlet


@dataclass(frozen=True)
class NotificationPayload:
    """What a delivered notification shows.

    Attributes:
        title: Category display name.
        body: The fact text.
        factlet_id: Reference back to the factlet.
    """

    title: str
    body: str
    factlet_id: str

    @classmethod
    def for_factlet(cls, factlet: Factlet) -> NotificationPayload:
        return cls(
            title=factlet.category.display_name,
            body=factlet.text,
            factlet_id=factlet.id,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "body": self.body, "factlet_id": self.factlet_id}


@dataclass(frozen=True)
class NotificationRequest:
    """A payload scheduled to fire at a given time."""

    identifier: str
    fire_at: datetime
    payload: NotificationPayload


class NotificationCenter(ABC):
    """Local notification delivery, as offered by the host platform.

    Permission requests and adding requests are coroutines; the caller
    decides whether to await them or run them as background tasks.
    """

    @abstractmethod
    async def request_authorization(self) -> bool:
        """Ask for permission to deliver notifications."""
        ...

    @abstractmethod
    async def add(self, requests: list[NotificationRequest]) -> int:
        """Add pending requests. Returns how many were accepted."""
        ...

    @abstractmethod
    def remove_all_pending(self) -> int:
        """Drop every pending request. Returns how many were removed."""
        ...

    @abstractmethod
    def pending(self) -> list[NotificationRequest]:
        """Pending requests ordered by fire time."""
        ...

    @abstractmethod
    def deliver_due(self, now: datetime) -> list[NotificationRequest]:
        """Remove and return the requests whose fire time has passed."""
        ...
