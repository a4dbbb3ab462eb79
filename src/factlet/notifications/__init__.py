"""Local notification scheduling."""

from .base import NotificationCenter, NotificationPayload, NotificationRequest
from .centers import MemoryNotificationCenter, SQLiteNotificationCenter
from .scheduler import NotificationScheduler

__all__ = [
    "MemoryNotificationCenter",
    "NotificationCenter",
    "NotificationPayload",
    "NotificationRequest",
    "NotificationScheduler",
    "SQLiteNotificationCenter",
]
