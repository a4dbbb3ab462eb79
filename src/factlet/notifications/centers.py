"""Notification center implementations."""

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from .base import NotificationCenter, NotificationPayload, NotificationRequest

logger = logging.getLogger(__name__)


def _utc_text(value: datetime) -> str:
    """Fixed-width UTC timestamp so text ordering matches time ordering."""
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


class MemoryNotificationCenter(NotificationCenter):
    """In-process notification center.

    Args:
        authorized: Answer to permission requests.
        max_pending: Platform limit on simultaneously pending requests;
            extra requests are dropped. None means unlimited.
    """

    def __init__(self, authorized: bool = True, max_pending: int | None = None) -> None:
        self.authorized = authorized
        self.max_pending = max_pending
        self._pending: list[NotificationRequest] = []
        self.authorization_requests = 0

    async def request_authorization(self) -> bool:
        self.authorization_requests += 1
        return self.authorized

    async def add(self, requests: list[NotificationRequest]) -> int:
        accepted = 0
        for request in requests:
            if self.max_pending is not None and len(self._pending) >= self.max_pending:
                break
            self._pending.append(request)
            accepted += 1
        return accepted

    def remove_all_pending(self) -> int:
        count = len(self._pending)
        self._pending.clear()
        return count

    def pending(self) -> list[NotificationRequest]:
        return sorted(self._pending, key=lambda r: r.fire_at)

    def deliver_due(self, now: datetime) -> list[NotificationRequest]:
        due = [r for r in self.pending() if r.fire_at <= now]
        self._pending = [r for r in self._pending if r.fire_at > now]
        return due


class SQLiteNotificationCenter(NotificationCenter):
    """Notification center that keeps pending requests in SQLite.

    Pending requests survive between CLI invocations and are visible to
    every surface that opens the same database.
    """

    def __init__(self, db_path: Path, authorized: bool = True) -> None:
        self.db_path = Path(db_path)
        self.authorized = authorized
        self._conn: sqlite3.Connection | None = None

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create the database connection."""
        if self._conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path, timeout=5.0)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def init_db(self) -> None:
        """Create the pending notifications table if it doesn't exist."""
        conn = self._get_connection()
        conn.execute("""
            CREATE TABLE IF NOT EXISTS pending_notifications (
                identifier  TEXT PRIMARY KEY,
                fire_at     TEXT NOT NULL,
                title       TEXT NOT NULL,
                body        TEXT NOT NULL,
                factlet_id  TEXT NOT NULL
            )
        """)
        conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_pending_fire_at ON pending_notifications(fire_at)"
        )
        conn.commit()

    async def request_authorization(self) -> bool:
        return self.authorized

    async def add(self, requests: list[NotificationRequest]) -> int:
        rows = [
            (
                r.identifier,
                _utc_text(r.fire_at),
                r.payload.title,
                r.payload.body,
                r.payload.factlet_id,
            )
            for r in requests
        ]
        try:
            conn = self._get_connection()
            with conn:
                conn.executemany(
                    """
                    INSERT OR REPLACE INTO pending_notifications
                        (identifier, fire_at, title, body, factlet_id)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    rows,
                )
        except sqlite3.Error as e:
            logger.warning("Failed to schedule %d notification(s): %s", len(rows), e)
            return 0
        return len(rows)

    def remove_all_pending(self) -> int:
        try:
            conn = self._get_connection()
            with conn:
                cursor = conn.execute("DELETE FROM pending_notifications")
        except sqlite3.Error as e:
            logger.warning("Failed to clear pending notifications: %s", e)
            return 0
        return cursor.rowcount

    def pending(self) -> list[NotificationRequest]:
        try:
            rows = self._get_connection().execute(
                "SELECT * FROM pending_notifications ORDER BY fire_at"
            ).fetchall()
        except sqlite3.Error as e:
            logger.warning("Cannot read pending notifications: %s", e)
            return []
        return [self._row_to_request(row) for row in rows]

    def deliver_due(self, now: datetime) -> list[NotificationRequest]:
        cutoff = _utc_text(now)
        try:
            conn = self._get_connection()
            with conn:
                rows = conn.execute(
                    "SELECT * FROM pending_notifications WHERE fire_at <= ? ORDER BY fire_at",
                    (cutoff,),
                ).fetchall()
                conn.execute("DELETE FROM pending_notifications WHERE fire_at <= ?", (cutoff,))
        except sqlite3.Error as e:
            logger.warning("Cannot deliver notifications: %s", e)
            return []
        return [self._row_to_request(row) for row in rows]

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _row_to_request(self, row: sqlite3.Row) -> NotificationRequest:
        """Convert a database row to a NotificationRequest."""
        return NotificationRequest(
            identifier=row["identifier"],
            fire_at=datetime.fromisoformat(row["fire_at"]),
            payload=NotificationPayload(
                title=row["title"],
                body=row["body"],
                factlet_id=row["factlet_id"],
            ),
        )
