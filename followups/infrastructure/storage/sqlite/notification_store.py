"""SQLite implementation of notification storage."""

import aiosqlite

from followups.config import get_logger
from followups.core.entities.common import utcnow
from followups.core.entities.notification import (
    Notification,
    NotificationType,
    RelatedEntityType,
)
from followups.core.exceptions import DatabaseError
from followups.core.interfaces.storage import INotificationStore
from followups.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from followups.infrastructure.storage.sqlite.rows import (
    format_timestamp,
    new_id,
    parse_timestamp,
)

logger = get_logger(__name__)


class SQLiteNotificationStore(INotificationStore):
    """SQLite implementation of notification storage."""

    async def create(self, notification: Notification) -> Notification:
        """Create a new notification."""
        notification_id = notification.id or new_id()
        try:
            async with get_transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO notifications (
                        id, user_id, title, message, type,
                        is_read, related_id, related_type, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        notification_id,
                        notification.user_id,
                        notification.title,
                        notification.message,
                        notification.type.value,
                        1 if notification.is_read else 0,
                        notification.related_id,
                        notification.related_type.value if notification.related_type else None,
                        format_timestamp(notification.created_at),
                    ),
                )
        except aiosqlite.Error as e:
            raise DatabaseError("create_notification", str(e)) from e

        notification.id = notification_id
        logger.info(
            "notification_created",
            notification_id=notification_id,
            type=notification.type.value,
        )
        return notification

    async def list_notifications(self, user_id: str, limit: int = 100) -> list[Notification]:
        """List a user's notifications, newest first."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM notifications
                WHERE user_id = ?
                ORDER BY created_at DESC
                LIMIT ?
                """,
                (user_id, limit),
            )
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    @staticmethod
    def _row_to_entity(row: aiosqlite.Row) -> Notification:
        """Convert a database row to a Notification entity."""
        related_type = row["related_type"]
        return Notification(
            id=row["id"],
            user_id=row["user_id"],
            title=row["title"],
            message=row["message"],
            type=NotificationType(row["type"]),
            is_read=bool(row["is_read"]),
            related_id=row["related_id"],
            related_type=RelatedEntityType(related_type) if related_type else None,
            created_at=parse_timestamp(row["created_at"]) or utcnow(),
        )
