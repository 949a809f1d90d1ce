"""
SQLite implementation of reminder storage.

Lists a user's reminder history for deduplication and persists
materialized suggestions.
"""

import aiosqlite

from followups.config import get_logger
from followups.core.entities.common import utcnow
from followups.core.entities.reminder import (
    Reminder,
    ReminderPriority,
    ReminderStatus,
    ReminderType,
)
from followups.core.exceptions import DatabaseError
from followups.core.interfaces.storage import IReminderStore
from followups.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from followups.infrastructure.storage.sqlite.rows import (
    format_timestamp,
    new_id,
    parse_timestamp,
)

logger = get_logger(__name__)


class SQLiteReminderStore(IReminderStore):
    """SQLite implementation of reminder storage."""

    async def create(self, reminder: Reminder) -> Reminder:
        """Create a new reminder."""
        reminder_id = reminder.id or new_id()
        reminder.updated_at = utcnow()
        try:
            async with get_transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO reminders (
                        id, user_id, client_id, invoice_id, title, message,
                        due_date, status, priority, reminder_type, ai_suggested,
                        completed_at, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        reminder_id,
                        reminder.user_id,
                        reminder.client_id,
                        reminder.invoice_id,
                        reminder.title,
                        reminder.message,
                        format_timestamp(reminder.due_date),
                        reminder.status.value,
                        reminder.priority.value,
                        reminder.reminder_type.value,
                        1 if reminder.ai_suggested else 0,
                        format_timestamp(reminder.completed_at),
                        format_timestamp(reminder.created_at),
                        format_timestamp(reminder.updated_at),
                    ),
                )
        except aiosqlite.Error as e:
            raise DatabaseError("create_reminder", str(e)) from e

        reminder.id = reminder_id
        logger.info(
            "reminder_created",
            reminder_id=reminder_id,
            reminder_type=reminder.reminder_type.value,
            ai_suggested=reminder.ai_suggested,
        )
        return reminder

    async def get(self, reminder_id: str) -> Reminder | None:
        """Get reminder by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM reminders WHERE id = ?", (reminder_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_entity(row)

    async def list_reminders(self, user_id: str) -> list[Reminder]:
        """List every reminder of a user, newest first."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM reminders
                WHERE user_id = ?
                ORDER BY created_at DESC
                """,
                (user_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    @staticmethod
    def _row_to_entity(row: aiosqlite.Row) -> Reminder:
        """Convert a database row to a Reminder entity."""
        return Reminder(
            id=row["id"],
            user_id=row["user_id"],
            client_id=row["client_id"],
            invoice_id=row["invoice_id"],
            title=row["title"],
            message=row["message"] or "",
            due_date=parse_timestamp(row["due_date"]) or utcnow(),
            status=ReminderStatus(row["status"]),
            priority=ReminderPriority(row["priority"]),
            reminder_type=ReminderType(row["reminder_type"]),
            ai_suggested=bool(row["ai_suggested"]),
            completed_at=parse_timestamp(row["completed_at"]),
            created_at=parse_timestamp(row["created_at"]) or utcnow(),
            updated_at=parse_timestamp(row["updated_at"]) or utcnow(),
        )
