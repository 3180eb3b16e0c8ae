"""
SQLite implementation of reminder storage.

Handles CRUD, the cross-tenant pending sweep query, and partial updates.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Any

import aiosqlite

from bizdesk.config import get_logger
from bizdesk.core.clock import utc_now
from bizdesk.core.entities.reminder import Reminder, ReminderStatus
from bizdesk.core.exceptions import DatabaseError, ReminderNotFoundError
from bizdesk.core.interfaces.storage import IReminderStore
from bizdesk.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from bizdesk.infrastructure.storage.sqlite.timestamps import from_db, to_db

logger = get_logger(__name__)

# Columns a partial update may touch; id, tenant_id and created_at are immutable
UPDATABLE_COLUMNS = frozenset({
    "title",
    "description",
    "client_id",
    "due_date",
    "frequency",
    "amount",
    "status",
    "notify_user",
    "notify_client",
    "user_notification_message",
    "client_notification_message",
    "advance_notification_days",
    "repeat_until",
    "last_notified",
    "next_due_date",
})


def _to_column(value: Any) -> Any:
    """Encode a Python value for a reminders column."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, datetime):
        return to_db(value)
    return value


class SQLiteReminderStore(IReminderStore):
    """SQLite implementation of reminder storage."""

    async def find_pending(self) -> list[Reminder]:
        """Get every pending reminder across all tenants."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM reminders WHERE status = ? ORDER BY due_date ASC",
                (ReminderStatus.PENDING.value,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    async def get(self, reminder_id: int, tenant_id: int) -> Reminder | None:
        """Get reminder by ID, scoped to a tenant."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM reminders WHERE id = ? AND tenant_id = ?",
                (reminder_id, tenant_id),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_entity(row)

    async def create(self, reminder: Reminder) -> Reminder:
        """Create a new reminder."""
        now = utc_now()
        reminder.created_at = now
        reminder.updated_at = now
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO reminders (
                        tenant_id, title, description, client_id, due_date,
                        frequency, amount, status, notify_user, notify_client,
                        user_notification_message, client_notification_message,
                        advance_notification_days, repeat_until, last_notified,
                        next_due_date, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        reminder.tenant_id,
                        reminder.title,
                        reminder.description,
                        reminder.client_id,
                        to_db(reminder.due_date),
                        reminder.frequency.value,
                        reminder.amount,
                        reminder.status.value,
                        1 if reminder.notify_user else 0,
                        1 if reminder.notify_client else 0,
                        reminder.user_notification_message,
                        reminder.client_notification_message,
                        reminder.advance_notification_days,
                        to_db(reminder.repeat_until),
                        to_db(reminder.last_notified),
                        to_db(reminder.next_due_date),
                        to_db(reminder.created_at),
                        to_db(reminder.updated_at),
                    ),
                )
                reminder.id = cursor.lastrowid
        except aiosqlite.Error as e:
            raise DatabaseError("create_reminder", str(e)) from e

        logger.info(
            "reminder_created",
            reminder_id=reminder.id,
            tenant_id=reminder.tenant_id,
            title=reminder.title,
        )
        return reminder

    async def update(self, reminder_id: int, fields: dict[str, Any]) -> Reminder:
        """Apply a partial update and return the stored reminder."""
        unknown = set(fields) - UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Cannot update reminder columns: {sorted(unknown)}")

        columns = sorted(fields)
        assignments = ", ".join(f"{column} = ?" for column in columns + ["updated_at"])
        params = [_to_column(fields[column]) for column in columns]
        params += [to_db(utc_now()), reminder_id]

        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    f"UPDATE reminders SET {assignments} WHERE id = ?",
                    params,
                )
                if cursor.rowcount == 0:
                    raise ReminderNotFoundError(reminder_id)

                cursor = await conn.execute(
                    "SELECT * FROM reminders WHERE id = ?", (reminder_id,)
                )
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise DatabaseError("update_reminder", str(e)) from e

        logger.debug("reminder_updated", reminder_id=reminder_id, fields=columns)
        return self._row_to_entity(row)

    async def delete(self, reminder_id: int, tenant_id: int) -> bool:
        """Delete a reminder owned by the tenant."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM reminders WHERE id = ? AND tenant_id = ?",
                (reminder_id, tenant_id),
            )
            deleted = cursor.rowcount > 0
            if deleted:
                logger.info("reminder_deleted", reminder_id=reminder_id)
            return deleted

    async def list_reminders(
        self,
        tenant_id: int,
        status: ReminderStatus | None = None,
        client_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Reminder]:
        """List a tenant's reminders with optional filters."""
        clauses = ["tenant_id = ?"]
        params: list[Any] = [tenant_id]
        if status is not None:
            clauses.append("status = ?")
            params.append(status.value)
        if client_id is not None:
            clauses.append("client_id = ?")
            params.append(client_id)

        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM reminders
                WHERE {" AND ".join(clauses)}
                ORDER BY due_date ASC
                LIMIT ? OFFSET ?
                """,
                (*params, limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    async def list_upcoming(
        self,
        tenant_id: int,
        now: datetime,
        within_days: int = 7,
        limit: int = 10,
    ) -> list[Reminder]:
        """List pending reminders due between now and now + within_days."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM reminders
                WHERE tenant_id = ?
                  AND status = ?
                  AND due_date >= ?
                  AND due_date <= ?
                ORDER BY due_date ASC
                LIMIT ?
                """,
                (
                    tenant_id,
                    ReminderStatus.PENDING.value,
                    to_db(now),
                    to_db(now + timedelta(days=within_days)),
                    limit,
                ),
            )
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    @staticmethod
    def _row_to_entity(row: aiosqlite.Row) -> Reminder:
        """Convert a database row to a Reminder entity."""
        return Reminder(
            id=row["id"],
            tenant_id=row["tenant_id"],
            title=row["title"],
            description=row["description"] or "",
            client_id=row["client_id"],
            due_date=from_db(row["due_date"]),
            frequency=row["frequency"],
            amount=row["amount"],
            status=row["status"],
            notify_user=bool(row["notify_user"]),
            notify_client=bool(row["notify_client"]),
            user_notification_message=row["user_notification_message"],
            client_notification_message=row["client_notification_message"],
            advance_notification_days=row["advance_notification_days"],
            repeat_until=from_db(row["repeat_until"]),
            last_notified=from_db(row["last_notified"]),
            next_due_date=from_db(row["next_due_date"]),
            created_at=from_db(row["created_at"]),
            updated_at=from_db(row["updated_at"]),
        )
