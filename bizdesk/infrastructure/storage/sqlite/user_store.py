"""SQLite implementation of user (tenant) storage."""

import aiosqlite

from bizdesk.config import get_logger
from bizdesk.core.clock import utc_now
from bizdesk.core.entities.user import User, normalize_email
from bizdesk.core.exceptions import DuplicateUserError, UserNotFoundError
from bizdesk.core.interfaces.storage import IUserStore
from bizdesk.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from bizdesk.infrastructure.storage.sqlite.timestamps import from_db, to_db

logger = get_logger(__name__)


class SQLiteUserStore(IUserStore):
    """SQLite implementation of user storage."""

    async def create(self, user: User) -> User:
        """Create a new user; emails are unique."""
        now = utc_now()
        user.created_at = now
        user.updated_at = now
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO users (
                        name, email, phone, business_name, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        user.name,
                        user.email,
                        user.phone,
                        user.business_name,
                        to_db(user.created_at),
                        to_db(user.updated_at),
                    ),
                )
                user.id = cursor.lastrowid
        except aiosqlite.IntegrityError as e:
            raise DuplicateUserError(user.email) from e

        logger.info("user_created", user_id=user.id)
        return user

    async def get(self, user_id: int) -> User | None:
        """Get user by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM users WHERE id = ?", (user_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_entity(row)

    async def get_by_email(self, email: str) -> User | None:
        """Get user by email."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM users WHERE email = ?", (normalize_email(email),)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_entity(row)

    async def update(self, user: User) -> User:
        """Update an existing user."""
        user.updated_at = utc_now()
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    """
                    UPDATE users SET
                        name = ?, email = ?, phone = ?, business_name = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        user.name,
                        user.email,
                        user.phone,
                        user.business_name,
                        to_db(user.updated_at),
                        user.id,
                    ),
                )
                if cursor.rowcount == 0:
                    raise UserNotFoundError(user.id)
        except aiosqlite.IntegrityError as e:
            raise DuplicateUserError(user.email) from e

        logger.info("user_updated", user_id=user.id)
        return user

    async def delete(self, user_id: int) -> bool:
        """Delete a user; clients, catalog, sales and reminders cascade."""
        async with get_transaction() as conn:
            cursor = await conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
            deleted = cursor.rowcount > 0
        if deleted:
            logger.info("user_deleted", user_id=user_id)
        return deleted

    @staticmethod
    def _row_to_entity(row: aiosqlite.Row) -> User:
        return User(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            phone=row["phone"] or "",
            business_name=row["business_name"],
            created_at=from_db(row["created_at"]),
            updated_at=from_db(row["updated_at"]),
        )
