"""SQLite implementation of client storage."""

from typing import Any

import aiosqlite

from bizdesk.config import get_logger
from bizdesk.core.clock import utc_now
from bizdesk.core.entities.client import Client, ClientType
from bizdesk.core.interfaces.storage import IClientStore
from bizdesk.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from bizdesk.infrastructure.storage.sqlite.timestamps import from_db, to_db

logger = get_logger(__name__)


class SQLiteClientStore(IClientStore):
    """SQLite implementation of client storage."""

    async def create(self, client: Client) -> Client:
        """Create a new client."""
        now = utc_now()
        client.created_at = now
        client.updated_at = now
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO clients (
                    tenant_id, name, email, phone, business_type,
                    client_type, notes, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    client.tenant_id,
                    client.name,
                    client.email,
                    client.phone,
                    client.business_type,
                    client.client_type.value,
                    client.notes,
                    to_db(client.created_at),
                    to_db(client.updated_at),
                ),
            )
            client.id = cursor.lastrowid
            logger.info("client_created", client_id=client.id, tenant_id=client.tenant_id)
            return client

    async def get(self, client_id: int, tenant_id: int | None = None) -> Client | None:
        """Get client by ID, scoped to a tenant when one is given."""
        async with get_connection() as conn:
            if tenant_id is None:
                cursor = await conn.execute(
                    "SELECT * FROM clients WHERE id = ?", (client_id,)
                )
            else:
                cursor = await conn.execute(
                    "SELECT * FROM clients WHERE id = ? AND tenant_id = ?",
                    (client_id, tenant_id),
                )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_entity(row)

    async def update(self, client: Client) -> Client:
        """Update an existing client."""
        client.updated_at = utc_now()
        async with get_transaction() as conn:
            await conn.execute(
                """
                UPDATE clients SET
                    name = ?, email = ?, phone = ?, business_type = ?,
                    client_type = ?, notes = ?, updated_at = ?
                WHERE id = ? AND tenant_id = ?
                """,
                (
                    client.name,
                    client.email,
                    client.phone,
                    client.business_type,
                    client.client_type.value,
                    client.notes,
                    to_db(client.updated_at),
                    client.id,
                    client.tenant_id,
                ),
            )
            logger.info("client_updated", client_id=client.id)
            return client

    async def delete(self, client_id: int, tenant_id: int) -> bool:
        """Delete a client owned by the tenant."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM clients WHERE id = ? AND tenant_id = ?",
                (client_id, tenant_id),
            )
            deleted = cursor.rowcount > 0
            if deleted:
                logger.info("client_deleted", client_id=client_id)
            return deleted

    async def list_clients(
        self,
        tenant_id: int,
        client_type: ClientType | None = None,
        search: str | None = None,
    ) -> list[Client]:
        """List a tenant's clients, optionally filtered by type or name/email text."""
        clauses = ["tenant_id = ?"]
        params: list[Any] = [tenant_id]
        if client_type is not None:
            clauses.append("client_type = ?")
            params.append(client_type.value)
        if search:
            clauses.append("(name LIKE ? OR email LIKE ?)")
            params.extend([f"%{search}%", f"%{search.lower()}%"])

        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM clients WHERE {' AND '.join(clauses)} ORDER BY name ASC",
                params,
            )
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    @staticmethod
    def _row_to_entity(row: aiosqlite.Row) -> Client:
        return Client(
            id=row["id"],
            tenant_id=row["tenant_id"],
            name=row["name"],
            email=row["email"],
            phone=row["phone"] or "",
            business_type=row["business_type"],
            client_type=row["client_type"],
            notes=row["notes"] or "",
            created_at=from_db(row["created_at"]),
            updated_at=from_db(row["updated_at"]),
        )
