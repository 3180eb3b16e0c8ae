"""SQLite implementation of sales storage."""

from datetime import datetime
from typing import Any

import aiosqlite

from bizdesk.config import get_logger
from bizdesk.core.clock import utc_now
from bizdesk.core.entities.sale import Sale, SaleType
from bizdesk.core.exceptions import SaleNotFoundError
from bizdesk.core.interfaces.sales_store import ISalesStore
from bizdesk.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from bizdesk.infrastructure.storage.sqlite.timestamps import from_db, to_db

logger = get_logger(__name__)


class SQLiteSalesStore(ISalesStore):
    """SQLite implementation of sale persistence."""

    async def create_sale(self, sale: Sale) -> Sale:
        """Record a sale; profit is persisted for reporting queries."""
        sale.created_at = utc_now()
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO sales (
                    tenant_id, sale_type, item_name, product_id, service_id,
                    client_id, quantity, revenue, cost, profit, custom_amount,
                    payment_method, notes, sold_at, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    sale.tenant_id,
                    sale.sale_type.value,
                    sale.item_name,
                    sale.product_id,
                    sale.service_id,
                    sale.client_id,
                    sale.quantity,
                    sale.revenue,
                    sale.cost,
                    sale.profit,
                    sale.custom_amount,
                    sale.payment_method.value,
                    sale.notes,
                    to_db(sale.sold_at),
                    to_db(sale.created_at),
                ),
            )
            sale.id = cursor.lastrowid
            logger.info(
                "sale_created",
                sale_id=sale.id,
                tenant_id=sale.tenant_id,
                revenue=sale.revenue,
            )
            return sale

    async def get_sale(self, sale_id: int, tenant_id: int) -> Sale | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM sales WHERE id = ? AND tenant_id = ?",
                (sale_id, tenant_id),
            )
            row = await cursor.fetchone()
            return self._row_to_entity(row) if row else None

    async def update_sale(self, sale: Sale) -> Sale:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE sales SET
                    sale_type = ?, item_name = ?, product_id = ?, service_id = ?,
                    client_id = ?, quantity = ?, revenue = ?, cost = ?, profit = ?,
                    custom_amount = ?, payment_method = ?, notes = ?, sold_at = ?
                WHERE id = ? AND tenant_id = ?
                """,
                (
                    sale.sale_type.value,
                    sale.item_name,
                    sale.product_id,
                    sale.service_id,
                    sale.client_id,
                    sale.quantity,
                    sale.revenue,
                    sale.cost,
                    sale.profit,
                    sale.custom_amount,
                    sale.payment_method.value,
                    sale.notes,
                    to_db(sale.sold_at),
                    sale.id,
                    sale.tenant_id,
                ),
            )
            if cursor.rowcount == 0:
                raise SaleNotFoundError(sale.id)
            return sale

    async def delete_sale(self, sale_id: int, tenant_id: int) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM sales WHERE id = ? AND tenant_id = ?",
                (sale_id, tenant_id),
            )
            deleted = cursor.rowcount > 0
            if deleted:
                logger.info("sale_deleted", sale_id=sale_id)
            return deleted

    async def list_sales(
        self,
        tenant_id: int,
        sale_type: SaleType | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        search: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Sale]:
        clauses = ["tenant_id = ?"]
        params: list[Any] = [tenant_id]
        if sale_type is not None:
            clauses.append("sale_type = ?")
            params.append(sale_type.value)
        if start is not None:
            clauses.append("sold_at >= ?")
            params.append(to_db(start))
        if end is not None:
            clauses.append("sold_at <= ?")
            params.append(to_db(end))
        if search:
            clauses.append("item_name LIKE ?")
            params.append(f"%{search}%")

        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM sales
                WHERE {" AND ".join(clauses)}
                ORDER BY sold_at DESC
                LIMIT ? OFFSET ?
                """,
                (*params, limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    async def delete_all_sales(self, tenant_id: int) -> int:
        async with get_transaction() as conn:
            cursor = await conn.execute("DELETE FROM sales WHERE tenant_id = ?", (tenant_id,))
            logger.info("sales_deleted", tenant_id=tenant_id, count=cursor.rowcount)
            return cursor.rowcount

    async def sold_quantities(self, tenant_id: int) -> dict[int, int]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT product_id, SUM(quantity) AS quantity FROM sales
                WHERE tenant_id = ? AND sale_type = 'product' AND product_id IS NOT NULL
                GROUP BY product_id
                """,
                (tenant_id,),
            )
            rows = await cursor.fetchall()
            return {row["product_id"]: row["quantity"] for row in rows}

    @staticmethod
    def _row_to_entity(row: aiosqlite.Row) -> Sale:
        return Sale(
            id=row["id"],
            tenant_id=row["tenant_id"],
            sale_type=row["sale_type"],
            item_name=row["item_name"],
            product_id=row["product_id"],
            service_id=row["service_id"],
            client_id=row["client_id"],
            quantity=row["quantity"],
            revenue=row["revenue"],
            cost=row["cost"],
            custom_amount=row["custom_amount"],
            payment_method=row["payment_method"],
            notes=row["notes"] or "",
            sold_at=from_db(row["sold_at"]),
            created_at=from_db(row["created_at"]),
        )
