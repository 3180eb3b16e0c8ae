"""
SQLite implementation of catalog storage.

Products carry stock levels; services are priced but unstocked.
"""

from typing import Any

import aiosqlite

from bizdesk.config import get_logger
from bizdesk.core.clock import utc_now
from bizdesk.core.entities.catalog import Product, Service
from bizdesk.core.interfaces.catalog_store import ICatalogStore
from bizdesk.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from bizdesk.infrastructure.storage.sqlite.timestamps import from_db, to_db

logger = get_logger(__name__)


class SQLiteCatalogStore(ICatalogStore):
    """SQLite implementation of product and service storage."""

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    async def create_product(self, product: Product) -> Product:
        now = utc_now()
        product.created_at = now
        product.updated_at = now
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO products (
                    tenant_id, name, category, product_type, cost_price,
                    selling_price, stock, min_stock, is_package,
                    package_quantity, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    product.tenant_id,
                    product.name,
                    product.category,
                    product.product_type,
                    product.cost_price,
                    product.selling_price,
                    product.stock,
                    product.min_stock,
                    1 if product.is_package else 0,
                    product.package_quantity,
                    to_db(product.created_at),
                    to_db(product.updated_at),
                ),
            )
            product.id = cursor.lastrowid
            logger.info("product_created", product_id=product.id, name=product.name)
            return product

    async def get_product(self, product_id: int, tenant_id: int) -> Product | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM products WHERE id = ? AND tenant_id = ?",
                (product_id, tenant_id),
            )
            row = await cursor.fetchone()
            return self._row_to_product(row) if row else None

    async def find_duplicate_product(
        self,
        tenant_id: int,
        name: str,
        category: str,
        product_type: str | None,
        exclude_id: int | None = None,
    ) -> Product | None:
        """Find a product with the same case-insensitive name, category and type."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM products
                WHERE tenant_id = ?
                  AND LOWER(name) = LOWER(?)
                  AND category = ?
                  AND COALESCE(product_type, '') = COALESCE(?, '')
                  AND id != COALESCE(?, -1)
                LIMIT 1
                """,
                (tenant_id, name.strip(), category, product_type, exclude_id),
            )
            row = await cursor.fetchone()
            return self._row_to_product(row) if row else None

    async def update_product(self, product: Product) -> Product:
        product.updated_at = utc_now()
        async with get_transaction() as conn:
            await conn.execute(
                """
                UPDATE products SET
                    name = ?, category = ?, product_type = ?, cost_price = ?,
                    selling_price = ?, stock = ?, min_stock = ?, is_package = ?,
                    package_quantity = ?, updated_at = ?
                WHERE id = ? AND tenant_id = ?
                """,
                (
                    product.name,
                    product.category,
                    product.product_type,
                    product.cost_price,
                    product.selling_price,
                    product.stock,
                    product.min_stock,
                    1 if product.is_package else 0,
                    product.package_quantity,
                    to_db(product.updated_at),
                    product.id,
                    product.tenant_id,
                ),
            )
            logger.info("product_updated", product_id=product.id)
            return product

    async def delete_product(self, product_id: int, tenant_id: int) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM products WHERE id = ? AND tenant_id = ?",
                (product_id, tenant_id),
            )
            deleted = cursor.rowcount > 0
            if deleted:
                logger.info("product_deleted", product_id=product_id)
            return deleted

    async def list_products(
        self, tenant_id: int, category: str | None = None
    ) -> list[Product]:
        clauses = ["tenant_id = ?"]
        params: list[Any] = [tenant_id]
        if category:
            clauses.append("category = ?")
            params.append(category)
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM products WHERE {' AND '.join(clauses)} ORDER BY name ASC",
                params,
            )
            rows = await cursor.fetchall()
            return [self._row_to_product(row) for row in rows]

    async def list_low_stock(self, tenant_id: int) -> list[Product]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM products
                WHERE tenant_id = ? AND stock <= min_stock
                ORDER BY stock ASC, name ASC
                """,
                (tenant_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_product(row) for row in rows]

    async def adjust_stock(
        self, product_id: int, tenant_id: int, delta: int
    ) -> Product | None:
        """Add ``delta`` to stock in one statement, clamped at zero."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE products
                SET stock = MAX(stock + ?, 0), updated_at = ?
                WHERE id = ? AND tenant_id = ?
                """,
                (delta, to_db(utc_now()), product_id, tenant_id),
            )
            if cursor.rowcount == 0:
                return None
            cursor = await conn.execute(
                "SELECT * FROM products WHERE id = ?", (product_id,)
            )
            row = await cursor.fetchone()

        product = self._row_to_product(row)
        logger.info(
            "product_stock_adjusted",
            product_id=product_id,
            delta=delta,
            stock=product.stock,
        )
        return product

    # ------------------------------------------------------------------
    # Services
    # ------------------------------------------------------------------

    async def create_service(self, service: Service) -> Service:
        now = utc_now()
        service.created_at = now
        service.updated_at = now
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO services (
                    tenant_id, name, category, default_price, is_active,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    service.tenant_id,
                    service.name,
                    service.category,
                    service.default_price,
                    1 if service.is_active else 0,
                    to_db(service.created_at),
                    to_db(service.updated_at),
                ),
            )
            service.id = cursor.lastrowid
            logger.info("service_created", service_id=service.id, name=service.name)
            return service

    async def get_service(self, service_id: int, tenant_id: int) -> Service | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM services WHERE id = ? AND tenant_id = ?",
                (service_id, tenant_id),
            )
            row = await cursor.fetchone()
            return self._row_to_service(row) if row else None

    async def update_service(self, service: Service) -> Service:
        service.updated_at = utc_now()
        async with get_transaction() as conn:
            await conn.execute(
                """
                UPDATE services SET
                    name = ?, category = ?, default_price = ?, is_active = ?,
                    updated_at = ?
                WHERE id = ? AND tenant_id = ?
                """,
                (
                    service.name,
                    service.category,
                    service.default_price,
                    1 if service.is_active else 0,
                    to_db(service.updated_at),
                    service.id,
                    service.tenant_id,
                ),
            )
            logger.info("service_updated", service_id=service.id)
            return service

    async def delete_service(self, service_id: int, tenant_id: int) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM services WHERE id = ? AND tenant_id = ?",
                (service_id, tenant_id),
            )
            deleted = cursor.rowcount > 0
            if deleted:
                logger.info("service_deleted", service_id=service_id)
            return deleted

    async def list_services(
        self, tenant_id: int, active_only: bool = False
    ) -> list[Service]:
        query = "SELECT * FROM services WHERE tenant_id = ?"
        if active_only:
            query += " AND is_active = 1"
        async with get_connection() as conn:
            cursor = await conn.execute(query + " ORDER BY name ASC", (tenant_id,))
            rows = await cursor.fetchall()
            return [self._row_to_service(row) for row in rows]

    @staticmethod
    def _row_to_product(row: aiosqlite.Row) -> Product:
        return Product(
            id=row["id"],
            tenant_id=row["tenant_id"],
            name=row["name"],
            category=row["category"],
            product_type=row["product_type"],
            cost_price=row["cost_price"],
            selling_price=row["selling_price"],
            stock=row["stock"],
            min_stock=row["min_stock"],
            is_package=bool(row["is_package"]),
            package_quantity=row["package_quantity"],
            created_at=from_db(row["created_at"]),
            updated_at=from_db(row["updated_at"]),
        )

    @staticmethod
    def _row_to_service(row: aiosqlite.Row) -> Service:
        return Service(
            id=row["id"],
            tenant_id=row["tenant_id"],
            name=row["name"],
            category=row["category"],
            default_price=row["default_price"],
            is_active=bool(row["is_active"]),
            created_at=from_db(row["created_at"]),
            updated_at=from_db(row["updated_at"]),
        )
