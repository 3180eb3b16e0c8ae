"""Tests for SQLiteSalesStore."""

from datetime import UTC, datetime, timedelta

import pytest

from bizdesk.core.entities.catalog import Product
from bizdesk.core.entities.sale import PaymentMethod, Sale, SaleType
from bizdesk.core.exceptions import SaleNotFoundError
from bizdesk.infrastructure.storage.sqlite.catalog_store import SQLiteCatalogStore
from bizdesk.infrastructure.storage.sqlite.sales_store import SQLiteSalesStore

SOLD = datetime(2024, 3, 10, 14, 30, tzinfo=UTC)


class TestSQLiteSalesStore:
    @pytest.fixture(autouse=True)
    def _setup(self, tenant, other_tenant):
        self.store = SQLiteSalesStore()
        self.tenant_id = tenant.id
        self.other_tenant_id = other_tenant.id

    async def _create(self, item_name="Shea butter", **overrides) -> Sale:
        fields = {
            "tenant_id": self.tenant_id,
            "item_name": item_name,
            "revenue": 60.0,
            "cost": 36.0,
            "sold_at": SOLD,
        }
        fields.update(overrides)
        return await self.store.create_sale(Sale(**fields))

    async def test_create_and_get(self):
        sale = await self._create(payment_method=PaymentMethod.MOMO, quantity=3)

        loaded = await self.store.get_sale(sale.id, self.tenant_id)

        assert loaded.profit == 24.0
        assert loaded.quantity == 3
        assert loaded.payment_method == PaymentMethod.MOMO
        assert loaded.sold_at == SOLD
        assert await self.store.get_sale(sale.id, self.other_tenant_id) is None

    async def test_list_filters(self):
        await self._create("Old sale", sold_at=SOLD - timedelta(days=10))
        await self._create("Braiding", sale_type=SaleType.SERVICE, revenue=150.0, cost=0.0)
        await self._create("Shea butter")

        services = await self.store.list_sales(self.tenant_id, sale_type=SaleType.SERVICE)
        recent = await self.store.list_sales(self.tenant_id, start=SOLD - timedelta(days=1))
        searched = await self.store.list_sales(self.tenant_id, search="butter")

        assert [s.item_name for s in services] == ["Braiding"]
        assert {s.item_name for s in recent} == {"Braiding", "Shea butter"}
        assert [s.item_name for s in searched] == ["Shea butter"]

    async def test_delete(self):
        sale = await self._create()

        assert await self.store.delete_sale(sale.id, self.other_tenant_id) is False
        assert await self.store.delete_sale(sale.id, self.tenant_id) is True
        assert await self.store.get_sale(sale.id, self.tenant_id) is None

    async def test_update(self):
        sale = await self._create(quantity=3)
        changed = sale.model_copy(update={"quantity": 5, "revenue": 100.0, "cost": 60.0})

        await self.store.update_sale(changed)

        loaded = await self.store.get_sale(sale.id, self.tenant_id)
        assert (loaded.quantity, loaded.revenue, loaded.profit) == (5, 100.0, 40.0)
        assert loaded.created_at == sale.created_at

    async def test_update_other_tenant(self):
        sale = await self._create()

        with pytest.raises(SaleNotFoundError):
            await self.store.update_sale(sale.model_copy(update={"tenant_id": self.other_tenant_id}))

    async def test_sold_quantities_and_delete_all(self):
        catalog = SQLiteCatalogStore()
        butter = await catalog.create_product(
            Product(
                tenant_id=self.tenant_id,
                name="Shea butter",
                category="Beauty",
                cost_price=12.0,
                selling_price=20.0,
            )
        )
        await self._create(product_id=butter.id, quantity=2)
        await self._create(product_id=butter.id, quantity=3)
        await self._create("Braiding", sale_type=SaleType.SERVICE, revenue=150.0)
        await self._create(tenant_id=self.other_tenant_id)

        assert await self.store.sold_quantities(self.tenant_id) == {butter.id: 5}
        assert await self.store.delete_all_sales(self.tenant_id) == 3
        assert await self.store.list_sales(self.tenant_id) == []
        assert len(await self.store.list_sales(self.other_tenant_id)) == 1
