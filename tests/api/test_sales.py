"""API tests for sales endpoints."""

from datetime import UTC, datetime

import pytest
from httpx import AsyncClient

from bizdesk.core.entities.catalog import Product
from bizdesk.core.entities.sale import Sale, SaleType

SOLD = datetime(2024, 3, 10, 14, 30, tzinfo=UTC)


@pytest.fixture
def product(catalog_store):
    product = Product(
        id=4,
        tenant_id=1,
        name="Shea butter",
        category="Beauty",
        cost_price=12.0,
        selling_price=20.0,
        stock=10,
    )
    catalog_store.get_product.return_value = product
    catalog_store.adjust_stock.side_effect = lambda pid, tid, delta: product.model_copy(
        update={"stock": product.stock + delta}
    )
    return product


class TestSalesAPI:
    async def test_record_product_sale(self, api_client: AsyncClient, sales_store, catalog_store, product):
        sales_store.create_sale.side_effect = lambda s: s.model_copy(update={"id": 21})

        response = await api_client.post("/api/sales", json={"product_id": 4, "quantity": 2})

        assert response.status_code == 201
        data = response.json()
        assert data["item_name"] == "Shea butter"
        assert data["revenue"] == 40.0
        assert data["profit"] == 16.0
        catalog_store.adjust_stock.assert_awaited_once_with(4, 1, -2)

    async def test_unlinked_sale_needs_revenue(self, api_client: AsyncClient):
        response = await api_client.post("/api/sales", json={"item_name": "Soap"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_list_totals(self, api_client: AsyncClient, sales_store):
        sales_store.list_sales.return_value = [
            Sale(id=1, tenant_id=1, item_name="Shea butter", revenue=40.0, cost=24.0, sold_at=SOLD),
            Sale(
                id=2,
                tenant_id=1,
                sale_type=SaleType.SERVICE,
                item_name="Braiding",
                revenue=150.0,
                sold_at=SOLD,
            ),
        ]

        data = (await api_client.get("/api/sales", params={"sale_type": "service"})).json()

        assert data["total"] == 2
        assert data["total_revenue"] == 190.0
        assert data["total_profit"] == 166.0
        assert sales_store.list_sales.await_args.kwargs["sale_type"] == SaleType.SERVICE

    async def test_delete_restores_stock(self, api_client: AsyncClient, sales_store, catalog_store, product):
        sales_store.get_sale.return_value = Sale(
            id=21, tenant_id=1, item_name="Shea butter", product_id=4, quantity=2, revenue=40.0
        )

        response = await api_client.delete("/api/sales/21")

        assert response.status_code == 204
        catalog_store.adjust_stock.assert_awaited_once_with(4, 1, 2)

    async def test_get_missing(self, api_client: AsyncClient, sales_store):
        sales_store.get_sale.return_value = None
        response = await api_client.get("/api/sales/21")
        assert response.status_code == 404

    async def test_record_bulk(self, api_client: AsyncClient, sales_store, catalog_store, product):
        sales_store.create_sale.side_effect = lambda s: s.model_copy(update={"id": 21})

        response = await api_client.post(
            "/api/sales/bulk",
            json={"sales": [{"product_id": 4}, {"product_id": 4, "quantity": 3}]},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["total"] == 2
        assert data["total_revenue"] == 80.0
        assert catalog_store.adjust_stock.await_count == 2

    async def test_record_bulk_rejects_empty(self, api_client: AsyncClient):
        response = await api_client.post("/api/sales/bulk", json={"sales": []})
        assert response.status_code == 422

    async def test_update_reprices(self, api_client: AsyncClient, sales_store, catalog_store, product):
        sales_store.get_sale.return_value = Sale(
            id=21, tenant_id=1, item_name="Shea butter", product_id=4, quantity=2, revenue=40.0, cost=24.0
        )
        sales_store.update_sale.side_effect = lambda s: s

        response = await api_client.put("/api/sales/21", json={"quantity": 5})

        assert response.status_code == 200
        assert response.json()["revenue"] == 100.0
        assert response.json()["profit"] == 40.0
        catalog_store.adjust_stock.assert_awaited_once_with(4, 1, -3)

    async def test_update_missing(self, api_client: AsyncClient, sales_store):
        sales_store.get_sale.return_value = None
        response = await api_client.put("/api/sales/21", json={"notes": "x"})
        assert response.status_code == 404

    async def test_delete_all(self, api_client: AsyncClient, sales_store, catalog_store, product):
        sales_store.sold_quantities.return_value = {4: 2}
        sales_store.delete_all_sales.return_value = 3

        response = await api_client.delete("/api/sales/all")

        assert response.status_code == 200
        assert response.json() == {"deleted": 3}
        catalog_store.adjust_stock.assert_awaited_once_with(4, 1, 2)
        sales_store.delete_sale.assert_not_awaited()
