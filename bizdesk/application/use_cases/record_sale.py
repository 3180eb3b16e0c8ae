"""Record Sale Use Case: price a product or service sale and adjust stock."""

from dataclasses import dataclass

from bizdesk.application.dto.requests import RecordSaleRequest
from bizdesk.config import get_logger
from bizdesk.core.entities.catalog import Product, Service
from bizdesk.core.entities.sale import Sale, SaleType
from bizdesk.core.exceptions import (
    ClientNotFoundError,
    ProductNotFoundError,
    ServiceNotFoundError,
    ValidationError,
)
from bizdesk.core.interfaces.catalog_store import ICatalogStore
from bizdesk.core.interfaces.sales_store import ISalesStore
from bizdesk.core.interfaces.storage import IClientStore

logger = get_logger(__name__)


@dataclass
class SalePricing:
    """Resolved name and amounts for a sale."""

    item_name: str
    revenue: float
    cost: float


def price_product_sale(request: RecordSaleRequest, product: Product | None) -> SalePricing:
    """Fill item name, revenue and cost from the linked product where not given."""
    item_name = request.item_name or (product.name if product else None)
    if not item_name:
        raise ValidationError("item_name", "required when no product is linked")

    revenue = request.revenue
    if revenue is None:
        if product is None:
            raise ValidationError("revenue", "required when no product is linked")
        revenue = product.selling_price * request.quantity

    cost = request.cost
    if cost is None:
        cost = product.cost_price * request.quantity if product else 0.0

    return SalePricing(item_name=item_name, revenue=revenue, cost=cost)


def price_service_sale(request: RecordSaleRequest, service: Service | None) -> SalePricing:
    """Revenue is the explicit amount, then the custom amount, then the default price."""
    item_name = request.item_name or (service.name if service else None)
    if not item_name:
        raise ValidationError("item_name", "required when no service is linked")

    for candidate in (
        request.revenue,
        request.custom_amount,
        service.default_price if service else None,
    ):
        if candidate is not None:
            revenue = candidate
            break
    else:
        raise ValidationError(
            "revenue", "no revenue, custom amount or service default price"
        )

    return SalePricing(item_name=item_name, revenue=revenue, cost=request.cost or 0.0)


class RecordSaleUseCase:
    """Record a sale for a tenant."""

    def __init__(
        self,
        catalog_store: ICatalogStore | None = None,
        sales_store: ISalesStore | None = None,
        client_store: IClientStore | None = None,
    ):
        self._catalog_store = catalog_store
        self._sales_store = sales_store
        self._client_store = client_store

    async def _get_catalog_store(self) -> ICatalogStore:
        if self._catalog_store is None:
            from bizdesk.infrastructure.storage.sqlite import get_catalog_store

            self._catalog_store = await get_catalog_store()
        return self._catalog_store

    async def _get_sales_store(self) -> ISalesStore:
        if self._sales_store is None:
            from bizdesk.infrastructure.storage.sqlite import get_sales_store

            self._sales_store = await get_sales_store()
        return self._sales_store

    async def _get_client_store(self) -> IClientStore:
        if self._client_store is None:
            from bizdesk.infrastructure.storage.sqlite import get_client_store

            self._client_store = await get_client_store()
        return self._client_store

    async def execute(self, tenant_id: int, request: RecordSaleRequest) -> Sale:
        """Execute record sale use case."""
        logger.info(
            "record_sale_started",
            tenant_id=tenant_id,
            sale_type=request.sale_type.value,
            quantity=request.quantity,
        )
        sale, product = await self._prepare(tenant_id, request)
        return await self._persist(sale, product)

    async def execute_many(
        self, tenant_id: int, requests: list[RecordSaleRequest]
    ) -> list[Sale]:
        """
        Record a batch of sales.

        Every sale is validated and priced before any is written, so a bad
        entry rejects the whole batch.
        """
        logger.info("record_sales_bulk_started", tenant_id=tenant_id, count=len(requests))
        prepared = [await self._prepare(tenant_id, request) for request in requests]

        sales = [await self._persist(sale, product) for sale, product in prepared]
        logger.info(
            "record_sales_bulk_complete",
            tenant_id=tenant_id,
            count=len(sales),
            revenue=sum(s.revenue for s in sales),
        )
        return sales

    async def _prepare(
        self, tenant_id: int, request: RecordSaleRequest
    ) -> tuple[Sale, Product | None]:
        """Check linked records belong to the tenant and price the sale."""
        catalog = await self._get_catalog_store()

        if request.client_id is not None:
            client = await (await self._get_client_store()).get(
                request.client_id, tenant_id
            )
            if client is None:
                raise ClientNotFoundError(request.client_id)

        product = None
        service = None
        if request.sale_type == SaleType.PRODUCT:
            if request.product_id is not None:
                product = await catalog.get_product(request.product_id, tenant_id)
                if product is None:
                    raise ProductNotFoundError(request.product_id)
            pricing = price_product_sale(request, product)
        else:
            if request.service_id is not None:
                service = await catalog.get_service(request.service_id, tenant_id)
                if service is None:
                    raise ServiceNotFoundError(request.service_id)
            pricing = price_service_sale(request, service)

        fields = request.model_dump(
            exclude={"item_name", "revenue", "cost", "sold_at"}, exclude_none=True
        )
        if request.sold_at is not None:
            fields["sold_at"] = request.sold_at
        if request.sale_type == SaleType.PRODUCT:
            fields.pop("service_id", None)
        else:
            fields.pop("product_id", None)

        sale = Sale(
            tenant_id=tenant_id,
            item_name=pricing.item_name,
            revenue=pricing.revenue,
            cost=pricing.cost,
            **fields,
        )
        return sale, product

    async def _persist(self, sale: Sale, product: Product | None) -> Sale:
        """Save the sale, then take its quantity out of stock."""
        sale = await (await self._get_sales_store()).create_sale(sale)

        if product is not None:
            await self._adjust_stock(product.id, sale.tenant_id, -sale.quantity)

        logger.info(
            "record_sale_complete",
            sale_id=sale.id,
            revenue=sale.revenue,
            profit=sale.profit,
        )
        return sale

    async def _adjust_stock(self, product_id: int, tenant_id: int, delta: int) -> None:
        catalog = await self._get_catalog_store()
        updated = await catalog.adjust_stock(product_id, tenant_id, delta)
        if updated is None:
            logger.warning("stock_adjust_skipped", product_id=product_id, delta=delta)
        elif updated.is_low_stock:
            logger.warning(
                "product_low_stock",
                product_id=product_id,
                stock=updated.stock,
                min_stock=updated.min_stock,
            )
