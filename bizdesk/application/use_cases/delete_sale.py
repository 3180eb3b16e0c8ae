"""Delete Sale Use Case: remove a sale and put product stock back."""

from bizdesk.config import get_logger
from bizdesk.core.entities.sale import SaleType
from bizdesk.core.exceptions import SaleNotFoundError
from bizdesk.core.interfaces.catalog_store import ICatalogStore
from bizdesk.core.interfaces.sales_store import ISalesStore

logger = get_logger(__name__)


class DeleteSaleUseCase:
    """Delete a tenant's sale, restoring stock for product sales."""

    def __init__(
        self,
        catalog_store: ICatalogStore | None = None,
        sales_store: ISalesStore | None = None,
    ):
        self._catalog_store = catalog_store
        self._sales_store = sales_store

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

    async def execute(self, sale_id: int, tenant_id: int) -> None:
        sales = await self._get_sales_store()
        sale = await sales.get_sale(sale_id, tenant_id)
        if sale is None:
            raise SaleNotFoundError(sale_id)

        await sales.delete_sale(sale_id, tenant_id)

        if sale.sale_type == SaleType.PRODUCT and sale.product_id is not None:
            catalog = await self._get_catalog_store()
            restored = await catalog.adjust_stock(sale.product_id, tenant_id, sale.quantity)
            if restored is None:
                # Product was deleted after the sale
                logger.warning("stock_restore_skipped", sale_id=sale_id, product_id=sale.product_id)

        logger.info("sale_deleted", sale_id=sale_id, tenant_id=tenant_id)


class DeleteAllSalesUseCase(DeleteSaleUseCase):
    """Delete every sale a tenant has, restoring product stock in one pass."""

    async def execute(self, tenant_id: int) -> int:
        sales = await self._get_sales_store()
        quantities = await sales.sold_quantities(tenant_id)
        deleted = await sales.delete_all_sales(tenant_id)

        catalog = await self._get_catalog_store()
        for product_id, quantity in quantities.items():
            if await catalog.adjust_stock(product_id, tenant_id, quantity) is None:
                logger.warning("stock_restore_skipped", product_id=product_id)

        logger.info(
            "sales_cleared",
            tenant_id=tenant_id,
            deleted=deleted,
            products_restocked=len(quantities),
        )
        return deleted
