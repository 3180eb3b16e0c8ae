"""Update Sale Use Case: edit a sale, re-pricing it and moving stock by the difference."""

from collections import defaultdict
from typing import Any

from bizdesk.application.dto.requests import RecordSaleRequest, UpdateSaleRequest
from bizdesk.application.use_cases.record_sale import RecordSaleUseCase
from bizdesk.config import get_logger
from bizdesk.core.entities.sale import Sale, SaleType
from bizdesk.core.exceptions import SaleNotFoundError

logger = get_logger(__name__)

# Sent as null, these mean "leave as is"
_NOT_NULLABLE = ("sale_type", "quantity", "payment_method", "notes", "sold_at")
_RELINK_FIELDS = {"sale_type", "product_id", "service_id"}


def drop_stale_amounts(merged: dict[str, Any], changes: dict[str, Any]) -> None:
    """
    Clear stored amounts the catalog should recompute after an edit.

    Product sales are re-priced when the product or quantity changes; service
    sales when the service or custom amount changes. Amounts sent with the
    edit always win, and unlinked sales keep what they have.
    """
    relinked = bool(_RELINK_FIELDS & changes.keys())
    if merged["sale_type"] == SaleType.PRODUCT:
        catalog_item = merged["product_id"]
        priced_from = catalog_item
        stale = {"revenue", "cost"} if relinked or "quantity" in changes else set()
    else:
        catalog_item = merged["service_id"]
        priced_from = catalog_item if catalog_item is not None else merged["custom_amount"]
        stale = {"revenue"} if relinked or "custom_amount" in changes else set()
        if "sale_type" in changes:
            stale.add("cost")

    if priced_from is None:
        return
    for key in stale - changes.keys():
        merged[key] = None
    if relinked and catalog_item is not None and "item_name" not in changes:
        merged["item_name"] = None


class UpdateSaleUseCase(RecordSaleUseCase):
    """Update a tenant's sale, keeping product stock in step."""

    async def execute(
        self, sale_id: int, tenant_id: int, request: UpdateSaleRequest
    ) -> Sale:
        sales = await self._get_sales_store()
        old = await sales.get_sale(sale_id, tenant_id)
        if old is None:
            raise SaleNotFoundError(sale_id)

        changes = {
            key: value
            for key, value in request.model_dump(exclude_unset=True).items()
            if value is not None or key not in _NOT_NULLABLE
        }
        if not changes:
            return old

        merged = old.model_dump(include=set(RecordSaleRequest.model_fields))
        merged.update(changes)
        drop_stale_amounts(merged, changes)

        sale, product = await self._prepare(tenant_id, RecordSaleRequest(**merged))
        updated = await sales.update_sale(
            sale.model_copy(update={"id": old.id, "created_at": old.created_at})
        )

        # Put back what the old sale took, take what the new one takes
        deltas: dict[int, int] = defaultdict(int)
        if old.sale_type == SaleType.PRODUCT and old.product_id is not None:
            deltas[old.product_id] += old.quantity
        if product is not None:
            deltas[product.id] -= updated.quantity
        for product_id, delta in deltas.items():
            if delta:
                await self._adjust_stock(product_id, tenant_id, delta)

        logger.info(
            "sale_updated",
            sale_id=sale_id,
            tenant_id=tenant_id,
            fields=sorted(changes),
            revenue=updated.revenue,
            profit=updated.profit,
        )
        return updated
