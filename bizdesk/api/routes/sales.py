"""
Sales recording endpoints.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status

from bizdesk.api.dependencies import (
    get_current_user,
    get_delete_all_sales_use_case,
    get_delete_sale_use_case,
    get_record_sale_use_case,
    get_sale_store,
    get_update_sale_use_case,
)
from bizdesk.application.dto.requests import (
    RecordSaleRequest,
    RecordSalesBulkRequest,
    UpdateSaleRequest,
)
from bizdesk.application.dto.responses import (
    ErrorResponse,
    SaleListResponse,
    SaleResponse,
    SalesDeletedResponse,
)
from bizdesk.application.use_cases import (
    DeleteAllSalesUseCase,
    DeleteSaleUseCase,
    RecordSaleUseCase,
    UpdateSaleUseCase,
)
from bizdesk.core.entities.sale import Sale, SaleType
from bizdesk.core.entities.user import User
from bizdesk.core.exceptions import SaleNotFoundError
from bizdesk.core.interfaces import ISalesStore

router = APIRouter(prefix="/api/sales", tags=["sales"])


def _entity_to_response(sale: Sale) -> SaleResponse:
    """Convert entity to response DTO."""
    return SaleResponse.model_validate(sale)


def _list_response(sales: list[Sale]) -> SaleListResponse:
    return SaleListResponse(
        sales=[_entity_to_response(s) for s in sales],
        total=len(sales),
        total_revenue=sum(s.revenue for s in sales),
        total_profit=sum(s.profit for s in sales),
    )


@router.post(
    "",
    response_model=SaleResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def record_sale(
    request: RecordSaleRequest,
    user: User = Depends(get_current_user),
    use_case: RecordSaleUseCase = Depends(get_record_sale_use_case),
) -> SaleResponse:
    """Record a product or service sale."""
    sale = await use_case.execute(user.id, request)
    return _entity_to_response(sale)


@router.post(
    "/bulk",
    response_model=SaleListResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def record_sales_bulk(
    request: RecordSalesBulkRequest,
    user: User = Depends(get_current_user),
    use_case: RecordSaleUseCase = Depends(get_record_sale_use_case),
) -> SaleListResponse:
    """Record several sales; nothing is saved if any entry is invalid."""
    sales = await use_case.execute_many(user.id, request.sales)
    return _list_response(sales)


@router.get("", response_model=SaleListResponse)
async def list_sales(
    sale_type: SaleType | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    search: str | None = None,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(get_current_user),
    store: ISalesStore = Depends(get_sale_store),
) -> SaleListResponse:
    """List sales, newest first, with revenue and profit totals for the page."""
    sales = await store.list_sales(
        user.id,
        sale_type=sale_type,
        start=start,
        end=end,
        search=search,
        limit=limit,
        offset=offset,
    )
    return _list_response(sales)


@router.get(
    "/{sale_id}",
    response_model=SaleResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_sale(
    sale_id: int,
    user: User = Depends(get_current_user),
    store: ISalesStore = Depends(get_sale_store),
) -> SaleResponse:
    """Get a sale by ID."""
    sale = await store.get_sale(sale_id, user.id)
    if sale is None:
        raise SaleNotFoundError(sale_id)
    return _entity_to_response(sale)


@router.delete("/all", response_model=SalesDeletedResponse)
async def delete_all_sales(
    user: User = Depends(get_current_user),
    use_case: DeleteAllSalesUseCase = Depends(get_delete_all_sales_use_case),
) -> SalesDeletedResponse:
    """Delete every sale, putting sold product quantities back in stock."""
    return SalesDeletedResponse(deleted=await use_case.execute(user.id))


@router.put(
    "/{sale_id}",
    response_model=SaleResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_sale(
    sale_id: int,
    request: UpdateSaleRequest,
    user: User = Depends(get_current_user),
    use_case: UpdateSaleUseCase = Depends(get_update_sale_use_case),
) -> SaleResponse:
    """Update a sale; price and stock follow the new item and quantity."""
    sale = await use_case.execute(sale_id, user.id, request)
    return _entity_to_response(sale)


@router.delete(
    "/{sale_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_sale(
    sale_id: int,
    user: User = Depends(get_current_user),
    use_case: DeleteSaleUseCase = Depends(get_delete_sale_use_case),
) -> None:
    """Delete a sale; product stock is put back."""
    await use_case.execute(sale_id, user.id)
