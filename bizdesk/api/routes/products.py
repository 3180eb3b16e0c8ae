"""
Product catalog endpoints.
"""

from fastapi import APIRouter, Depends, status

from bizdesk.api.dependencies import get_cat_store, get_current_user
from bizdesk.application.dto.requests import CreateProductRequest, UpdateProductRequest
from bizdesk.application.dto.responses import (
    ErrorResponse,
    ProductListResponse,
    ProductResponse,
)
from bizdesk.core.entities.catalog import Product
from bizdesk.core.entities.user import User
from bizdesk.core.exceptions import DuplicateProductError, ProductNotFoundError
from bizdesk.core.interfaces import ICatalogStore

router = APIRouter(prefix="/api/products", tags=["products"])


def _entity_to_response(product: Product) -> ProductResponse:
    """Convert entity to response DTO."""
    return ProductResponse.model_validate(product)


def _list_response(products: list[Product]) -> ProductListResponse:
    return ProductListResponse(
        products=[_entity_to_response(p) for p in products],
        total=len(products),
    )


async def _check_duplicate(
    store: ICatalogStore, product: Product, exclude_id: int | None = None
) -> None:
    duplicate = await store.find_duplicate_product(
        product.tenant_id,
        product.name,
        product.category,
        product.product_type,
        exclude_id=exclude_id,
    )
    if duplicate is not None:
        raise DuplicateProductError(product.name, duplicate.id)


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def create_product(
    request: CreateProductRequest,
    user: User = Depends(get_current_user),
    store: ICatalogStore = Depends(get_cat_store),
) -> ProductResponse:
    """Create a product. Name, category and type must be unique per tenant."""
    product = Product(tenant_id=user.id, **request.model_dump())
    await _check_duplicate(store, product)
    return _entity_to_response(await store.create_product(product))


@router.get("", response_model=ProductListResponse)
async def list_products(
    category: str | None = None,
    user: User = Depends(get_current_user),
    store: ICatalogStore = Depends(get_cat_store),
) -> ProductListResponse:
    """List products, optionally by category."""
    return _list_response(await store.list_products(user.id, category=category))


@router.get("/low-stock", response_model=ProductListResponse)
async def list_low_stock(
    user: User = Depends(get_current_user),
    store: ICatalogStore = Depends(get_cat_store),
) -> ProductListResponse:
    """List products at or below their minimum stock."""
    return _list_response(await store.list_low_stock(user.id))


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_product(
    product_id: int,
    user: User = Depends(get_current_user),
    store: ICatalogStore = Depends(get_cat_store),
) -> ProductResponse:
    """Get a product by ID."""
    product = await store.get_product(product_id, user.id)
    if product is None:
        raise ProductNotFoundError(product_id)
    return _entity_to_response(product)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_product(
    product_id: int,
    request: UpdateProductRequest,
    user: User = Depends(get_current_user),
    store: ICatalogStore = Depends(get_cat_store),
) -> ProductResponse:
    """Update a product."""
    existing = await store.get_product(product_id, user.id)
    if existing is None:
        raise ProductNotFoundError(product_id)

    changes = request.model_dump(exclude_unset=True)
    # product_type and package_quantity may be cleared; the rest may not
    changes = {
        k: v
        for k, v in changes.items()
        if v is not None or k in {"product_type", "package_quantity"}
    }
    updated = existing.model_copy(update=changes)
    await _check_duplicate(store, updated, exclude_id=product_id)
    return _entity_to_response(await store.update_product(updated))


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_product(
    product_id: int,
    user: User = Depends(get_current_user),
    store: ICatalogStore = Depends(get_cat_store),
) -> None:
    """Delete a product."""
    if not await store.delete_product(product_id, user.id):
        raise ProductNotFoundError(product_id)
