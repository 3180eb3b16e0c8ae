"""
Service catalog endpoints.
"""

from fastapi import APIRouter, Depends, status

from bizdesk.api.dependencies import get_cat_store, get_current_user
from bizdesk.application.dto.requests import CreateServiceRequest, UpdateServiceRequest
from bizdesk.application.dto.responses import (
    ErrorResponse,
    ServiceListResponse,
    ServiceResponse,
)
from bizdesk.core.entities.catalog import Service
from bizdesk.core.entities.user import User
from bizdesk.core.exceptions import ServiceNotFoundError
from bizdesk.core.interfaces import ICatalogStore

router = APIRouter(prefix="/api/services", tags=["services"])


def _entity_to_response(service: Service) -> ServiceResponse:
    """Convert entity to response DTO."""
    return ServiceResponse.model_validate(service)


@router.post("", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED)
async def create_service(
    request: CreateServiceRequest,
    user: User = Depends(get_current_user),
    store: ICatalogStore = Depends(get_cat_store),
) -> ServiceResponse:
    """Create a service."""
    service = await store.create_service(Service(tenant_id=user.id, **request.model_dump()))
    return _entity_to_response(service)


@router.get("", response_model=ServiceListResponse)
async def list_services(
    active_only: bool = False,
    user: User = Depends(get_current_user),
    store: ICatalogStore = Depends(get_cat_store),
) -> ServiceListResponse:
    """List services."""
    services = await store.list_services(user.id, active_only=active_only)
    return ServiceListResponse(
        services=[_entity_to_response(s) for s in services],
        total=len(services),
    )


@router.get(
    "/{service_id}",
    response_model=ServiceResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_service(
    service_id: int,
    user: User = Depends(get_current_user),
    store: ICatalogStore = Depends(get_cat_store),
) -> ServiceResponse:
    """Get a service by ID."""
    service = await store.get_service(service_id, user.id)
    if service is None:
        raise ServiceNotFoundError(service_id)
    return _entity_to_response(service)


@router.put(
    "/{service_id}",
    response_model=ServiceResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_service(
    service_id: int,
    request: UpdateServiceRequest,
    user: User = Depends(get_current_user),
    store: ICatalogStore = Depends(get_cat_store),
) -> ServiceResponse:
    """Update a service."""
    existing = await store.get_service(service_id, user.id)
    if existing is None:
        raise ServiceNotFoundError(service_id)

    changes = {
        k: v
        for k, v in request.model_dump(exclude_unset=True).items()
        if v is not None or k in {"category", "default_price"}
    }
    updated = await store.update_service(existing.model_copy(update=changes))
    return _entity_to_response(updated)


@router.delete(
    "/{service_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_service(
    service_id: int,
    user: User = Depends(get_current_user),
    store: ICatalogStore = Depends(get_cat_store),
) -> None:
    """Delete a service. Past sales keep their recorded name and amounts."""
    if not await store.delete_service(service_id, user.id):
        raise ServiceNotFoundError(service_id)
