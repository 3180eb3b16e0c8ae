"""
Client management endpoints.
"""

from fastapi import APIRouter, Depends, status

from bizdesk.api.dependencies import get_cli_store, get_current_user
from bizdesk.application.dto.requests import CreateClientRequest, UpdateClientRequest
from bizdesk.application.dto.responses import (
    ClientListResponse,
    ClientResponse,
    ErrorResponse,
)
from bizdesk.core.entities.client import Client, ClientType
from bizdesk.core.entities.user import User
from bizdesk.core.exceptions import ClientNotFoundError
from bizdesk.core.interfaces import IClientStore

router = APIRouter(prefix="/api/clients", tags=["clients"])


def _entity_to_response(client: Client) -> ClientResponse:
    """Convert entity to response DTO."""
    return ClientResponse.model_validate(client)


async def _get_owned(store: IClientStore, client_id: int, tenant_id: int) -> Client:
    client = await store.get(client_id, tenant_id)
    if client is None:
        raise ClientNotFoundError(client_id)
    return client


@router.post(
    "",
    response_model=ClientResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_client(
    request: CreateClientRequest,
    user: User = Depends(get_current_user),
    store: IClientStore = Depends(get_cli_store),
) -> ClientResponse:
    """Create a client."""
    client = await store.create(Client(tenant_id=user.id, **request.model_dump()))
    return _entity_to_response(client)


@router.get("", response_model=ClientListResponse)
async def list_clients(
    client_type: ClientType | None = None,
    search: str | None = None,
    user: User = Depends(get_current_user),
    store: IClientStore = Depends(get_cli_store),
) -> ClientListResponse:
    """List clients, optionally filtered by type or a name/email/phone search."""
    clients = await store.list_clients(user.id, client_type=client_type, search=search)
    return ClientListResponse(
        clients=[_entity_to_response(c) for c in clients],
        total=len(clients),
    )


@router.get(
    "/{client_id}",
    response_model=ClientResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_client(
    client_id: int,
    user: User = Depends(get_current_user),
    store: IClientStore = Depends(get_cli_store),
) -> ClientResponse:
    """Get a client by ID."""
    return _entity_to_response(await _get_owned(store, client_id, user.id))


@router.put(
    "/{client_id}",
    response_model=ClientResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_client(
    client_id: int,
    request: UpdateClientRequest,
    user: User = Depends(get_current_user),
    store: IClientStore = Depends(get_cli_store),
) -> ClientResponse:
    """Update a client."""
    existing = await _get_owned(store, client_id, user.id)
    changes = request.model_dump(exclude_unset=True, exclude_none=True)
    updated = await store.update(existing.model_copy(update=changes))
    return _entity_to_response(updated)


@router.delete(
    "/{client_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_client(
    client_id: int,
    user: User = Depends(get_current_user),
    store: IClientStore = Depends(get_cli_store),
) -> None:
    """Delete a client. Linked reminders and sales keep no reference to it."""
    if not await store.delete(client_id, user.id):
        raise ClientNotFoundError(client_id)
