"""
User (tenant) registration and profile endpoints.
"""

from fastapi import APIRouter, Depends, status

from bizdesk.api.dependencies import get_current_user, get_usr_store
from bizdesk.application.dto.requests import RegisterUserRequest, UpdateUserRequest
from bizdesk.application.dto.responses import ErrorResponse, UserResponse
from bizdesk.config import get_logger
from bizdesk.core.entities.user import User
from bizdesk.core.exceptions import DuplicateUserError, UserNotFoundError
from bizdesk.core.interfaces import IUserStore

logger = get_logger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def register_user(
    request: RegisterUserRequest,
    store: IUserStore = Depends(get_usr_store),
) -> UserResponse:
    """Register a new user. The returned ID is sent as X-User-Id afterwards."""
    if await store.get_by_email(request.email) is not None:
        raise DuplicateUserError(request.email)

    user = await store.create(User(**request.model_dump()))
    logger.info("user_registered", user_id=user.id)
    return UserResponse.model_validate(user)


@router.get(
    "/me",
    response_model=UserResponse,
    responses={401: {"model": ErrorResponse}},
)
async def get_me(user: User = Depends(get_current_user)) -> UserResponse:
    """Get the calling user's profile."""
    return UserResponse.model_validate(user)


@router.put(
    "/me",
    response_model=UserResponse,
    responses={401: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_me(
    request: UpdateUserRequest,
    user: User = Depends(get_current_user),
    store: IUserStore = Depends(get_usr_store),
) -> UserResponse:
    """Update the calling user's profile."""
    changes = request.model_dump(exclude_unset=True, exclude_none=True)
    if "email" in changes and changes["email"] != user.email:
        existing = await store.get_by_email(changes["email"])
        if existing is not None and existing.id != user.id:
            raise DuplicateUserError(changes["email"])

    updated = await store.update(user.model_copy(update=changes))
    return UserResponse.model_validate(updated)


@router.delete(
    "/me",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={401: {"model": ErrorResponse}},
)
async def delete_me(
    user: User = Depends(get_current_user),
    store: IUserStore = Depends(get_usr_store),
) -> None:
    """Delete the calling user's account with all of its clients, catalog, sales and reminders."""
    if not await store.delete(user.id):
        raise UserNotFoundError(user.id)
    logger.info("account_deleted", user_id=user.id)
