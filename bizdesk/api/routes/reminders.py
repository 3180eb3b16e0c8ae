"""
Reminder (schedule) management endpoints.
"""

from fastapi import APIRouter, Depends, Query, status

from bizdesk.api.dependencies import (
    get_complete_reminder_use_case,
    get_create_reminder_use_case,
    get_current_user,
    get_rem_store,
    get_sweep_use_case,
    get_update_reminder_use_case,
)
from bizdesk.application.dto.requests import (
    CompleteReminderRequest,
    CreateReminderRequest,
    UpdateReminderRequest,
)
from bizdesk.application.dto.responses import (
    ErrorResponse,
    ReminderListResponse,
    ReminderResponse,
    SweepResponse,
)
from bizdesk.application.use_cases import (
    CompleteReminderUseCase,
    CreateReminderUseCase,
    SweepDueRemindersUseCase,
    UpdateReminderUseCase,
)
from bizdesk.core.clock import utc_now
from bizdesk.core.entities.reminder import Reminder, ReminderStatus
from bizdesk.core.entities.user import User
from bizdesk.core.exceptions import ReminderNotFoundError
from bizdesk.core.interfaces import IReminderStore

router = APIRouter(prefix="/api/reminders", tags=["reminders"])


def _entity_to_response(reminder: Reminder) -> ReminderResponse:
    """Convert entity to response DTO."""
    return ReminderResponse.model_validate(reminder)


def _list_response(reminders: list[Reminder]) -> ReminderListResponse:
    return ReminderListResponse(
        reminders=[_entity_to_response(r) for r in reminders],
        total=len(reminders),
    )


@router.post(
    "",
    response_model=ReminderResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def create_reminder(
    request: CreateReminderRequest,
    user: User = Depends(get_current_user),
    use_case: CreateReminderUseCase = Depends(get_create_reminder_use_case),
) -> ReminderResponse:
    """Create a new reminder."""
    reminder = await use_case.execute(user.id, request)
    return _entity_to_response(reminder)


@router.get("", response_model=ReminderListResponse)
async def list_reminders(
    status_filter: ReminderStatus | None = Query(default=None, alias="status"),
    client_id: int | None = None,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(get_current_user),
    store: IReminderStore = Depends(get_rem_store),
) -> ReminderListResponse:
    """List reminders, optionally filtered by status or client."""
    reminders = await store.list_reminders(
        user.id,
        status=status_filter,
        client_id=client_id,
        limit=limit,
        offset=offset,
    )
    return _list_response(reminders)


@router.get("/upcoming", response_model=ReminderListResponse)
async def list_upcoming_reminders(
    days: int = Query(default=7, ge=0, le=366),
    limit: int = Query(default=10, ge=1, le=500),
    user: User = Depends(get_current_user),
    store: IReminderStore = Depends(get_rem_store),
) -> ReminderListResponse:
    """List pending reminders due within the next ``days`` days."""
    reminders = await store.list_upcoming(
        user.id, utc_now(), within_days=days, limit=limit
    )
    return _list_response(reminders)


@router.post("/sweep", response_model=SweepResponse)
async def run_sweep(
    user: User = Depends(get_current_user),
    use_case: SweepDueRemindersUseCase = Depends(get_sweep_use_case),
) -> SweepResponse:
    """Run one reminder sweep now, across all tenants."""
    result = await use_case.execute(trigger="api")
    return SweepResponse(
        scanned=result.scanned,
        fired=result.fired,
        user_notified=result.user_notified,
        client_notified=result.client_notified,
        notify_failures=result.notify_failures,
        errors=result.errors,
        started_at=result.started_at,
        duration_ms=result.duration_ms,
    )


@router.get(
    "/{reminder_id}",
    response_model=ReminderResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_reminder(
    reminder_id: int,
    user: User = Depends(get_current_user),
    store: IReminderStore = Depends(get_rem_store),
) -> ReminderResponse:
    """Get a reminder by ID."""
    reminder = await store.get(reminder_id, user.id)
    if reminder is None:
        raise ReminderNotFoundError(reminder_id)
    return _entity_to_response(reminder)


@router.put(
    "/{reminder_id}",
    response_model=ReminderResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_reminder(
    reminder_id: int,
    request: UpdateReminderRequest,
    user: User = Depends(get_current_user),
    use_case: UpdateReminderUseCase = Depends(get_update_reminder_use_case),
) -> ReminderResponse:
    """Edit a reminder or cancel it."""
    reminder = await use_case.execute(reminder_id, user.id, request.to_update())
    return _entity_to_response(reminder)


@router.put(
    "/{reminder_id}/complete",
    response_model=ReminderResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def complete_reminder(
    reminder_id: int,
    request: CompleteReminderRequest | None = None,
    user: User = Depends(get_current_user),
    use_case: CompleteReminderUseCase = Depends(get_complete_reminder_use_case),
) -> ReminderResponse:
    """Mark a reminder completed; recurring reminders roll over to the next occurrence."""
    reminder = await use_case.execute(reminder_id, user.id, request)
    return _entity_to_response(reminder)


@router.delete(
    "/{reminder_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_reminder(
    reminder_id: int,
    user: User = Depends(get_current_user),
    store: IReminderStore = Depends(get_rem_store),
) -> None:
    """Delete a reminder."""
    if not await store.delete(reminder_id, user.id):
        raise ReminderNotFoundError(reminder_id)
