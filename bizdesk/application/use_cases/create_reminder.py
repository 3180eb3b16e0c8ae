"""Create Reminder Use Case."""

from datetime import datetime

from bizdesk.application.dto.requests import CreateReminderRequest
from bizdesk.config import get_logger
from bizdesk.core.clock import as_utc
from bizdesk.core.entities.reminder import Reminder
from bizdesk.core.exceptions import ClientNotFoundError, ValidationError
from bizdesk.core.interfaces.storage import IClientStore, IReminderStore
from bizdesk.core.services.recurrence import next_occurrence

logger = get_logger(__name__)


class CreateReminderUseCase:
    """Create a pending reminder with its next due date precomputed."""

    def __init__(
        self,
        reminder_store: IReminderStore | None = None,
        client_store: IClientStore | None = None,
    ):
        self._reminder_store = reminder_store
        self._client_store = client_store

    async def _get_reminder_store(self) -> IReminderStore:
        if self._reminder_store is None:
            from bizdesk.infrastructure.storage.sqlite import get_reminder_store

            self._reminder_store = await get_reminder_store()
        return self._reminder_store

    async def _get_client_store(self) -> IClientStore:
        if self._client_store is None:
            from bizdesk.infrastructure.storage.sqlite import get_client_store

            self._client_store = await get_client_store()
        return self._client_store

    async def execute(
        self,
        tenant_id: int,
        request: CreateReminderRequest,
        now: datetime | None = None,
    ) -> Reminder:
        """
        Create a reminder for a tenant.

        Raises:
            ClientNotFoundError: if ``client_id`` is not one of the tenant's clients
            ValidationError: if ``repeat_until`` is before ``due_date``
        """
        if request.client_id is not None:
            client = await (await self._get_client_store()).get(
                request.client_id, tenant_id
            )
            if client is None:
                raise ClientNotFoundError(request.client_id)

        due_date = as_utc(request.due_date)
        repeat_until = as_utc(request.repeat_until) if request.repeat_until else None
        if repeat_until is not None and repeat_until < due_date:
            raise ValidationError(
                "repeat_until", "must not be before due_date", request.repeat_until
            )

        reminder = Reminder(
            tenant_id=tenant_id,
            **request.model_dump(exclude={"due_date", "repeat_until"}),
            due_date=due_date,
            repeat_until=repeat_until,
            next_due_date=next_occurrence(
                due_date, request.frequency, repeat_until, now
            ),
        )
        reminder = await (await self._get_reminder_store()).create(reminder)

        logger.info(
            "reminder_create_complete",
            reminder_id=reminder.id,
            tenant_id=tenant_id,
            frequency=reminder.frequency.value,
            due_date=reminder.due_date.isoformat(),
        )
        return reminder
