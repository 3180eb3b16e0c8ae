"""Update Reminder Use Case: partial edits with schedule bookkeeping."""

from datetime import datetime
from typing import Any

from bizdesk.config import get_logger
from bizdesk.core.entities.reminder import (
    Reminder,
    ReminderStatus,
    ReminderUpdate,
    can_transition,
)
from bizdesk.core.exceptions import (
    ClientNotFoundError,
    InvalidStatusTransitionError,
    ReminderNotFoundError,
    ValidationError,
)
from bizdesk.core.interfaces.storage import IClientStore, IReminderStore
from bizdesk.core.services.recurrence import next_occurrence

logger = get_logger(__name__)

# Fields that may not be cleared to null
REQUIRED_FIELDS = frozenset(
    {
        "title",
        "description",
        "due_date",
        "frequency",
        "status",
        "notify_user",
        "notify_client",
        "advance_notification_days",
    }
)

# Changing any of these recomputes next_due_date
SCHEDULE_FIELDS = frozenset({"due_date", "frequency", "repeat_until"})


class UpdateReminderUseCase:
    """
    Apply a partial update to a tenant's reminder.

    Status may only move pending -> cancelled here; completion has its own
    workflow because it rolls the series over. Moving ``due_date`` starts a
    fresh occurrence, so ``last_notified`` is cleared.
    """

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
        reminder_id: int,
        tenant_id: int,
        update: ReminderUpdate,
        now: datetime | None = None,
    ) -> Reminder:
        store = await self._get_reminder_store()
        reminder = await store.get(reminder_id, tenant_id)
        if reminder is None:
            raise ReminderNotFoundError(reminder_id)

        changes: dict[str, Any] = update.model_dump(exclude_unset=True)
        for name in REQUIRED_FIELDS & changes.keys():
            if changes[name] is None:
                raise ValidationError(name, "may not be null")

        if "status" in changes:
            self._check_status(reminder, changes["status"])

        if changes.get("client_id") is not None:
            client = await (await self._get_client_store()).get(
                changes["client_id"], tenant_id
            )
            if client is None:
                raise ClientNotFoundError(changes["client_id"])

        if "due_date" in changes and changes["due_date"] != reminder.due_date:
            changes["last_notified"] = None

        if SCHEDULE_FIELDS & changes.keys():
            merged = reminder.model_copy(update=changes)
            if merged.repeat_until is not None and merged.repeat_until < merged.due_date:
                raise ValidationError(
                    "repeat_until", "must not be before due_date", merged.repeat_until
                )
            changes["next_due_date"] = next_occurrence(
                merged.due_date, merged.frequency, merged.repeat_until, now
            )

        if not changes:
            return reminder

        updated = await store.update(reminder_id, changes)
        logger.info(
            "reminder_update_complete",
            reminder_id=reminder_id,
            tenant_id=tenant_id,
            fields=sorted(changes),
        )
        return updated

    @staticmethod
    def _check_status(reminder: Reminder, target: ReminderStatus) -> None:
        if target == reminder.status:
            return
        if target == ReminderStatus.COMPLETED or not can_transition(
            reminder.status, target
        ):
            raise InvalidStatusTransitionError(
                reminder.id, reminder.status.value, target.value
            )
