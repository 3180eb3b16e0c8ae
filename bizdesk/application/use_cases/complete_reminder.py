"""Complete Reminder Use Case: mark an occurrence done and roll the series forward."""

from datetime import datetime

from bizdesk.application.dto.requests import CompleteReminderRequest
from bizdesk.config import get_logger
from bizdesk.core.entities.reminder import Reminder, ReminderStatus
from bizdesk.core.exceptions import InvalidStatusTransitionError, ReminderNotFoundError
from bizdesk.core.interfaces.notifier import INotifier
from bizdesk.core.interfaces.storage import IClientStore, IReminderStore, IUserStore
from bizdesk.core.services.recurrence import next_occurrence

logger = get_logger(__name__)

# Fields copied from a completed occurrence onto its successor
CARRIED_FIELDS = (
    "tenant_id",
    "title",
    "description",
    "client_id",
    "frequency",
    "amount",
    "notify_user",
    "notify_client",
    "user_notification_message",
    "client_notification_message",
    "advance_notification_days",
    "repeat_until",
)


class CompleteReminderUseCase:
    """
    Complete a pending reminder.

    Steps:
        1. Load the reminder for the calling tenant and require ``pending``
        2. For a recurring series with a next due date, create the successor
        3. Persist ``status=completed`` (errors propagate to the caller)
        4. Optionally send a completion notice

    Steps 2 and 4 are best effort: their failures are logged and never undo
    the completion.
    """

    def __init__(
        self,
        reminder_store: IReminderStore | None = None,
        user_store: IUserStore | None = None,
        client_store: IClientStore | None = None,
        notifier: INotifier | None = None,
    ):
        self._reminder_store = reminder_store
        self._user_store = user_store
        self._client_store = client_store
        self._notifier = notifier

    async def _get_reminder_store(self) -> IReminderStore:
        if self._reminder_store is None:
            from bizdesk.infrastructure.storage.sqlite import get_reminder_store

            self._reminder_store = await get_reminder_store()
        return self._reminder_store

    async def _get_user_store(self) -> IUserStore:
        if self._user_store is None:
            from bizdesk.infrastructure.storage.sqlite import get_user_store

            self._user_store = await get_user_store()
        return self._user_store

    async def _get_client_store(self) -> IClientStore:
        if self._client_store is None:
            from bizdesk.infrastructure.storage.sqlite import get_client_store

            self._client_store = await get_client_store()
        return self._client_store

    def _get_notifier(self) -> INotifier:
        if self._notifier is None:
            from bizdesk.infrastructure.notifications import get_notifier

            self._notifier = get_notifier()
        return self._notifier

    async def execute(
        self,
        reminder_id: int,
        tenant_id: int,
        request: CompleteReminderRequest | None = None,
        now: datetime | None = None,
    ) -> Reminder:
        """
        Execute the completion workflow.

        Returns:
            The completed reminder (not the successor)

        Raises:
            ReminderNotFoundError: if the tenant has no such reminder
            InvalidStatusTransitionError: if the reminder is not pending
        """
        request = request or CompleteReminderRequest()
        store = await self._get_reminder_store()

        # 1. Load and check status
        reminder = await store.get(reminder_id, tenant_id)
        if reminder is None:
            raise ReminderNotFoundError(reminder_id)
        if reminder.status != ReminderStatus.PENDING:
            raise InvalidStatusTransitionError(
                reminder_id, reminder.status.value, ReminderStatus.COMPLETED.value
            )

        # 2. Roll over
        if reminder.is_recurring and reminder.next_due_date is not None:
            await self._spawn_successor(reminder, now)

        # 3. Persist completion
        completed = await store.update(reminder_id, {"status": ReminderStatus.COMPLETED})
        logger.info(
            "reminder_completed",
            reminder_id=reminder_id,
            tenant_id=tenant_id,
            frequency=reminder.frequency.value,
        )

        # 4. Completion notice
        if request.notify_user or request.notify_client:
            await self._send_completion_notice(completed, request)

        return completed

    async def _spawn_successor(
        self, reminder: Reminder, now: datetime | None
    ) -> Reminder | None:
        """Create the next occurrence; failures are logged, not raised."""
        due = reminder.next_due_date
        successor = Reminder(
            **{name: getattr(reminder, name) for name in CARRIED_FIELDS},
            due_date=due,
            status=ReminderStatus.PENDING,
            next_due_date=next_occurrence(
                due, reminder.frequency, reminder.repeat_until, now
            ),
        )
        try:
            created = await (await self._get_reminder_store()).create(successor)
        except Exception as e:
            logger.error(
                "rollover_failed",
                reminder_id=reminder.id,
                next_due_date=due.isoformat(),
                error=str(e),
            )
            return None

        logger.info(
            "reminder_rolled_over",
            reminder_id=reminder.id,
            successor_id=created.id,
            due_date=created.due_date.isoformat(),
            series_ends=created.next_due_date is None,
        )
        return created

    async def _send_completion_notice(
        self, reminder: Reminder, request: CompleteReminderRequest
    ) -> None:
        try:
            user = await (await self._get_user_store()).get(reminder.tenant_id)
            if user is None:
                logger.warning(
                    "completion_notice_user_missing",
                    reminder_id=reminder.id,
                    tenant_id=reminder.tenant_id,
                )

            client = None
            if request.notify_client and reminder.client_id is not None:
                client = await (await self._get_client_store()).get(
                    reminder.client_id, reminder.tenant_id
                )

            to_user = request.notify_user and user is not None
            if not to_user and client is None:
                logger.warning(
                    "completion_notice_skipped",
                    reminder_id=reminder.id,
                    reason="no_recipient",
                )
                return

            message = request.completion_message or ""
            outcome = await self._get_notifier().notify_completion(
                reminder,
                user,
                message,
                to_user=to_user,
                to_client=client is not None,
                client=client,
            )
        except Exception as e:
            logger.error(
                "completion_notice_failed",
                reminder_id=reminder.id,
                error=str(e),
            )
            return

        for failure in outcome.failures:
            logger.warning(
                "completion_notice_failed",
                reminder_id=reminder.id,
                recipient=failure.recipient,
                error=failure.error,
            )
        if outcome.attempted and not outcome.failures:
            logger.info(
                "completion_notice_sent",
                reminder_id=reminder.id,
                recipients=len(outcome.attempted),
            )
