"""Tests for CompleteReminderUseCase."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from bizdesk.application.dto.requests import CompleteReminderRequest
from bizdesk.application.use_cases.complete_reminder import CompleteReminderUseCase
from bizdesk.core.entities.reminder import ReminderFrequency, ReminderStatus
from bizdesk.core.exceptions import (
    DatabaseError,
    InvalidStatusTransitionError,
    ReminderNotFoundError,
)
from bizdesk.core.interfaces.notifier import CompletionNotificationResult, NotificationResult

DUE = datetime(2024, 3, 15, 9, 0, tzinfo=UTC)
CLOCK = datetime(2024, 3, 15, 12, 0, tzinfo=UTC)


def _make_stores(reminder, sample_user, sample_client):
    reminder_store = AsyncMock()
    reminder_store.get.return_value = reminder
    reminder_store.update.side_effect = lambda rid, fields: reminder.model_copy(update=fields)
    reminder_store.create.side_effect = lambda r: r.model_copy(update={"id": 99})
    user_store = AsyncMock()
    user_store.get.return_value = sample_user
    client_store = AsyncMock()
    client_store.get.return_value = sample_client
    notifier = AsyncMock()
    notifier.notify_completion.return_value = CompletionNotificationResult(
        user=NotificationResult.success(sample_user.email)
    )
    return reminder_store, user_store, client_store, notifier


def _use_case(stores) -> CompleteReminderUseCase:
    reminder_store, user_store, client_store, notifier = stores
    return CompleteReminderUseCase(reminder_store, user_store, client_store, notifier)


@pytest.fixture
def daily_reminder(make_reminder):
    return make_reminder(
        id=5,
        title="Restock shelves",
        due_date=DUE,
        frequency=ReminderFrequency.DAILY,
        next_due_date=DUE + timedelta(days=1),
        notify_client=True,
        client_id=7,
        amount=120.0,
        advance_notification_days=1,
        user_notification_message="Restock today",
        last_notified=DUE,
    )


class TestCompleteReminderRollover:
    """Rollover of recurring series on completion."""

    async def test_daily_spawns_one_successor(self, daily_reminder, sample_user, sample_client):
        stores = _make_stores(daily_reminder, sample_user, sample_client)
        reminder_store = stores[0]

        completed = await _use_case(stores).execute(5, 1, now=CLOCK)

        reminder_store.create.assert_awaited_once()
        successor = reminder_store.create.await_args.args[0]
        assert successor.id is None
        assert successor.due_date == DUE + timedelta(days=1)
        assert successor.status == ReminderStatus.PENDING
        assert successor.last_notified is None
        assert successor.next_due_date == DUE + timedelta(days=2)
        assert successor.title == "Restock shelves"
        assert successor.client_id == 7
        assert successor.amount == 120.0
        assert successor.notify_client is True
        assert successor.advance_notification_days == 1
        assert successor.user_notification_message == "Restock today"

        reminder_store.update.assert_awaited_once_with(5, {"status": ReminderStatus.COMPLETED})
        assert completed.id == 5
        assert completed.status == ReminderStatus.COMPLETED
        assert completed.due_date == daily_reminder.due_date

    async def test_once_spawns_nothing(self, make_reminder, sample_user, sample_client):
        reminder = make_reminder(id=5, frequency=ReminderFrequency.ONCE)
        stores = _make_stores(reminder, sample_user, sample_client)

        completed = await _use_case(stores).execute(5, 1, now=CLOCK)

        stores[0].create.assert_not_awaited()
        assert completed.status == ReminderStatus.COMPLETED

    async def test_ended_series_spawns_nothing(self, make_reminder, sample_user, sample_client):
        reminder = make_reminder(id=5, frequency=ReminderFrequency.WEEKLY, next_due_date=None)
        stores = _make_stores(reminder, sample_user, sample_client)

        await _use_case(stores).execute(5, 1, now=CLOCK)

        stores[0].create.assert_not_awaited()

    async def test_last_occurrence_is_still_spawned(self, make_reminder, sample_user, sample_client):
        next_due = DUE + timedelta(weeks=1)
        reminder = make_reminder(
            id=5,
            due_date=DUE,
            frequency=ReminderFrequency.WEEKLY,
            next_due_date=next_due,
            repeat_until=next_due,
        )
        stores = _make_stores(reminder, sample_user, sample_client)

        await _use_case(stores).execute(5, 1, now=CLOCK)

        successor = stores[0].create.await_args.args[0]
        assert successor.due_date == next_due
        assert successor.next_due_date is None

    async def test_spawn_failure_still_completes(self, daily_reminder, sample_user, sample_client):
        stores = _make_stores(daily_reminder, sample_user, sample_client)
        stores[0].create.side_effect = DatabaseError("create_reminder", "disk full")

        completed = await _use_case(stores).execute(5, 1, now=CLOCK)

        assert completed.status == ReminderStatus.COMPLETED
        stores[0].update.assert_awaited_once()

    async def test_primary_write_failure_propagates(
        self, daily_reminder, sample_user, sample_client
    ):
        stores = _make_stores(daily_reminder, sample_user, sample_client)
        stores[0].update.side_effect = DatabaseError("update_reminder", "locked")

        with pytest.raises(DatabaseError):
            await _use_case(stores).execute(5, 1, now=CLOCK)


class TestCompleteReminderGuards:
    async def test_not_found(self, make_reminder, sample_user, sample_client):
        stores = _make_stores(make_reminder(), sample_user, sample_client)
        stores[0].get.return_value = None

        with pytest.raises(ReminderNotFoundError):
            await _use_case(stores).execute(404, 1)

    @pytest.mark.parametrize("status", [ReminderStatus.COMPLETED, ReminderStatus.CANCELLED])
    async def test_non_pending_rejected(self, make_reminder, sample_user, sample_client, status):
        stores = _make_stores(make_reminder(status=status), sample_user, sample_client)

        with pytest.raises(InvalidStatusTransitionError):
            await _use_case(stores).execute(1, 1)

        stores[0].update.assert_not_awaited()
        stores[0].create.assert_not_awaited()


class TestCompletionNotice:
    async def test_no_notice_by_default(self, daily_reminder, sample_user, sample_client):
        stores = _make_stores(daily_reminder, sample_user, sample_client)

        await _use_case(stores).execute(5, 1, now=CLOCK)

        stores[3].notify_completion.assert_not_awaited()

    async def test_user_notice(self, daily_reminder, sample_user, sample_client):
        stores = _make_stores(daily_reminder, sample_user, sample_client)
        request = CompleteReminderRequest(notify_user=True, completion_message="All stocked")

        await _use_case(stores).execute(5, 1, request, now=CLOCK)

        call = stores[3].notify_completion.await_args
        assert call.args[1] == sample_user
        assert call.args[2] == "All stocked"
        assert call.kwargs["to_user"] is True
        assert call.kwargs["to_client"] is False
        stores[2].get.assert_not_awaited()

    async def test_client_notice_looks_up_client(
        self, daily_reminder, sample_user, sample_client
    ):
        stores = _make_stores(daily_reminder, sample_user, sample_client)
        request = CompleteReminderRequest(notify_client=True)

        await _use_case(stores).execute(5, 1, request, now=CLOCK)

        stores[2].get.assert_awaited_once_with(7, 1)
        call = stores[3].notify_completion.await_args
        assert call.kwargs["to_client"] is True
        assert call.kwargs["client"] == sample_client

    async def test_notifier_failure_is_swallowed(
        self, daily_reminder, sample_user, sample_client
    ):
        stores = _make_stores(daily_reminder, sample_user, sample_client)
        stores[3].notify_completion.side_effect = RuntimeError("smtp down")

        completed = await _use_case(stores).execute(
            5, 1, CompleteReminderRequest(notify_user=True), now=CLOCK
        )

        assert completed.status == ReminderStatus.COMPLETED

    async def test_missing_user_still_notifies_client(
        self, daily_reminder, sample_user, sample_client
    ):
        stores = _make_stores(daily_reminder, sample_user, sample_client)
        stores[1].get.return_value = None
        request = CompleteReminderRequest(notify_user=True, notify_client=True)

        await _use_case(stores).execute(5, 1, request, now=CLOCK)

        call = stores[3].notify_completion.await_args
        assert call.args[1] is None
        assert call.kwargs["to_user"] is False
        assert call.kwargs["to_client"] is True
        assert call.kwargs["client"] == sample_client

    async def test_missing_user_without_client_sends_nothing(
        self, daily_reminder, sample_user, sample_client
    ):
        stores = _make_stores(daily_reminder, sample_user, sample_client)
        stores[1].get.return_value = None

        await _use_case(stores).execute(
            5, 1, CompleteReminderRequest(notify_user=True), now=CLOCK
        )

        stores[3].notify_completion.assert_not_awaited()
