"""Tests for the Reminder entity."""

from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from bizdesk.core.entities.reminder import (
    Reminder,
    ReminderFrequency,
    ReminderStatus,
    ReminderUpdate,
    can_transition,
)


class TestReminderEntity:
    """Tests for Reminder validation and derived properties."""

    def test_defaults(self):
        reminder = Reminder(tenant_id=1, title="VAT", due_date=datetime(2024, 1, 1, tzinfo=UTC))
        assert reminder.status == ReminderStatus.PENDING
        assert reminder.frequency == ReminderFrequency.ONCE
        assert reminder.notify_user is True
        assert reminder.notify_client is False
        assert reminder.advance_notification_days == 0
        assert reminder.last_notified is None

    def test_naive_datetimes_are_utc(self):
        reminder = Reminder(tenant_id=1, title="VAT", due_date=datetime(2024, 1, 1, 9, 0))
        assert reminder.due_date.tzinfo is not None
        assert reminder.due_date.utcoffset() == timedelta(0)

    def test_offset_datetimes_converted_to_utc(self):
        plus_two = timezone(timedelta(hours=2))
        reminder = Reminder(
            tenant_id=1, title="VAT", due_date=datetime(2024, 1, 1, 11, 0, tzinfo=plus_two)
        )
        assert reminder.due_date == datetime(2024, 1, 1, 9, 0, tzinfo=UTC)
        assert reminder.due_date.hour == 9

    def test_once_never_has_next_due_date(self):
        reminder = Reminder(
            tenant_id=1,
            title="VAT",
            due_date=datetime(2024, 1, 1, tzinfo=UTC),
            frequency=ReminderFrequency.ONCE,
            next_due_date=datetime(2024, 2, 1, tzinfo=UTC),
        )
        assert reminder.next_due_date is None

    def test_negative_advance_days_rejected(self):
        with pytest.raises(ValidationError):
            Reminder(
                tenant_id=1,
                title="VAT",
                due_date=datetime(2024, 1, 1, tzinfo=UTC),
                advance_notification_days=-1,
            )

    def test_empty_title_rejected(self):
        with pytest.raises(ValidationError):
            Reminder(tenant_id=1, title="", due_date=datetime(2024, 1, 1, tzinfo=UTC))

    def test_default_messages(self, make_reminder):
        reminder = make_reminder(title="Shop rent", due_date=datetime(2024, 3, 5, tzinfo=UTC))
        assert reminder.user_message == "Reminder: Shop rent is due on March 05, 2024"
        assert reminder.client_message == (
            "This is a reminder that Shop rent is due on March 05, 2024"
        )

    def test_custom_messages(self, make_reminder):
        reminder = make_reminder(
            user_notification_message="Pay the landlord",
            client_notification_message="Your invoice is due",
        )
        assert reminder.user_message == "Pay the landlord"
        assert reminder.client_message == "Your invoice is due"

    def test_is_overdue(self, make_reminder):
        past = make_reminder(due_date=datetime(2000, 1, 1, tzinfo=UTC))
        assert past.is_overdue is True
        done = make_reminder(
            due_date=datetime(2000, 1, 1, tzinfo=UTC), status=ReminderStatus.COMPLETED
        )
        assert done.is_overdue is False

    def test_is_recurring(self, make_reminder):
        assert make_reminder(frequency=ReminderFrequency.MONTHLY).is_recurring
        assert not make_reminder().is_recurring


class TestStatusTransitions:
    @pytest.mark.parametrize(
        "current, target, allowed",
        [
            (ReminderStatus.PENDING, ReminderStatus.COMPLETED, True),
            (ReminderStatus.PENDING, ReminderStatus.CANCELLED, True),
            (ReminderStatus.COMPLETED, ReminderStatus.PENDING, False),
            (ReminderStatus.CANCELLED, ReminderStatus.PENDING, False),
            (ReminderStatus.COMPLETED, ReminderStatus.CANCELLED, False),
            (ReminderStatus.CANCELLED, ReminderStatus.CANCELLED, True),
        ],
    )
    def test_can_transition(self, current, target, allowed):
        assert can_transition(current, target) is allowed


class TestReminderUpdate:
    def test_only_set_fields_dumped(self):
        update = ReminderUpdate(title="New title", amount=None)
        assert update.model_dump(exclude_unset=True) == {"title": "New title", "amount": None}

    def test_due_date_normalized(self):
        update = ReminderUpdate(due_date=datetime(2024, 6, 1, 8, 30))
        assert update.due_date == datetime(2024, 6, 1, 8, 30, tzinfo=UTC)
