"""Tests for due-time evaluation of reminder notifications."""

from datetime import UTC, datetime, timedelta

import pytest

from bizdesk.core.services.due_time import (
    DEFAULT_TOLERANCE,
    already_fired,
    days_until_due,
    evaluate,
    same_minute,
)

DUE = datetime(2024, 3, 15, 9, 0, tzinfo=UTC)


class TestDaysUntilDue:
    @pytest.mark.parametrize(
        "now, expected",
        [
            (DUE, 0),
            (DUE + timedelta(seconds=30), 0),
            (DUE - timedelta(seconds=1), 1),
            (DUE - timedelta(days=1), 1),
            (DUE - timedelta(days=3) + timedelta(seconds=5), 3),
            (DUE - timedelta(days=3), 3),
            (DUE + timedelta(days=1), -1),
        ],
    )
    def test_rounds_up(self, now, expected):
        assert days_until_due(DUE, now) == expected


class TestDueFiring:
    """Due-date notice fires only inside [due, due + tolerance]."""

    def test_fires_inside_window(self, make_reminder):
        result = evaluate(make_reminder(due_date=DUE), DUE + timedelta(seconds=10))
        assert result.fire_due
        assert result.should_notify

    def test_fires_at_window_edges(self, make_reminder):
        reminder = make_reminder(due_date=DUE)
        assert evaluate(reminder, DUE).notify_due
        assert evaluate(reminder, DUE + DEFAULT_TOLERANCE).notify_due

    def test_never_fires_early(self, make_reminder):
        result = evaluate(make_reminder(due_date=DUE), DUE - timedelta(seconds=1))
        assert not result.fire_due
        assert not result.should_notify

    def test_missed_window_is_not_caught_up(self, make_reminder):
        result = evaluate(make_reminder(due_date=DUE), DUE + timedelta(seconds=61))
        assert not result.fire_due
        assert not result.should_notify

    def test_second_evaluation_in_same_minute_is_deduplicated(self, make_reminder):
        reminder = make_reminder(due_date=DUE)
        first_now = DUE + timedelta(seconds=5)
        assert evaluate(reminder, first_now).notify_due

        reminder.last_notified = first_now
        second = evaluate(reminder, DUE + timedelta(seconds=45))
        assert second.fire_due
        assert second.already_fired_due
        assert not second.should_notify

    def test_dedup_across_minute_boundary(self, make_reminder):
        due = datetime(2024, 3, 15, 9, 0, 50, tzinfo=UTC)
        reminder = make_reminder(due_date=due)
        first_now = due + timedelta(seconds=15)  # 09:01:05
        assert evaluate(reminder, first_now).notify_due

        reminder.last_notified = first_now
        second = evaluate(reminder, due + timedelta(seconds=45))  # 09:01:35
        assert second.fire_due
        assert not second.should_notify

    def test_custom_tolerance(self, make_reminder):
        reminder = make_reminder(due_date=DUE)
        tolerance = timedelta(minutes=5)
        assert evaluate(reminder, DUE + timedelta(minutes=4), tolerance).notify_due
        assert not evaluate(reminder, DUE + timedelta(minutes=4)).notify_due


class TestAdvanceFiring:
    """Advance notice fires N days before due, inside its own window."""

    def test_fires_at_advance_target(self, make_reminder):
        reminder = make_reminder(due_date=DUE, advance_notification_days=3)
        result = evaluate(reminder, DUE - timedelta(days=3) + timedelta(seconds=5))
        assert result.fire_advance
        assert not result.fire_due
        assert result.notify_advance

    def test_disabled_when_zero(self, make_reminder):
        reminder = make_reminder(due_date=DUE, advance_notification_days=0)
        result = evaluate(reminder, DUE - timedelta(days=3))
        assert not result.fire_advance

    def test_not_outside_window(self, make_reminder):
        reminder = make_reminder(due_date=DUE, advance_notification_days=3)
        assert not evaluate(reminder, DUE - timedelta(days=3) - timedelta(seconds=1)).fire_advance
        assert not evaluate(reminder, DUE - timedelta(days=3) + timedelta(seconds=61)).fire_advance

    @pytest.mark.parametrize("offset_seconds", [-86400 * 3, -86400 * 3 + 30, 0, 30, 60])
    def test_advance_and_due_never_both_fire(self, make_reminder, offset_seconds):
        reminder = make_reminder(due_date=DUE, advance_notification_days=3)
        result = evaluate(reminder, DUE + timedelta(seconds=offset_seconds))
        assert not (result.fire_advance and result.fire_due)

    def test_advance_record_does_not_suppress_due(self, make_reminder):
        advance_sent = DUE - timedelta(days=3) + timedelta(seconds=5)
        reminder = make_reminder(
            due_date=DUE, advance_notification_days=3, last_notified=advance_sent
        )
        result = evaluate(reminder, DUE + timedelta(seconds=5))
        assert result.notify_due

    def test_advance_deduplicated(self, make_reminder):
        sent = DUE - timedelta(days=3) + timedelta(seconds=5)
        reminder = make_reminder(
            due_date=DUE, advance_notification_days=3, last_notified=sent
        )
        result = evaluate(reminder, DUE - timedelta(days=3) + timedelta(seconds=40))
        assert result.fire_advance
        assert not result.should_notify


class TestAlreadyFired:
    def test_none_values(self):
        assert not already_fired(None, DUE)
        assert not already_fired(DUE, None)

    def test_same_minute(self):
        assert same_minute(DUE, DUE + timedelta(seconds=59))
        assert not same_minute(DUE, DUE + timedelta(seconds=60))

    def test_earlier_minute_does_not_match(self):
        assert not already_fired(DUE - timedelta(minutes=1), DUE)
