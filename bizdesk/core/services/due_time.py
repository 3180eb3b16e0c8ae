"""
Due-time evaluation for reminder notifications.

Decides, for a reminder and a clock reading, whether the advance notice or
the due-date notice should fire on this sweep tick, and whether that firing
was already recorded in ``last_notified``.

A firing is eligible only inside a fixed tolerance window that opens at its
target instant; nothing fires early and a window missed entirely (e.g. the
sweeper was down) is never caught up later.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from bizdesk.core.clock import as_utc
from bizdesk.core.entities.reminder import Reminder

DEFAULT_TOLERANCE = timedelta(seconds=60)
SECONDS_PER_DAY = 86400


@dataclass(frozen=True)
class DueEvaluation:
    """Result of evaluating one reminder at one instant."""

    fire_advance: bool
    fire_due: bool
    already_fired_advance: bool
    already_fired_due: bool

    @property
    def notify_advance(self) -> bool:
        return self.fire_advance and not self.already_fired_advance

    @property
    def notify_due(self) -> bool:
        return self.fire_due and not self.already_fired_due

    @property
    def should_notify(self) -> bool:
        """True when some firing is eligible and not yet recorded."""
        return self.notify_advance or self.notify_due


def days_until_due(due_date: datetime, now: datetime) -> int:
    """Whole days until ``due_date``, rounded up."""
    delta = (as_utc(due_date) - as_utc(now)).total_seconds()
    return math.ceil(delta / SECONDS_PER_DAY)


def advance_target(reminder: Reminder) -> datetime | None:
    """Instant the advance notice targets, or None when it is disabled."""
    if reminder.advance_notification_days <= 0:
        return None
    return reminder.due_date - timedelta(days=reminder.advance_notification_days)


def within_window(target: datetime, now: datetime, tolerance: timedelta) -> bool:
    """True when ``target <= now <= target + tolerance``."""
    return target <= now <= target + tolerance


def same_minute(a: datetime, b: datetime) -> bool:
    """True when both instants fall in the same UTC calendar minute."""
    a, b = as_utc(a), as_utc(b)
    return a.replace(second=0, microsecond=0) == b.replace(second=0, microsecond=0)


def already_fired(
    last_notified: datetime | None,
    target: datetime | None,
    tolerance: timedelta = DEFAULT_TOLERANCE,
) -> bool:
    """
    Whether ``last_notified`` records a firing for ``target``.

    Matches when both share a calendar minute, or when ``last_notified`` lies
    inside the target's tolerance window (which may straddle a minute boundary).
    """
    if last_notified is None or target is None:
        return False
    last = as_utc(last_notified)
    return same_minute(last, target) or within_window(target, last, tolerance)


def evaluate(
    reminder: Reminder,
    now: datetime,
    tolerance: timedelta = DEFAULT_TOLERANCE,
) -> DueEvaluation:
    """Evaluate which notifications a reminder is eligible for at ``now``."""
    now = as_utc(now)
    due = reminder.due_date
    days_left = days_until_due(due, now)

    fire_due = days_left == 0 and within_window(due, now, tolerance)

    adv = advance_target(reminder)
    fire_advance = (
        adv is not None
        and days_left == reminder.advance_notification_days
        and within_window(adv, now, tolerance)
    )

    return DueEvaluation(
        fire_advance=fire_advance,
        fire_due=fire_due,
        already_fired_advance=already_fired(reminder.last_notified, adv, tolerance),
        already_fired_due=already_fired(reminder.last_notified, due, tolerance),
    )
