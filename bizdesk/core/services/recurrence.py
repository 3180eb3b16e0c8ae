"""
Recurrence arithmetic for reminder series.

Month and year steps use ``dateutil.relativedelta``, which clamps a
day-of-month that does not exist in the target month to that month's last
day: Jan 31 + 1 month is Feb 29 (leap year) or Feb 28, and Feb 29 + 1 year is
Feb 28. Time of day and UTC offset are preserved.
"""

from datetime import datetime

from dateutil.relativedelta import relativedelta

from bizdesk.core.clock import as_utc, utc_now
from bizdesk.core.entities.reminder import ReminderFrequency

FREQUENCY_STEPS: dict[ReminderFrequency, relativedelta] = {
    ReminderFrequency.DAILY: relativedelta(days=1),
    ReminderFrequency.WEEKLY: relativedelta(weeks=1),
    ReminderFrequency.MONTHLY: relativedelta(months=1),
    ReminderFrequency.YEARLY: relativedelta(years=1),
}


def next_occurrence(
    current_due_date: datetime,
    frequency: ReminderFrequency,
    repeat_until: datetime | None = None,
    now: datetime | None = None,
) -> datetime | None:
    """
    Compute the due date of the occurrence after ``current_due_date``.

    Args:
        current_due_date: Due date of the pending occurrence
        frequency: Series frequency
        repeat_until: Optional inclusive end of the series
        now: Clock reading (defaults to the current UTC time)

    Returns:
        The next due date, or None when the series does not continue
    """
    if frequency == ReminderFrequency.ONCE:
        return None

    now = as_utc(now) if now is not None else utc_now()
    if repeat_until is not None and as_utc(repeat_until) < now:
        return None

    candidate = as_utc(current_due_date) + FREQUENCY_STEPS[frequency]

    if repeat_until is not None and candidate > as_utc(repeat_until):
        return None
    return candidate
