"""Reminder entity for scheduled payment and task tracking."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

from bizdesk.core.clock import as_utc, utc_now

DUE_DATE_FORMAT = "%B %d, %Y"


class ReminderFrequency(str, Enum):
    """How often a reminder series recurs."""

    ONCE = "once"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class ReminderStatus(str, Enum):
    """Lifecycle status of a single occurrence."""

    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Status moves only out of pending, never back
ALLOWED_TRANSITIONS: dict[ReminderStatus, frozenset[ReminderStatus]] = {
    ReminderStatus.PENDING: frozenset(
        {ReminderStatus.COMPLETED, ReminderStatus.CANCELLED}
    ),
    ReminderStatus.COMPLETED: frozenset(),
    ReminderStatus.CANCELLED: frozenset(),
}


def can_transition(current: ReminderStatus, target: ReminderStatus) -> bool:
    """Return True if a reminder may move from ``current`` to ``target``."""
    return current == target or target in ALLOWED_TRANSITIONS[current]


class Reminder(BaseModel):
    """
    A tenant-owned scheduled obligation ("schedule" in business terms).

    ``due_date`` is always the currently pending occurrence; completing a
    recurring reminder spawns a new record for the next one. ``last_notified``
    records the most recent notification sent for this occurrence and is the
    only state the sweep needs to stay idempotent across restarts.
    """

    id: int | None = None
    tenant_id: int
    title: str = Field(..., min_length=1)
    description: str = ""
    client_id: int | None = None
    due_date: datetime
    frequency: ReminderFrequency = ReminderFrequency.ONCE
    amount: float | None = None
    status: ReminderStatus = ReminderStatus.PENDING
    notify_user: bool = True
    notify_client: bool = False
    user_notification_message: str | None = None
    client_notification_message: str | None = None
    advance_notification_days: int = Field(default=0, ge=0)
    repeat_until: datetime | None = None
    last_notified: datetime | None = None
    next_due_date: datetime | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator(
        "due_date",
        "repeat_until",
        "last_notified",
        "next_due_date",
        "created_at",
        "updated_at",
    )
    @classmethod
    def _to_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value) if value is not None else None

    @model_validator(mode="after")
    def _once_has_no_next(self) -> "Reminder":
        if self.frequency == ReminderFrequency.ONCE:
            self.next_due_date = None
        return self

    @property
    def is_recurring(self) -> bool:
        return self.frequency != ReminderFrequency.ONCE

    @property
    def is_overdue(self) -> bool:
        """Check if the reminder is past due and still pending."""
        if self.status != ReminderStatus.PENDING:
            return False
        return self.due_date < utc_now()

    @property
    def formatted_due_date(self) -> str:
        return self.due_date.strftime(DUE_DATE_FORMAT)

    @property
    def user_message(self) -> str:
        """Message body for the owning user, falling back to the default."""
        if self.user_notification_message:
            return self.user_notification_message
        return f"Reminder: {self.title} is due on {self.formatted_due_date}"

    @property
    def client_message(self) -> str:
        """Message body for the linked client, falling back to the default."""
        if self.client_notification_message:
            return self.client_notification_message
        return (
            f"This is a reminder that {self.title} is due on "
            f"{self.formatted_due_date}"
        )


class ReminderUpdate(BaseModel):
    """
    Partial update for a reminder.

    Only fields explicitly set by the caller are applied; use
    ``model_dump(exclude_unset=True)`` to obtain the changes.
    """

    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    client_id: int | None = None
    due_date: datetime | None = None
    frequency: ReminderFrequency | None = None
    amount: float | None = None
    status: ReminderStatus | None = None
    notify_user: bool | None = None
    notify_client: bool | None = None
    user_notification_message: str | None = None
    client_notification_message: str | None = None
    advance_notification_days: int | None = Field(default=None, ge=0)
    repeat_until: datetime | None = None

    @field_validator("due_date", "repeat_until")
    @classmethod
    def _to_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value) if value is not None else None
