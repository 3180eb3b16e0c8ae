"""Client relationship entity."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from bizdesk.core.clock import utc_now
from bizdesk.core.entities.user import normalize_email


class ClientType(str, Enum):
    """How a client relates to the business."""

    DEBTOR = "debtor"
    WORKER = "worker"
    OTHER = "other"


class Client(BaseModel):
    """
    A contact owned by a tenant.

    Referenced (not owned) by reminders and sales; the email address is the
    channel reminder notifications are delivered to.
    """

    id: int | None = None
    tenant_id: int
    name: str = Field(..., min_length=1)
    email: str
    phone: str = ""
    business_type: str = Field(..., min_length=1)
    client_type: ClientType = ClientType.OTHER
    notes: str = ""
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("email")
    @classmethod
    def _valid_email(cls, value: str) -> str:
        return normalize_email(value)

    @field_validator("name", "business_type")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()
