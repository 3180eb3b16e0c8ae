"""User (tenant) entity."""

import re
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from bizdesk.core.clock import utc_now

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def normalize_email(value: str) -> str:
    """Trim and lowercase an email address, rejecting malformed ones."""
    email = value.strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise ValueError("Please enter a valid email address")
    return email


class User(BaseModel):
    """An account owning a tenant's data. All records are scoped by user id."""

    id: int | None = None
    name: str = Field(..., min_length=1)
    email: str
    phone: str = ""
    business_name: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("email")
    @classmethod
    def _valid_email(cls, value: str) -> str:
        return normalize_email(value)

    @property
    def display_name(self) -> str:
        return self.business_name or self.name
