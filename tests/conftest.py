"""Pytest configuration and shared fixtures."""

from datetime import UTC, datetime

import pytest

from bizdesk.core.entities import (
    Client,
    ClientType,
    Reminder,
    ReminderFrequency,
    User,
)

# Fixed clock reading used across tests
NOW = datetime(2024, 3, 15, 9, 0, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def sample_user() -> User:
    """Owner of tenant 1."""
    return User(
        id=1,
        name="Ama Owusu",
        email="ama@example.com",
        phone="+233200000001",
        business_name="Ama's Salon",
    )


@pytest.fixture
def sample_client() -> Client:
    """A debtor client of tenant 1."""
    return Client(
        id=7,
        tenant_id=1,
        name="Kofi Mensah",
        email="kofi@example.com",
        business_type="retail",
        client_type=ClientType.DEBTOR,
    )


@pytest.fixture
def make_reminder():
    """Factory for reminders owned by tenant 1, due at NOW by default."""

    def _make(**overrides) -> Reminder:
        fields = {
            "id": 1,
            "tenant_id": 1,
            "title": "Shop rent",
            "due_date": NOW,
            "frequency": ReminderFrequency.ONCE,
        }
        fields.update(overrides)
        return Reminder(**fields)

    return _make
