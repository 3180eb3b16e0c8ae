"""
Abstract interfaces for record storage.

Defines contracts for reminder, client, and user stores. Every tenant-owned
query takes an explicit ``tenant_id``; there is no implicit tenant lookup.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from bizdesk.core.entities.client import Client, ClientType
from bizdesk.core.entities.reminder import Reminder, ReminderStatus
from bizdesk.core.entities.user import User


class IReminderStore(ABC):
    """
    Abstract interface for reminder storage.

    The sweep relies on ``find_pending`` and partial ``update``; the
    completion workflow adds ``get`` and ``create``.
    """

    @abstractmethod
    async def find_pending(self) -> list[Reminder]:
        """Get every pending reminder across all tenants."""
        pass

    @abstractmethod
    async def get(self, reminder_id: int, tenant_id: int) -> Reminder | None:
        """Get a reminder owned by the given tenant."""
        pass

    @abstractmethod
    async def create(self, reminder: Reminder) -> Reminder:
        """Create a new reminder and assign its ID."""
        pass

    @abstractmethod
    async def update(self, reminder_id: int, fields: dict[str, Any]) -> Reminder:
        """
        Apply a partial update and return the stored reminder.

        Raises:
            ReminderNotFoundError: if no reminder has this ID
            DatabaseError: if the write is rejected
        """
        pass

    @abstractmethod
    async def delete(self, reminder_id: int, tenant_id: int) -> bool:
        """Delete a reminder owned by the given tenant."""
        pass

    @abstractmethod
    async def list_reminders(
        self,
        tenant_id: int,
        status: ReminderStatus | None = None,
        client_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Reminder]:
        """List a tenant's reminders ordered by due date."""
        pass

    @abstractmethod
    async def list_upcoming(
        self,
        tenant_id: int,
        now: datetime,
        within_days: int = 7,
        limit: int = 10,
    ) -> list[Reminder]:
        """List pending reminders due between now and now + within_days."""
        pass


class IClientStore(ABC):
    """Abstract interface for client storage."""

    @abstractmethod
    async def create(self, client: Client) -> Client:
        """Create a new client."""
        pass

    @abstractmethod
    async def get(self, client_id: int, tenant_id: int | None = None) -> Client | None:
        """Get a client, optionally restricted to a tenant."""
        pass

    @abstractmethod
    async def update(self, client: Client) -> Client:
        """Update an existing client."""
        pass

    @abstractmethod
    async def delete(self, client_id: int, tenant_id: int) -> bool:
        """Delete a client owned by the given tenant."""
        pass

    @abstractmethod
    async def list_clients(
        self,
        tenant_id: int,
        client_type: ClientType | None = None,
        search: str | None = None,
    ) -> list[Client]:
        """List a tenant's clients, optionally filtered."""
        pass


class IUserStore(ABC):
    """Abstract interface for user (tenant) storage."""

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user."""
        pass

    @abstractmethod
    async def get(self, user_id: int) -> User | None:
        """Get user by ID."""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> User | None:
        """Get user by (normalized) email."""
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Update an existing user."""
        pass

    @abstractmethod
    async def delete(self, user_id: int) -> bool:
        """Delete a user and, through the schema, every record they own."""
        pass
