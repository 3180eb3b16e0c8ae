"""
Abstract interfaces for outbound notifications.

A notifier dispatches reminder and completion notices; each call succeeds or
fails independently and reports the outcome instead of aborting its caller.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from bizdesk.core.entities.client import Client
from bizdesk.core.entities.reminder import Reminder
from bizdesk.core.entities.user import User


@dataclass
class NotificationResult:
    """Outcome of a single notification."""

    ok: bool
    recipient: str | None = None
    error: str | None = None

    @classmethod
    def success(cls, recipient: str) -> "NotificationResult":
        return cls(ok=True, recipient=recipient)

    @classmethod
    def failure(cls, recipient: str | None, error: str) -> "NotificationResult":
        return cls(ok=False, recipient=recipient, error=error)


@dataclass
class CompletionNotificationResult:
    """Per-recipient outcomes of a completion notice. ``None`` means not attempted."""

    user: NotificationResult | None = None
    client: NotificationResult | None = None

    @property
    def attempted(self) -> list[NotificationResult]:
        return [r for r in (self.user, self.client) if r is not None]

    @property
    def failures(self) -> list[NotificationResult]:
        return [r for r in self.attempted if not r.ok]


class IEmailTransport(ABC):
    """Sends a single email."""

    @abstractmethod
    async def send(
        self, to: str, subject: str, text: str, html: str | None = None
    ) -> None:
        """
        Send an email.

        Raises:
            NotifierError: if the message could not be delivered
        """
        pass


class INotifier(ABC):
    """Best-effort reminder notification dispatch."""

    @abstractmethod
    async def notify_user_of_reminder(
        self, user: User, reminder: Reminder
    ) -> NotificationResult:
        """Notify the owning user that a reminder is due (or coming up)."""
        pass

    @abstractmethod
    async def notify_client_of_reminder(
        self, client: Client, reminder: Reminder
    ) -> NotificationResult:
        """Notify the linked client that a reminder is due (or coming up)."""
        pass

    @abstractmethod
    async def notify_completion(
        self,
        reminder: Reminder,
        actor: User | None,
        message: str,
        *,
        to_user: bool,
        to_client: bool,
        client: Client | None = None,
    ) -> CompletionNotificationResult:
        """
        Send a completion notice to the user and/or the linked client.

        ``actor`` is the tenant user; it may be None when only the client
        is being told.
        """
        pass
