"""Outbound notification adapters."""

from bizdesk.infrastructure.notifications.email_notifier import EmailNotifier
from bizdesk.infrastructure.notifications.smtp_transport import (
    DisabledEmailTransport,
    SMTPEmailTransport,
    create_email_transport,
)

# Singleton instance
_notifier: EmailNotifier | None = None


def get_notifier() -> EmailNotifier:
    """Get singleton email notifier built from settings."""
    global _notifier
    if _notifier is None:
        from bizdesk.config import get_settings

        settings = get_settings()
        _notifier = EmailNotifier(
            create_email_transport(settings.email),
            app_name=settings.app_name,
        )
    return _notifier


__all__ = [
    "EmailNotifier",
    "SMTPEmailTransport",
    "DisabledEmailTransport",
    "create_email_transport",
    "get_notifier",
]
