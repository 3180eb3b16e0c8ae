"""Core interfaces (ports) for dependency injection."""

from bizdesk.core.interfaces.catalog_store import ICatalogStore
from bizdesk.core.interfaces.notifier import (
    CompletionNotificationResult,
    IEmailTransport,
    INotifier,
    NotificationResult,
)
from bizdesk.core.interfaces.sales_store import ISalesStore
from bizdesk.core.interfaces.storage import IClientStore, IReminderStore, IUserStore

__all__ = [
    # Storage
    "IReminderStore",
    "IClientStore",
    "IUserStore",
    "ICatalogStore",
    "ISalesStore",
    # Notifications
    "INotifier",
    "IEmailTransport",
    "NotificationResult",
    "CompletionNotificationResult",
]
