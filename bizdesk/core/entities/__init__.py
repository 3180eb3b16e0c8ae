"""Core domain entities."""

from bizdesk.core.entities.catalog import Product, Service
from bizdesk.core.entities.client import Client, ClientType
from bizdesk.core.entities.reminder import (
    Reminder,
    ReminderFrequency,
    ReminderStatus,
    ReminderUpdate,
    can_transition,
)
from bizdesk.core.entities.sale import PaymentMethod, Sale, SaleType
from bizdesk.core.entities.user import User

__all__ = [
    # Reminder
    "Reminder",
    "ReminderFrequency",
    "ReminderStatus",
    "ReminderUpdate",
    "can_transition",
    # Contacts
    "Client",
    "ClientType",
    "User",
    # Catalog
    "Product",
    "Service",
    # Sales
    "Sale",
    "SaleType",
    "PaymentMethod",
]
