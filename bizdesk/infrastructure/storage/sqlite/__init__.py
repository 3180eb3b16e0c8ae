"""SQLite storage implementations."""

from bizdesk.infrastructure.storage.sqlite.catalog_store import SQLiteCatalogStore
from bizdesk.infrastructure.storage.sqlite.client_store import SQLiteClientStore
from bizdesk.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from bizdesk.infrastructure.storage.sqlite.reminder_store import SQLiteReminderStore
from bizdesk.infrastructure.storage.sqlite.sales_store import SQLiteSalesStore
from bizdesk.infrastructure.storage.sqlite.user_store import SQLiteUserStore

# Aliases used by the application lifespan
get_connection_pool = get_pool
close_connection_pool = close_pool

# Singleton instances
_reminder_store: SQLiteReminderStore | None = None
_client_store: SQLiteClientStore | None = None
_user_store: SQLiteUserStore | None = None
_catalog_store: SQLiteCatalogStore | None = None
_sales_store: SQLiteSalesStore | None = None


async def get_reminder_store() -> SQLiteReminderStore:
    """Get singleton reminder store instance."""
    global _reminder_store
    if _reminder_store is None:
        _reminder_store = SQLiteReminderStore()
    return _reminder_store


async def get_client_store() -> SQLiteClientStore:
    """Get singleton client store instance."""
    global _client_store
    if _client_store is None:
        _client_store = SQLiteClientStore()
    return _client_store


async def get_user_store() -> SQLiteUserStore:
    """Get singleton user store instance."""
    global _user_store
    if _user_store is None:
        _user_store = SQLiteUserStore()
    return _user_store


async def get_catalog_store() -> SQLiteCatalogStore:
    """Get singleton catalog store instance."""
    global _catalog_store
    if _catalog_store is None:
        _catalog_store = SQLiteCatalogStore()
    return _catalog_store


async def get_sales_store() -> SQLiteSalesStore:
    """Get singleton sales store instance."""
    global _sales_store
    if _sales_store is None:
        _sales_store = SQLiteSalesStore()
    return _sales_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    "get_connection_pool",
    "close_connection_pool",
    # Store classes
    "SQLiteReminderStore",
    "SQLiteClientStore",
    "SQLiteUserStore",
    "SQLiteCatalogStore",
    "SQLiteSalesStore",
    # Factory functions
    "get_reminder_store",
    "get_client_store",
    "get_user_store",
    "get_catalog_store",
    "get_sales_store",
]
