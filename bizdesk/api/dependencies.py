"""
Dependency injection container for FastAPI.

Provides stores, use cases and the calling tenant to route handlers.
Use cases receive their stores through ``Depends`` so tests can swap any
of them with ``app.dependency_overrides``.
"""

from datetime import timedelta
from functools import lru_cache

from fastapi import Depends, Header

from bizdesk.application.use_cases import (
    CompleteReminderUseCase,
    CreateReminderUseCase,
    DeleteAllSalesUseCase,
    DeleteSaleUseCase,
    RecordSaleUseCase,
    SweepDueRemindersUseCase,
    UpdateReminderUseCase,
    UpdateSaleUseCase,
)
from bizdesk.config import Settings, get_settings
from bizdesk.core.entities.user import User
from bizdesk.core.exceptions import UnauthorizedError
from bizdesk.core.interfaces import (
    ICatalogStore,
    IClientStore,
    INotifier,
    IReminderStore,
    ISalesStore,
    IUserStore,
)
from bizdesk.infrastructure.notifications import get_notifier
from bizdesk.infrastructure.storage.sqlite import (
    get_catalog_store,
    get_client_store,
    get_reminder_store,
    get_sales_store,
    get_user_store,
)


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Store dependencies
async def get_rem_store() -> IReminderStore:
    """Get reminder store."""
    return await get_reminder_store()


async def get_cli_store() -> IClientStore:
    """Get client store."""
    return await get_client_store()


async def get_usr_store() -> IUserStore:
    """Get user store."""
    return await get_user_store()


async def get_cat_store() -> ICatalogStore:
    """Get product and service catalog store."""
    return await get_catalog_store()


async def get_sale_store() -> ISalesStore:
    """Get sales store."""
    return await get_sales_store()


def get_email_notifier() -> INotifier:
    """Get reminder notifier."""
    return get_notifier()


# Tenant resolution
async def get_current_user(
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
    user_store: IUserStore = Depends(get_usr_store),
) -> User:
    """
    Resolve the calling tenant from the ``X-User-Id`` header.

    Raises:
        UnauthorizedError: if the header is missing, malformed or unknown
    """
    if not x_user_id:
        raise UnauthorizedError("Missing X-User-Id header")
    try:
        user_id = int(x_user_id)
    except ValueError:
        raise UnauthorizedError("X-User-Id must be an integer") from None

    user = await user_store.get(user_id)
    if user is None:
        raise UnauthorizedError(f"Unknown user: {user_id}")
    return user


# Reminder use case dependencies
def get_create_reminder_use_case(
    reminder_store: IReminderStore = Depends(get_rem_store),
    client_store: IClientStore = Depends(get_cli_store),
) -> CreateReminderUseCase:
    """Get create reminder use case."""
    return CreateReminderUseCase(reminder_store, client_store)


def get_update_reminder_use_case(
    reminder_store: IReminderStore = Depends(get_rem_store),
    client_store: IClientStore = Depends(get_cli_store),
) -> UpdateReminderUseCase:
    """Get update reminder use case."""
    return UpdateReminderUseCase(reminder_store, client_store)


def get_complete_reminder_use_case(
    reminder_store: IReminderStore = Depends(get_rem_store),
    user_store: IUserStore = Depends(get_usr_store),
    client_store: IClientStore = Depends(get_cli_store),
    notifier: INotifier = Depends(get_email_notifier),
) -> CompleteReminderUseCase:
    """Get complete reminder use case."""
    return CompleteReminderUseCase(reminder_store, user_store, client_store, notifier)


def get_sweep_use_case(
    reminder_store: IReminderStore = Depends(get_rem_store),
    user_store: IUserStore = Depends(get_usr_store),
    client_store: IClientStore = Depends(get_cli_store),
    notifier: INotifier = Depends(get_email_notifier),
    settings: Settings = Depends(get_app_settings),
) -> SweepDueRemindersUseCase:
    """Get sweep use case."""
    return SweepDueRemindersUseCase(
        reminder_store,
        user_store,
        client_store,
        notifier,
        tolerance=timedelta(seconds=settings.scheduler.tolerance_seconds),
    )


# Sales use case dependencies
def get_record_sale_use_case(
    catalog_store: ICatalogStore = Depends(get_cat_store),
    sales_store: ISalesStore = Depends(get_sale_store),
    client_store: IClientStore = Depends(get_cli_store),
) -> RecordSaleUseCase:
    """Get record sale use case."""
    return RecordSaleUseCase(catalog_store, sales_store, client_store)


def get_delete_sale_use_case(
    catalog_store: ICatalogStore = Depends(get_cat_store),
    sales_store: ISalesStore = Depends(get_sale_store),
) -> DeleteSaleUseCase:
    """Get delete sale use case."""
    return DeleteSaleUseCase(catalog_store, sales_store)


def get_update_sale_use_case(
    catalog_store: ICatalogStore = Depends(get_cat_store),
    sales_store: ISalesStore = Depends(get_sale_store),
    client_store: IClientStore = Depends(get_cli_store),
) -> UpdateSaleUseCase:
    """Get update sale use case."""
    return UpdateSaleUseCase(catalog_store, sales_store, client_store)


def get_delete_all_sales_use_case(
    catalog_store: ICatalogStore = Depends(get_cat_store),
    sales_store: ISalesStore = Depends(get_sale_store),
) -> DeleteAllSalesUseCase:
    """Get delete-all sales use case."""
    return DeleteAllSalesUseCase(catalog_store, sales_store)
