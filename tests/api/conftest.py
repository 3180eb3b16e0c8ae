"""Fixtures for API tests: every store, the notifier and the caller are mocked."""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from bizdesk.api.dependencies import (
    get_cat_store,
    get_cli_store,
    get_current_user,
    get_email_notifier,
    get_rem_store,
    get_sale_store,
    get_usr_store,
)
from bizdesk.api.main import app
from bizdesk.core.interfaces.notifier import CompletionNotificationResult, NotificationResult


@pytest.fixture
def reminder_store():
    return AsyncMock()


@pytest.fixture
def client_store(sample_client):
    store = AsyncMock()
    store.get.return_value = sample_client
    return store


@pytest.fixture
def user_store(sample_user):
    store = AsyncMock()
    store.get.return_value = sample_user
    store.get_by_email.return_value = None
    return store


@pytest.fixture
def catalog_store():
    return AsyncMock()


@pytest.fixture
def sales_store():
    return AsyncMock()


@pytest.fixture
def notifier():
    notifier = AsyncMock()
    notifier.notify_user_of_reminder.return_value = NotificationResult.success("ama@example.com")
    notifier.notify_client_of_reminder.return_value = NotificationResult.success("kofi@example.com")
    notifier.notify_completion.return_value = CompletionNotificationResult()
    return notifier


@pytest.fixture
def overrides(reminder_store, client_store, user_store, catalog_store, sales_store, notifier):
    """Dependency overrides without the caller; add ``get_current_user`` to authenticate."""
    app.dependency_overrides.update(
        {
            get_rem_store: lambda: reminder_store,
            get_cli_store: lambda: client_store,
            get_usr_store: lambda: user_store,
            get_cat_store: lambda: catalog_store,
            get_sale_store: lambda: sales_store,
            get_email_notifier: lambda: notifier,
        }
    )
    yield app.dependency_overrides
    app.dependency_overrides.clear()


@pytest.fixture
async def anon_client(overrides):
    """Async client that authenticates only through the X-User-Id header."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def api_client(overrides, sample_user):
    """Async client acting as ``sample_user``."""
    overrides[get_current_user] = lambda: sample_user
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
