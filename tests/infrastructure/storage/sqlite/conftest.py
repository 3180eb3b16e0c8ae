"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from bizdesk.config.settings import reset_settings
from bizdesk.core.entities.client import Client, ClientType
from bizdesk.core.entities.user import User
from bizdesk.infrastructure.storage.sqlite import (
    SQLiteClientStore,
    SQLiteUserStore,
    close_pool,
)
from bizdesk.infrastructure.storage.sqlite.migrations.migrator import initialize_database


@pytest.fixture
async def initialized_db(tmp_path: Path, monkeypatch) -> AsyncGenerator[Path, None]:
    """Point storage at a fresh temp database and apply the schema."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path))
    reset_settings()
    await close_pool()

    await initialize_database()
    yield tmp_path / "bizdesk.db"

    await close_pool()
    reset_settings()


@pytest.fixture
async def tenant(initialized_db) -> User:
    """A stored user that owns test records."""
    return await SQLiteUserStore().create(
        User(name="Ama Owusu", email="ama@example.com", business_name="Ama's Salon")
    )


@pytest.fixture
async def other_tenant(initialized_db) -> User:
    return await SQLiteUserStore().create(User(name="Yaw Boateng", email="yaw@example.com"))


@pytest.fixture
async def stored_client(tenant) -> Client:
    return await SQLiteClientStore().create(
        Client(
            tenant_id=tenant.id,
            name="Kofi Mensah",
            email="kofi@example.com",
            business_type="retail",
            client_type=ClientType.DEBTOR,
        )
    )
