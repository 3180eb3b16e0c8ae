"""Tests for SQLiteClientStore."""

import pytest

from bizdesk.core.entities.client import Client, ClientType
from bizdesk.infrastructure.storage.sqlite.client_store import SQLiteClientStore


class TestSQLiteClientStore:
    @pytest.fixture(autouse=True)
    def _setup(self, tenant, other_tenant):
        self.store = SQLiteClientStore()
        self.tenant_id = tenant.id
        self.other_tenant_id = other_tenant.id

    async def _create(self, name: str, email: str, **overrides) -> Client:
        return await self.store.create(
            Client(
                tenant_id=overrides.pop("tenant_id", self.tenant_id),
                name=name,
                email=email,
                business_type="retail",
                **overrides,
            )
        )

    async def test_get_scoping(self):
        client = await self._create("Kofi", "kofi@example.com")

        assert (await self.store.get(client.id, self.tenant_id)).name == "Kofi"
        assert await self.store.get(client.id, self.other_tenant_id) is None
        assert (await self.store.get(client.id)).id == client.id

    async def test_list_filters(self):
        await self._create("Kofi", "kofi@example.com", client_type=ClientType.DEBTOR)
        await self._create("Abena", "abena@example.com", client_type=ClientType.WORKER)
        await self._create("Elsewhere", "x@example.com", tenant_id=self.other_tenant_id)

        everyone = await self.store.list_clients(self.tenant_id)
        workers = await self.store.list_clients(self.tenant_id, client_type=ClientType.WORKER)
        found = await self.store.list_clients(self.tenant_id, search="kof")

        assert [c.name for c in everyone] == ["Abena", "Kofi"]
        assert [c.name for c in workers] == ["Abena"]
        assert [c.name for c in found] == ["Kofi"]

    async def test_update_and_delete(self):
        client = await self._create("Kofi", "kofi@example.com")
        client.phone = "+233200000000"
        await self.store.update(client)

        assert (await self.store.get(client.id, self.tenant_id)).phone == "+233200000000"
        assert await self.store.delete(client.id, self.other_tenant_id) is False
        assert await self.store.delete(client.id, self.tenant_id) is True
