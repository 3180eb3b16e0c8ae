"""API tests for user registration and profile endpoints."""

from httpx import AsyncClient


class TestUsersAPI:
    async def test_register(self, anon_client: AsyncClient, user_store):
        user_store.create.side_effect = lambda u: u.model_copy(update={"id": 3})

        response = await anon_client.post(
            "/api/users", json={"name": "Esi", "email": "Esi@Example.com"}
        )

        assert response.status_code == 201
        data = response.json()
        assert data["id"] == 3
        assert data["email"] == "esi@example.com"

    async def test_register_duplicate(self, anon_client: AsyncClient, user_store, sample_user):
        user_store.get_by_email.return_value = sample_user

        response = await anon_client.post(
            "/api/users", json={"name": "Ama", "email": "ama@example.com"}
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "DUPLICATE_USER"

    async def test_me_requires_header(self, anon_client: AsyncClient):
        assert (await anon_client.get("/api/users/me")).status_code == 401

    async def test_me(self, anon_client: AsyncClient):
        response = await anon_client.get("/api/users/me", headers={"X-User-Id": "1"})

        assert response.status_code == 200
        assert response.json()["business_name"] == "Ama's Salon"

    async def test_update_me(self, api_client: AsyncClient, user_store):
        user_store.update.side_effect = lambda u: u

        response = await api_client.put("/api/users/me", json={"phone": "+233209999999"})

        assert response.status_code == 200
        assert response.json()["phone"] == "+233209999999"
        assert response.json()["name"] == "Ama Owusu"

    async def test_delete_me(self, api_client: AsyncClient, user_store):
        user_store.delete.return_value = True

        response = await api_client.delete("/api/users/me")

        assert response.status_code == 204
        user_store.delete.assert_awaited_once_with(1)

    async def test_delete_me_requires_header(self, anon_client: AsyncClient, user_store):
        assert (await anon_client.delete("/api/users/me")).status_code == 401
        user_store.delete.assert_not_awaited()
