"""Integration tests for the /users API with the full application lifespan.

Requirements:
    - PostgreSQL reachable with the TENANTCORE_DB_* settings
    - Redis reachable with TENANTCORE_CACHE_REDIS_URL
"""

import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient

from infrastructure.settings import get_outbox_settings, get_settings
from main import app

pytestmark = pytest.mark.integration

ADA = {
    "first_name": "Ada",
    "last_name": "Lovelace",
    "email": "ada@example.com",
    "date_of_birth": "1990-12-10",
}


@pytest_asyncio.fixture
async def async_client(engine, monkeypatch):
    """HTTP client against the app with its lifespan; the relay stays off."""
    monkeypatch.setenv("TENANTCORE_OUTBOX_ENABLED", "false")
    get_settings.cache_clear()
    get_outbox_settings.cache_clear()
    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            await app.state.container.redis.flushdb()
            yield client
    get_outbox_settings.cache_clear()


class TestUsersApi:
    @pytest.mark.asyncio
    async def test_create_then_get(self, async_client):
        created = await async_client.post(
            "/users", json=ADA, headers={"X-Tenant-ID": "acme"}
        )
        user_id = created.json()["id"]

        response = await async_client.get(
            f"/users/{user_id}", headers={"X-Tenant-ID": "acme"}
        )

        assert created.status_code == 201
        assert response.status_code == 200
        assert response.json()["full_name"] == "Ada Lovelace"

    @pytest.mark.asyncio
    async def test_user_is_invisible_to_other_tenants(self, async_client):
        created = await async_client.post(
            "/users", json=ADA, headers={"X-Tenant-ID": "acme"}
        )

        response = await async_client.get(
            f"/users/{created.json()['id']}", headers={"X-Tenant-ID": "globex"}
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_is_visible_on_next_read(self, async_client):
        headers = {"X-Tenant-ID": "acme"}
        user_id = (await async_client.post("/users", json=ADA, headers=headers)).json()["id"]
        await async_client.get(f"/users/{user_id}", headers=headers)

        await async_client.patch(
            f"/users/{user_id}", json={"last_name": "King"}, headers=headers
        )
        response = await async_client.get(f"/users/{user_id}", headers=headers)

        assert response.json()["full_name"] == "Ada King"

    @pytest.mark.asyncio
    async def test_duplicate_email_is_conflict(self, async_client):
        headers = {"X-Tenant-ID": "acme"}
        await async_client.post("/users", json=ADA, headers=headers)

        response = await async_client.post("/users", json=ADA, headers=headers)

        assert response.status_code == 409
