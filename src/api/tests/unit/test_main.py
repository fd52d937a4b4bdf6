"""Unit tests for the composition root.

Clients are created but never connect; no Redis, database or search index
is needed.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, Mock, patch

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from infrastructure.cache.redis import close_redis
from infrastructure.database.dependencies import close_database_connections
from infrastructure.observability import StartupProbe
from infrastructure.outbox import OutboxRelay
from infrastructure.settings import Settings, get_outbox_settings
from main import app, build_container, shutdown_container
from shared_kernel.clock import FrozenClock
from users.application.subscribers import UserChangeLogSubscriber


@pytest.fixture
def relay_disabled(monkeypatch):
    monkeypatch.setenv("TENANTCORE_OUTBOX_ENABLED", "false")
    get_outbox_settings.cache_clear()
    yield
    get_outbox_settings.cache_clear()


@pytest_asyncio.fixture
async def release_clients():
    yield
    await close_redis()
    await close_database_connections()


class TestBuildContainer:
    @pytest.mark.asyncio
    async def test_routes_user_changes(self, release_clients):
        container = build_container(Settings(), FrozenClock())

        assert container.router.supported_event_types() == frozenset(
            {"UserCreated", "UserUpdated"}
        )
        assert set(container.serializers) == {"users"}
        await container.search_client.aclose()

    @pytest.mark.asyncio
    async def test_relay_is_built_when_enabled(self, release_clients):
        container = build_container(Settings(), FrozenClock())

        assert isinstance(container.relay, OutboxRelay)
        assert not container.relay.is_running
        await container.search_client.aclose()

    @pytest.mark.asyncio
    async def test_relay_can_be_disabled(self, relay_disabled, release_clients):
        container = build_container(Settings(), FrozenClock())

        assert container.relay is None
        await container.search_client.aclose()

    @pytest.mark.asyncio
    async def test_change_log_subscriber_is_registered(self, release_clients):
        container = build_container(Settings(), FrozenClock())

        assert [type(s) for s in container.subscribers] == [UserChangeLogSubscriber]
        await container.search_client.aclose()


class TestShutdownContainer:
    @pytest.mark.asyncio
    async def test_every_step_runs_even_if_one_fails(self):
        container = Mock()
        container.relay.stop = AsyncMock(side_effect=RuntimeError("stuck"))
        container.search_client.aclose = AsyncMock()
        probe = Mock(spec=StartupProbe)

        with (
            patch("main.close_redis", new=AsyncMock()) as redis_close,
            patch(
                "main.close_database_connections",
                new=AsyncMock(side_effect=OSError("gone")),
            ) as db_close,
        ):
            await shutdown_container(container, probe)

        container.search_client.aclose.assert_awaited_once()
        redis_close.assert_awaited_once()
        db_close.assert_awaited_once()
        failed_steps = [c.args[0] for c in probe.shutdown_step_failed.call_args_list]
        assert failed_steps == ["outbox_relay", "database"]
        probe.application_stopped.assert_called_once()


class TestHealth:
    def test_health_check(self):
        response = TestClient(app).get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
