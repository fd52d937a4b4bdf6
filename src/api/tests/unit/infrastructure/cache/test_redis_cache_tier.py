"""Unit tests for RedisCacheTier using fakeredis."""

from dataclasses import dataclass
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import fakeredis.aioredis
import pytest
import pytest_asyncio
from redis.exceptions import ConnectionError as RedisConnectionError

from infrastructure.cache.local import LocalCache
from infrastructure.cache.orchestrator import TieredCache
from infrastructure.cache.redis import RedisCacheTier
from shared_kernel.cache.exceptions import CacheTierUnavailableError
from shared_kernel.cache.value_objects import CacheTierName


@dataclass(frozen=True)
class Point:
    x: int
    y: int


@pytest_asyncio.fixture
async def redis_client():
    client = fakeredis.aioredis.FakeRedis(decode_responses=True)
    yield client
    await client.flushall()
    await client.aclose()


@pytest.fixture
def tier(redis_client, clock):
    return RedisCacheTier(redis_client, clock, key_prefix="tc")


class TestRedisCacheTier:
    @pytest.mark.asyncio
    async def test_value_round_trips_as_json(self, tier, clock):
        await tier.set("k", {"id": "1", "age": 30}, clock.now() + timedelta(minutes=5))

        entry = await tier.get("k")

        assert entry is not None
        assert entry.value == {"id": "1", "age": 30}
        assert entry.tier is CacheTierName.SHARED

    @pytest.mark.asyncio
    async def test_remaining_lifetime_is_read_back(self, tier, clock):
        await tier.set("k", "v", clock.now() + timedelta(minutes=5))

        entry = await tier.get("k")

        assert entry.expires_at is not None
        assert clock.now() + timedelta(minutes=4) < entry.expires_at
        assert entry.expires_at <= clock.now() + timedelta(minutes=5)

    @pytest.mark.asyncio
    async def test_keys_are_namespaced_by_prefix(self, tier, redis_client, clock):
        await tier.set("k", "v", clock.now() + timedelta(minutes=5))

        assert await redis_client.exists("tc:k") == 1
        assert await redis_client.exists("k") == 0

    @pytest.mark.asyncio
    async def test_missing_key_returns_none(self, tier):
        assert await tier.get("absent") is None

    @pytest.mark.asyncio
    async def test_delete_removes_key(self, tier, clock):
        await tier.set("k", "v", clock.now() + timedelta(minutes=5))

        await tier.delete("k")

        assert await tier.get("k") is None

    @pytest.mark.asyncio
    async def test_past_expiry_deletes_instead_of_writing(self, tier, redis_client, clock):
        await tier.set("k", "v", clock.now() + timedelta(minutes=5))

        await tier.set("k", "v2", clock.now() - timedelta(seconds=1))

        assert await redis_client.exists("tc:k") == 0


class TestRedisCacheTierErrors:
    """Redis errors surface as CacheTierUnavailableError."""

    @pytest.mark.asyncio
    async def test_set_failure_is_wrapped(self, clock):
        client = MagicMock()
        client.set = AsyncMock(side_effect=RedisConnectionError("refused"))
        tier = RedisCacheTier(client, clock)

        with pytest.raises(CacheTierUnavailableError) as exc_info:
            await tier.set("k", "v", clock.now() + timedelta(minutes=1))

        assert exc_info.value.operation == "set"
        assert exc_info.value.key == "k"

    @pytest.mark.asyncio
    async def test_delete_failure_is_wrapped(self, clock):
        client = MagicMock()
        client.delete = AsyncMock(side_effect=RedisConnectionError("refused"))
        tier = RedisCacheTier(client, clock)

        with pytest.raises(CacheTierUnavailableError):
            await tier.delete("k")

    @pytest.mark.asyncio
    async def test_unreadable_value_is_wrapped(self, tier, redis_client):
        await redis_client.set("tc:k", "not-json{", px=60_000)

        with pytest.raises(CacheTierUnavailableError) as exc_info:
            await tier.get("k")

        assert exc_info.value.operation == "get"

    @pytest.mark.asyncio
    async def test_unserializable_value_is_wrapped(self, tier, redis_client, clock):
        with pytest.raises(CacheTierUnavailableError) as exc_info:
            await tier.set("k", Point(1, 2), clock.now() + timedelta(minutes=1))

        assert exc_info.value.operation == "set"
        assert await redis_client.exists("tc:k") == 0


class TestTieredCacheOverRedis:
    """Values the shared tier cannot hold degrade to a miss or a no-op."""

    @pytest.fixture
    def cache(self, tier, clock):
        return TieredCache(local=LocalCache(clock), shared=tier, clock=clock)

    @pytest.mark.asyncio
    async def test_corrupt_shared_value_falls_through_to_loader(
        self, cache, redis_client
    ):
        await redis_client.set("tc:k", "not-json{", px=60_000)
        loader = AsyncMock(return_value={"id": "1"})

        result = await cache.get_or_create("k", loader)

        assert result == {"id": "1"}
        loader.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unserializable_loaded_value_is_still_returned(
        self, cache, redis_client
    ):
        loader = AsyncMock(return_value=Point(1, 2))

        assert await cache.get_or_create("k", loader) == Point(1, 2)
        assert await cache.get_or_create("k", loader) == Point(1, 2)

        loader.assert_awaited_once()
        assert await redis_client.exists("tc:k") == 0
