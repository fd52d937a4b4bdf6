"""Main FastAPI application entry point and composition root."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from infrastructure.cache import LocalCache, RedisCacheTier, TieredCache, get_redis
from infrastructure.cache.redis import close_redis
from infrastructure.container import AppContainer
from infrastructure.database.dependencies import (
    close_database_connections,
    get_write_engine,
    get_write_sessionmaker,
)
from infrastructure.database.models import Base
from infrastructure.fanout import (
    HttpSearchIndexer,
    RedisChannelNotifier,
    RedisStreamPublisher,
    create_search_client,
)
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe, StartupProbe
from infrastructure.outbox import FanoutRouter, OutboxRelay
from infrastructure.settings import Settings, get_settings
from infrastructure.version import __version__
from shared_kernel.clock import Clock, SystemClock
from shared_kernel.outbox.observability import DefaultOutboxRelayProbe
from users.application.subscribers import UserChangeLogSubscriber
from users.infrastructure.models import UserModel  # noqa: F401 - registers the table
from users.infrastructure.outbox import UserEventSerializer, UserFanoutHandler
from users.presentation import routes as user_routes


def build_container(
    settings: Settings | None = None,
    clock: Clock | None = None,
) -> AppContainer:
    """Wire every process-wide collaborator.

    Connections are opened lazily by the clients themselves; nothing here
    performs I/O.
    """
    settings = settings or get_settings()
    clock = clock or SystemClock()

    redis = get_redis(settings.cache.redis_url)
    cache = TieredCache(
        local=LocalCache(clock, max_entries=settings.cache.local_max_entries),
        shared=RedisCacheTier(redis, clock, key_prefix=settings.cache.key_prefix),
        clock=clock,
        default_ttl=settings.cache.default_ttl,
        skew=settings.cache.skew,
    )

    search_client = create_search_client(
        settings.fanout.search_url, settings.fanout.request_timeout_seconds
    )
    relay_probe = DefaultOutboxRelayProbe()
    router = FanoutRouter(probe=relay_probe)
    router.register(
        UserFanoutHandler(
            indexer=HttpSearchIndexer(search_client),
            publisher=RedisStreamPublisher(redis, settings.fanout.stream_name),
            notifier=RedisChannelNotifier(redis, settings.fanout.notify_channel_prefix),
            index_name=settings.fanout.search_index,
        ),
        context_name="users",
    )

    relay = None
    if settings.outbox.enabled:
        relay = OutboxRelay(
            session_factory=get_write_sessionmaker(),
            dispatcher=router,
            clock=clock,
            probe=relay_probe,
            batch_size=settings.outbox.batch_size,
            poll_interval=settings.outbox.poll_interval,
        )

    return AppContainer(
        settings=settings,
        clock=clock,
        cache=cache,
        router=router,
        relay=relay,
        redis=redis,
        search_client=search_client,
        subscribers=[UserChangeLogSubscriber()],
        serializers={"users": UserEventSerializer()},
    )


async def shutdown_container(
    container: AppContainer, probe: StartupProbe | None = None
) -> None:
    """Stop the relay, then release every connection the container holds.

    Each step runs even if an earlier one failed.
    """
    probe = probe or DefaultStartupProbe()

    if container.relay is not None:
        try:
            await container.relay.stop()
        except Exception as e:
            probe.shutdown_step_failed("outbox_relay", f"{type(e).__name__}: {e}")

    steps = (
        ("search_client", container.search_client.aclose),
        ("redis", close_redis),
        ("database", close_database_connections),
    )
    for name, close in steps:
        try:
            await close()
        except Exception as e:
            probe.shutdown_step_failed(name, f"{type(e).__name__}: {e}")

    probe.application_stopped()


@asynccontextmanager
async def tenantcore_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration and the composition root
    - Outbox relay start/stop
    - Redis, HTTP and database connection cleanup on shutdown
    """
    settings = get_settings()
    configure_logging(debug=settings.debug)
    probe = DefaultStartupProbe()

    if settings.create_schema:
        async with get_write_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    container = build_container(settings)
    app.state.container = container
    probe.application_started(settings.app_name, __version__)

    if container.relay is not None:
        await container.relay.start()
    else:
        probe.outbox_relay_disabled()

    try:
        yield
    finally:
        await shutdown_container(container, probe)


app = FastAPI(
    title="tenantcore API",
    description="Multi-tenant user service with tiered caching and a transactional outbox",
    version=__version__,
    lifespan=tenantcore_lifespan,
)

app.include_router(user_routes.router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}
