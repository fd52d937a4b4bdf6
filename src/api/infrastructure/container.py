"""Application container.

Holds the process-wide collaborators built once by the composition root
(``main.build_container``). FastAPI dependencies read it from
``app.state.container``; nothing else is global.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx
from fastapi import Request

from infrastructure.outbox.relay import OutboxRelay
from infrastructure.outbox.router import FanoutRouter
from infrastructure.settings import Settings
from shared_kernel.cache.ports import ICache
from shared_kernel.clock import Clock
from shared_kernel.events import DomainEventSubscriber
from shared_kernel.outbox.ports import EventSerializer

if TYPE_CHECKING:
    from redis.asyncio import Redis


@dataclass
class AppContainer:
    """Process-wide collaborators.

    Attributes:
        settings: Loaded application settings
        clock: Time source shared by the cache and the relay
        cache: Tiered cache used by read paths and invalidation
        router: Fanout router the relay dispatches through
        relay: The outbox relay, None when disabled in this process
        redis: Shared Redis client (cache tier, stream, channels)
        search_client: HTTP client of the search indexer
        subscribers: Post-commit change subscribers, in invocation order
        serializers: Outbox payload serializers keyed by bounded context
    """

    settings: Settings
    clock: Clock
    cache: ICache
    router: FanoutRouter
    relay: OutboxRelay | None
    redis: Redis
    search_client: httpx.AsyncClient
    subscribers: list[DomainEventSubscriber] = field(default_factory=list)
    serializers: dict[str, EventSerializer] = field(default_factory=dict)


def get_container(request: Request) -> AppContainer:
    """FastAPI dependency returning the container of the running app."""
    return request.app.state.container
