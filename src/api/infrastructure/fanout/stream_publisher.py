"""Redis stream adapter for integration events.

Each event is appended with XADD. The outbox entry id travels as
``message_id``, and a marker key ``<stream>:published:<message_id>`` is
written in the same MULTI/EXEC as the stream entry. A replay of an already
published entry finds the marker and is skipped, so relay retries after a
partial fanout failure do not duplicate stream entries while the marker
lives.
"""

from __future__ import annotations

import json
from datetime import timedelta
from typing import TYPE_CHECKING

from redis.exceptions import RedisError

from shared_kernel.fanout.exceptions import FanoutError
from shared_kernel.fanout.observability import DefaultFanoutProbe, FanoutProbe
from shared_kernel.fanout.value_objects import IntegrationEvent

if TYPE_CHECKING:
    from redis.asyncio import Redis

TARGET = "message_bus"

DEFAULT_DEDUP_WINDOW = timedelta(hours=24)


class RedisStreamPublisher:
    """IntegrationEventPublisher writing to a single Redis stream."""

    def __init__(
        self,
        client: Redis,
        stream_name: str,
        probe: FanoutProbe | None = None,
        dedup_window: timedelta = DEFAULT_DEDUP_WINDOW,
    ) -> None:
        if dedup_window <= timedelta(0):
            raise ValueError("dedup_window must be positive")
        self._client = client
        self._stream_name = stream_name
        self._probe = probe or DefaultFanoutProbe()
        self._dedup_window = dedup_window

    def marker_key(self, message_id: str) -> str:
        return f"{self._stream_name}:published:{message_id}"

    async def publish(self, event: IntegrationEvent) -> None:
        marker = self.marker_key(event.message_id)
        fields = {
            "message_id": event.message_id,
            "event_type": event.event_type,
            "tenant_id": event.tenant_id,
            "occurred_at": event.occurred_at.isoformat(),
            "data": json.dumps(event.data),
        }
        try:
            if await self._client.exists(marker):
                self._probe.delivery_skipped(TARGET, event.message_id)
                return
            async with self._client.pipeline(transaction=True) as pipe:
                pipe.xadd(self._stream_name, fields)
                pipe.set(marker, "1", ex=self._dedup_window)
                await pipe.execute()
        except RedisError as e:
            error = f"{type(e).__name__}: {e}"
            self._probe.delivery_failed(TARGET, event.message_id, error)
            raise FanoutError(TARGET, error) from e

        self._probe.delivered(TARGET, event.message_id)
