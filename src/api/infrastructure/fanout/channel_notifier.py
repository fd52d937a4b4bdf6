"""Redis pub/sub adapter for realtime notifications.

Notifications are published on ``{prefix}:{tenant_id}`` so a gateway can
forward them to the connected clients of that tenant only. Pub/sub is
fire-and-forget; a replayed notification is harmless.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from redis.exceptions import RedisError

from shared_kernel.fanout.exceptions import FanoutError
from shared_kernel.fanout.observability import DefaultFanoutProbe, FanoutProbe

if TYPE_CHECKING:
    from redis.asyncio import Redis

TARGET = "realtime_notifier"


class RedisChannelNotifier:
    """RealtimeNotifier publishing to per-tenant Redis channels."""

    def __init__(
        self,
        client: Redis,
        channel_prefix: str,
        probe: FanoutProbe | None = None,
    ) -> None:
        self._client = client
        self._channel_prefix = channel_prefix
        self._probe = probe or DefaultFanoutProbe()

    def channel_for(self, tenant_id: str | None) -> str:
        return f"{self._channel_prefix}:{tenant_id or 'all'}"

    async def notify(
        self, subject_id: str, description: str, *, tenant_id: str | None = None
    ) -> None:
        message = json.dumps({"subject_id": subject_id, "description": description})
        try:
            await self._client.publish(self.channel_for(tenant_id), message)
        except RedisError as e:
            error = f"{type(e).__name__}: {e}"
            self._probe.delivery_failed(TARGET, subject_id, error)
            raise FanoutError(TARGET, error) from e

        self._probe.delivered(TARGET, subject_id)
