"""In-process subscribers to committed user changes.

Registered with the ChangeRecorder at composition time. Delivery to the
search index, the message bus and connected clients is not done here: it
goes through the outbox relay, which survives crashes.
"""

from __future__ import annotations

import structlog

from shared_kernel.events import DomainChangeEvent


class UserChangeLogSubscriber:
    """Writes an audit log line for every committed user change."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger().bind(component="user_changes")

    async def __call__(self, event: DomainChangeEvent) -> None:
        if event.aggregate_type != "user":
            return
        self._logger.info(
            "user_change_committed",
            event_type=event.event_type,
            user_id=event.aggregate_id,
            tenant_id=event.tenant_id,
            occurred_at=event.occurred_at.isoformat(),
        )
