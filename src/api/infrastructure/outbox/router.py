"""Fanout router for the outbox relay.

Aggregates the fanout handlers registered by each bounded context and
delegates every outbox entry to the handler that owns its event type. This
keeps the relay generic: it never knows which change types exist.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from shared_kernel.outbox.ports import FanoutHandler
from shared_kernel.outbox.value_objects import OutboxEntry

if TYPE_CHECKING:
    from shared_kernel.outbox.observability import OutboxRelayProbe


class FanoutRouter:
    """Routes outbox entries to context-specific fanout handlers.

    Implements the OutboxDispatcher protocol. Each event type may be owned
    by exactly one handler.
    """

    def __init__(self, probe: "OutboxRelayProbe | None" = None) -> None:
        """Initialize with no handlers.

        Args:
            probe: Optional observability probe for logging registrations
        """
        self._handlers: list[FanoutHandler] = []
        self._type_cache: dict[str, FanoutHandler] = {}
        self._probe = probe

    def register(self, handler: FanoutHandler, context_name: str | None = None) -> None:
        """Register a context-specific handler.

        Args:
            handler: The handler to register
            context_name: Optional bounded context name (defaults to class name)

        Raises:
            ValueError: If one of the handler's event types is already routed
        """
        event_types = handler.supported_event_types()
        taken = sorted(t for t in event_types if t in self._type_cache)
        if taken:
            raise ValueError(f"Event types already have a fanout handler: {taken}")

        self._handlers.append(handler)
        for event_type in event_types:
            self._type_cache[event_type] = handler

        if self._probe is not None:
            name = context_name if context_name is not None else type(handler).__name__
            self._probe.handler_registered(name, event_types)

    def supported_event_types(self) -> frozenset[str]:
        """Return all event types with a registered handler."""
        return frozenset(self._type_cache)

    async def dispatch(self, entry: OutboxEntry) -> bool:
        """Hand ``entry`` to its handler.

        Returns:
            True if a handler ran, False if the type has no handler

        Raises:
            Exception: Whatever the handler raised
        """
        handler = self._type_cache.get(entry.event_type)
        if handler is None:
            return False
        await handler.handle(entry)
        return True
