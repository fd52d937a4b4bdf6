"""Change recorder: the write side of the transactional outbox.

A single call persists an aggregate mutation and its outbox entry in one
local transaction. Only after the commit succeeds are in-process
subscribers notified and the affected cache keys invalidated, so neither
ever observes a change that was rolled back.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from shared_kernel.cache.ports import ICache
from shared_kernel.events import DomainChangeEvent, DomainEventSubscriber
from shared_kernel.outbox.observability import (
    ChangeRecorderProbe,
    DefaultChangeRecorderProbe,
)
from shared_kernel.outbox.ports import IOutboxRepository

T = TypeVar("T")

Mutation = Callable[[AsyncSession], Awaitable[T]]


@dataclass(frozen=True)
class RecordedChange:
    """Description of one aggregate change to be recorded.

    Attributes:
        event_type: Change tag written to the outbox (e.g. "UserCreated")
        aggregate_type: Kind of aggregate (e.g. "user")
        aggregate_id: Identifier of the aggregate
        tenant_id: Tenant owning the aggregate
        payload: JSON-compatible minimal projection
        occurred_at: When the change happened (UTC)
        invalidates: Cache keys that no longer reflect the committed state
    """

    event_type: str
    aggregate_type: str
    aggregate_id: str
    tenant_id: str
    payload: dict[str, Any]
    occurred_at: datetime
    invalidates: tuple[str, ...] = field(default_factory=tuple)

    def to_event(self) -> DomainChangeEvent:
        return DomainChangeEvent(
            event_type=self.event_type,
            aggregate_type=self.aggregate_type,
            aggregate_id=self.aggregate_id,
            tenant_id=self.tenant_id,
            occurred_at=self.occurred_at,
            payload=dict(self.payload),
        )


def _subscriber_name(subscriber: DomainEventSubscriber) -> str:
    return getattr(subscriber, "__qualname__", None) or type(subscriber).__name__


class ChangeRecorder:
    """Executes mutation + outbox append atomically, then fans out in-process.

    The recorder owns the commit of the session it is given. Subscribers run
    sequentially in registration order.
    """

    def __init__(
        self,
        session: AsyncSession,
        outbox: IOutboxRepository,
        cache: ICache,
        subscribers: Sequence[DomainEventSubscriber] = (),
        probe: ChangeRecorderProbe | None = None,
    ) -> None:
        """Initialize the recorder.

        Args:
            session: Write session shared by the mutation and the outbox
            outbox: Outbox repository bound to the same session
            cache: Cache whose keys are invalidated after commit
            subscribers: Post-commit callbacks, invoked in this order
            probe: Optional domain probe for observability
        """
        self._session = session
        self._outbox = outbox
        self._cache = cache
        self._subscribers = tuple(subscribers)
        self._probe = probe or DefaultChangeRecorderProbe()

    async def record(self, mutation: Mutation[T], change: RecordedChange) -> T:
        """Run ``mutation`` and append ``change`` to the outbox in one commit.

        Args:
            mutation: Async callable performing the aggregate write on the session
            change: The change to append to the outbox

        Returns:
            Whatever the mutation returned

        Raises:
            Exception: Anything raised by the mutation, the append or the
                commit. The transaction is rolled back and nothing
                downstream runs.
        """
        try:
            result = await mutation(self._session)
            await self._outbox.append(
                event_type=change.event_type,
                payload=change.payload,
                occurred_at=change.occurred_at,
                aggregate_type=change.aggregate_type,
                aggregate_id=change.aggregate_id,
                tenant_id=change.tenant_id,
            )
            await self._session.commit()
        except Exception as e:
            await self._session.rollback()
            self._probe.change_record_failed(
                change.event_type, change.aggregate_id, f"{type(e).__name__}: {e}"
            )
            raise

        self._probe.change_recorded(
            change.event_type, change.aggregate_id, change.tenant_id
        )

        event = change.to_event()
        for subscriber in self._subscribers:
            try:
                await subscriber(event)
            except Exception as e:
                # The change is already durable; later subscribers still run
                self._probe.subscriber_failed(
                    change.event_type,
                    _subscriber_name(subscriber),
                    f"{type(e).__name__}: {e}",
                )

        for key in change.invalidates:
            await self._cache.remove(key)

        return result
