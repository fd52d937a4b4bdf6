"""Unit test fixtures and in-memory fakes.

The fakes stand in for the database session, the outbox table and the
cache tiers so the cache, the recorder and the relay can be tested without
PostgreSQL or Redis.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

import pytest

from shared_kernel.cache.exceptions import CacheTierUnavailableError
from shared_kernel.cache.value_objects import CacheEntry, CacheTierName
from shared_kernel.clock import FrozenClock
from shared_kernel.outbox.value_objects import OutboxEntry

TENANT_A = "tenant-a"
TENANT_B = "tenant-b"


class FakeSession:
    """Stands in for AsyncSession: staged changes apply only on commit."""

    def __init__(self, fail_commit: Exception | None = None):
        self.fail_commit = fail_commit
        self.added: list[Any] = []
        self.commits = 0
        self.rollbacks = 0
        self.closed = False
        self._staged: list[Callable[[], None]] = []

    def stage(self, change: Callable[[], None]) -> None:
        self._staged.append(change)

    def add(self, obj: Any) -> None:
        self.added.append(obj)

    async def flush(self) -> None:
        return None

    async def commit(self) -> None:
        if self.fail_commit is not None:
            raise self.fail_commit
        for change in self._staged:
            change()
        self._staged.clear()
        self.commits += 1

    async def rollback(self) -> None:
        self._staged.clear()
        self.rollbacks += 1

    async def __aenter__(self) -> FakeSession:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self._staged.clear()
        self.closed = True


class FakeSessionFactory:
    """Stands in for async_sessionmaker; remembers every session it made."""

    def __init__(self) -> None:
        self.fail_commit: Exception | None = None
        self.sessions: list[FakeSession] = []

    def __call__(self) -> FakeSession:
        session = FakeSession(fail_commit=self.fail_commit)
        self.sessions.append(session)
        return session


class OutboxStore:
    """Committed state of the outbox table."""

    def __init__(self) -> None:
        self.entries: dict[UUID, OutboxEntry] = {}
        self.fail_fetch: Exception | None = None
        self.fetch_limits: list[int] = []

    def pending(self) -> list[OutboxEntry]:
        return sorted(
            (e for e in self.entries.values() if e.processed_at is None),
            key=lambda e: e.occurred_at,
        )

    def insert(
        self,
        event_type: str = "UserCreated",
        occurred_at: datetime | None = None,
        tenant_id: str = TENANT_A,
        payload: dict[str, Any] | None = None,
    ) -> OutboxEntry:
        occurred_at = occurred_at or datetime(2026, 1, 1, tzinfo=UTC)
        entry = OutboxEntry(
            id=uuid4(),
            aggregate_type="user",
            aggregate_id="01J8ZQ5R3M6Y7X8W9V0T1S2R3Q",
            tenant_id=tenant_id,
            event_type=event_type,
            payload=payload or {},
            occurred_at=occurred_at,
            processed_at=None,
            created_at=occurred_at,
        )
        self.entries[entry.id] = entry
        return entry


class InMemoryOutboxRepository:
    """IOutboxRepository over an OutboxStore; writes wait for commit."""

    def __init__(self, store: OutboxStore, session: FakeSession):
        self._store = store
        self._session = session

    async def append(
        self,
        event_type: str,
        payload: dict[str, Any],
        occurred_at: datetime,
        aggregate_type: str,
        aggregate_id: str,
        tenant_id: str,
    ) -> None:
        entry = OutboxEntry(
            id=uuid4(),
            aggregate_type=aggregate_type,
            aggregate_id=aggregate_id,
            tenant_id=tenant_id,
            event_type=event_type,
            payload=payload,
            occurred_at=occurred_at,
            processed_at=None,
            created_at=occurred_at,
        )
        self._session.stage(lambda: self._store.entries.__setitem__(entry.id, entry))

    async def fetch_pending(self, limit: int) -> list[OutboxEntry]:
        self._store.fetch_limits.append(limit)
        if self._store.fail_fetch is not None:
            raise self._store.fail_fetch
        return self._store.pending()[:limit]

    async def mark_processed(self, entry_id: UUID, processed_at: datetime) -> None:
        self._session.stage(lambda: self._replace(entry_id, processed_at=processed_at))

    async def mark_failed(self, entry_id: UUID, error: str) -> None:
        self._session.stage(lambda: self._replace(entry_id, last_error=error))

    def _replace(self, entry_id: UUID, **changes: Any) -> None:
        self._store.entries[entry_id] = replace(self._store.entries[entry_id], **changes)


class InMemoryTier:
    """CacheTier fake that records every write and can be made unavailable."""

    def __init__(self, clock: FrozenClock, name: CacheTierName):
        self._clock = clock
        self._name = name
        self.entries: dict[str, CacheEntry] = {}
        self.gets: list[str] = []
        self.unavailable = False

    def _check(self, operation: str, key: str) -> None:
        if self.unavailable:
            raise CacheTierUnavailableError(
                self._name.value, operation, key, ConnectionError("connection refused")
            )

    async def get(self, key: str) -> CacheEntry | None:
        self.gets.append(key)
        self._check("get", key)
        entry = self.entries.get(key)
        if entry is None or entry.is_expired(self._clock.now()):
            self.entries.pop(key, None)
            return None
        return entry

    async def set(self, key: str, value: Any, expires_at: datetime) -> None:
        self._check("set", key)
        self.entries[key] = CacheEntry(
            key=key, value=value, tier=self._name, expires_at=expires_at
        )

    async def delete(self, key: str) -> None:
        self._check("delete", key)
        self.entries.pop(key, None)


@pytest.fixture
def clock() -> FrozenClock:
    """Deterministic clock starting at 2026-01-01T00:00:00Z."""
    return FrozenClock()


@pytest.fixture
def local_tier(clock: FrozenClock) -> InMemoryTier:
    return InMemoryTier(clock, CacheTierName.LOCAL)


@pytest.fixture
def shared_tier(clock: FrozenClock) -> InMemoryTier:
    return InMemoryTier(clock, CacheTierName.SHARED)


@pytest.fixture
def outbox_store() -> OutboxStore:
    return OutboxStore()


@pytest.fixture
def session_factory() -> FakeSessionFactory:
    return FakeSessionFactory()


@pytest.fixture
def outbox_repository_factory(
    outbox_store: OutboxStore,
) -> Callable[[FakeSession], InMemoryOutboxRepository]:
    """Builds an InMemoryOutboxRepository for a given session."""
    return lambda session: InMemoryOutboxRepository(outbox_store, session)


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def outbox_repository(
    outbox_store: OutboxStore, fake_session: FakeSession
) -> InMemoryOutboxRepository:
    """Outbox repository bound to ``fake_session``."""
    return InMemoryOutboxRepository(outbox_store, fake_session)
