"""User application services.

UserService handles the commands (create, update): every change goes
through the ChangeRecorder, so the user row and its outbox entry commit
together. UserQueryService serves reads through the tiered cache.
"""

from __future__ import annotations

from datetime import date, timedelta

from infrastructure.cache.keys import CacheKeys
from infrastructure.outbox.recorder import ChangeRecorder, RecordedChange
from shared_kernel.cache.ports import ICache
from shared_kernel.clock import Clock
from shared_kernel.outbox.ports import EventSerializer
from shared_kernel.tenancy import TenantScope
from sqlalchemy.ext.asyncio import AsyncSession
from users.application.observability import DefaultUserServiceProbe, UserServiceProbe
from users.application.value_objects import UserView
from users.domain.aggregates import User
from users.domain.value_objects import UserId
from users.ports.exceptions import DuplicateUserEmailError, UserNotFoundError
from users.ports.repositories import IUserRepository

AGGREGATE_TYPE = "user"

# Single-user reads are cached longer than the cache default
USER_CACHE_TTL = timedelta(minutes=10)


class UserService:
    """Application service for user commands."""

    def __init__(
        self,
        repository: IUserRepository,
        recorder: ChangeRecorder,
        serializer: EventSerializer,
        clock: Clock,
        probe: UserServiceProbe | None = None,
    ):
        """Initialize UserService with dependencies.

        Args:
            repository: Repository bound to the recorder's write session
            recorder: Commits the mutation and its outbox entry together
            serializer: Converts user events to outbox payloads
            clock: Source of event timestamps
            probe: Optional domain probe for observability
        """
        self._repository = repository
        self._recorder = recorder
        self._serializer = serializer
        self._clock = clock
        self._probe = probe or DefaultUserServiceProbe()

    async def create_user(
        self,
        scope: TenantScope,
        first_name: str,
        last_name: str,
        email: str,
        date_of_birth: date,
    ) -> User:
        """Register a new user in the scoped tenant.

        Returns:
            The created User aggregate

        Raises:
            ValueError: If a field violates a business rule
            DuplicateUserEmailError: If the email is taken in the tenant
        """
        user = User.create(
            tenant_id=scope.tenant_id,
            first_name=first_name,
            last_name=last_name,
            email=email,
            date_of_birth=date_of_birth,
            occurred_at=self._clock.now(),
        )

        async def persist(session: AsyncSession) -> User:
            await self._repository.add(user)
            return user

        try:
            await self._recorder.record(persist, self._to_change(user))
        except DuplicateUserEmailError:
            self._probe.duplicate_email(scope.tenant_id, user.email.value)
            raise

        self._probe.user_created(user.id.value, scope.tenant_id)
        return user

    async def update_user(
        self,
        user_id: UserId,
        scope: TenantScope,
        first_name: str | None = None,
        last_name: str | None = None,
        email: str | None = None,
        date_of_birth: date | None = None,
    ) -> UserView:
        """Apply a partial profile update.

        An update that changes nothing records no change and emits no event.

        Raises:
            UserNotFoundError: If the user does not exist in the tenant
            ValueError: If a field violates a business rule
            DuplicateUserEmailError: If the new email is taken in the tenant
        """
        user = await self._repository.get_by_id(user_id, scope)
        if user is None:
            self._probe.user_not_found(user_id.value, scope.tenant_id)
            raise UserNotFoundError(f"User {user_id} not found")

        now = self._clock.now()
        changed = user.update_profile(
            first_name=first_name,
            last_name=last_name,
            email=email,
            date_of_birth=date_of_birth,
            occurred_at=now,
        )

        if changed:

            async def persist(session: AsyncSession) -> None:
                await self._repository.save(user)

            try:
                await self._recorder.record(persist, self._to_change(user))
            except DuplicateUserEmailError:
                self._probe.duplicate_email(scope.tenant_id, user.email.value)
                raise

        self._probe.user_updated(user.id.value, scope.tenant_id, changed)
        return UserView.from_user(user, now.date())

    def _to_change(self, user: User) -> RecordedChange:
        (event,) = user.collect_events()
        return RecordedChange(
            event_type=type(event).__name__,
            aggregate_type=AGGREGATE_TYPE,
            aggregate_id=user.id.value,
            tenant_id=user.tenant_id,
            payload=self._serializer.serialize(event),
            occurred_at=event.occurred_at,
            invalidates=(CacheKeys.user(user.tenant_id, user.id.value),),
        )


class UserQueryService:
    """Application service for user reads, cache-aside over the repository."""

    def __init__(
        self,
        repository: IUserRepository,
        cache: ICache,
        clock: Clock,
        probe: UserServiceProbe | None = None,
        cache_ttl: timedelta = USER_CACHE_TTL,
    ):
        self._repository = repository
        self._cache = cache
        self._clock = clock
        self._probe = probe or DefaultUserServiceProbe()
        self._cache_ttl = cache_ttl

    async def get_user(self, user_id: UserId, scope: TenantScope) -> UserView | None:
        """Retrieve a user of the scoped tenant.

        Returns:
            The user's view, or None if the tenant has no such user
        """
        key = CacheKeys.user(scope.tenant_id, user_id.value)

        async def load() -> dict | None:
            user = await self._repository.get_by_id(user_id, scope)
            if user is None:
                return None
            return UserView.from_user(user, self._clock.now().date()).to_cache()

        cached = await self._cache.get_or_create(key, load, ttl=self._cache_ttl)
        if cached is None:
            self._probe.user_not_found(user_id.value, scope.tenant_id)
            return None
        return UserView.from_cache(cached)
