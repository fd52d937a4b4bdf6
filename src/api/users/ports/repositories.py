"""Repository protocols for the users bounded context."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from shared_kernel.tenancy import TenantScope
from users.domain.aggregates import User
from users.domain.value_objects import UserId


@runtime_checkable
class IUserRepository(Protocol):
    """Persistence for User aggregates.

    Reads are always scoped to a tenant passed explicitly by the caller.
    Writes only stage changes on the session; they never commit.
    """

    async def get_by_id(self, user_id: UserId, scope: TenantScope) -> User | None:
        """Retrieve a user of ``scope``'s tenant, or None."""
        ...

    async def add(self, user: User) -> None:
        """Stage a new user.

        Raises:
            DuplicateUserEmailError: If the email is taken in the tenant
        """
        ...

    async def save(self, user: User) -> None:
        """Stage changes to an existing user.

        Raises:
            DuplicateUserEmailError: If the new email is taken in the tenant
            UserNotFoundError: If the user row no longer exists
        """
        ...
