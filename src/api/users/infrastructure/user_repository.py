"""PostgreSQL implementation of IUserRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shared_kernel.tenancy import TenantScope
from users.domain.aggregates import User
from users.domain.value_objects import EmailAddress, UserId
from users.infrastructure.models import UNIQUE_TENANT_EMAIL, UserModel
from users.ports.exceptions import DuplicateUserEmailError, UserNotFoundError
from users.ports.repositories import IUserRepository


class UserRepository(IUserRepository):
    """PostgreSQL-backed repository for User aggregates.

    Writes flush so constraint violations surface inside the caller's
    transaction, but never commit.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession from FastAPI dependency injection
        """
        self._session = session

    async def get_by_id(self, user_id: UserId, scope: TenantScope) -> User | None:
        """Retrieve a user of the scoped tenant.

        Args:
            user_id: The unique identifier of the user
            scope: Tenant the caller is acting for

        Returns:
            The User aggregate, or None if not found in that tenant
        """
        model = await self._get_model(user_id.value, scope.tenant_id)
        if model is None:
            return None
        return self._to_domain(model)

    async def add(self, user: User) -> None:
        model = UserModel(
            id=user.id.value,
            tenant_id=user.tenant_id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email.value,
            date_of_birth=user.date_of_birth,
        )
        self._session.add(model)
        await self._flush(user)

    async def save(self, user: User) -> None:
        model = await self._get_model(user.id.value, user.tenant_id)
        if model is None:
            raise UserNotFoundError(f"User {user.id} not found")

        model.first_name = user.first_name
        model.last_name = user.last_name
        model.email = user.email.value
        model.date_of_birth = user.date_of_birth
        await self._flush(user)

    async def _get_model(self, user_id: str, tenant_id: str) -> UserModel | None:
        stmt = select(UserModel).where(
            UserModel.id == user_id,
            UserModel.tenant_id == tenant_id,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def _flush(self, user: User) -> None:
        try:
            await self._session.flush()
        except IntegrityError as e:
            if UNIQUE_TENANT_EMAIL in str(e.orig):
                raise DuplicateUserEmailError(
                    f"Email '{user.email}' already registered in tenant {user.tenant_id}"
                ) from e
            raise

    @staticmethod
    def _to_domain(model: UserModel) -> User:
        return User(
            id=UserId(value=model.id),
            tenant_id=model.tenant_id,
            first_name=model.first_name,
            last_name=model.last_name,
            email=EmailAddress(value=model.email),
            date_of_birth=model.date_of_birth,
        )
