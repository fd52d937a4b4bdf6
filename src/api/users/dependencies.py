"""FastAPI dependencies for the users bounded context.

Services are assembled per request from the request's database session and
the process-wide container. The write path shares one session between the
repository, the outbox repository and the change recorder.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.container import AppContainer, get_container
from infrastructure.database.dependencies import get_read_session, get_write_session
from infrastructure.outbox.recorder import ChangeRecorder
from infrastructure.outbox.repository import OutboxRepository
from infrastructure.request_logging import with_request_logging
from shared_kernel.tenancy import InvalidTenantError, TenantScope
from users.application.observability import DefaultUserServiceProbe, UserServiceProbe
from users.application.services import UserQueryService, UserService
from users.domain.aggregates import User
from users.infrastructure.user_repository import UserRepository

CreateUserCommand = Callable[..., Awaitable[User]]


def get_tenant_scope(
    x_tenant_id: Annotated[str | None, Header()] = None,
) -> TenantScope:
    """Resolve the tenant from the X-Tenant-ID header.

    Raises:
        HTTPException: 400 if the header is missing or malformed
    """
    try:
        return TenantScope.from_header(x_tenant_id)
    except InvalidTenantError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e


def get_user_service_probe() -> UserServiceProbe:
    """Get UserServiceProbe instance."""
    return DefaultUserServiceProbe()


def get_change_recorder(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    container: Annotated[AppContainer, Depends(get_container)],
) -> ChangeRecorder:
    """Get a ChangeRecorder bound to the request's write session."""
    return ChangeRecorder(
        session=session,
        outbox=OutboxRepository(session),
        cache=container.cache,
        subscribers=container.subscribers,
    )


def get_user_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    recorder: Annotated[ChangeRecorder, Depends(get_change_recorder)],
    container: Annotated[AppContainer, Depends(get_container)],
    probe: Annotated[UserServiceProbe, Depends(get_user_service_probe)],
) -> UserService:
    """Get UserService instance.

    Args:
        session: Write session (shared with the recorder via dependency caching)
        recorder: Change recorder for the same session
        container: Application container
        probe: User service probe for observability
    """
    return UserService(
        repository=UserRepository(session),
        recorder=recorder,
        serializer=container.serializers["users"],
        clock=container.clock,
        probe=probe,
    )


def get_create_user_command(
    service: Annotated[UserService, Depends(get_user_service)],
) -> CreateUserCommand:
    """The create-user command, wrapped with request logging."""
    return with_request_logging(service.create_user, "CreateUser")


def get_user_query_service(
    session: Annotated[AsyncSession, Depends(get_read_session)],
    container: Annotated[AppContainer, Depends(get_container)],
    probe: Annotated[UserServiceProbe, Depends(get_user_service_probe)],
) -> UserQueryService:
    """Get UserQueryService instance backed by the read session."""
    return UserQueryService(
        repository=UserRepository(session),
        cache=container.cache,
        clock=container.clock,
        probe=probe,
    )
