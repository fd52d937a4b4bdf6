"""HTTP routes for the users bounded context."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from shared_kernel.tenancy import TenantScope
from users.application.services import UserQueryService, UserService
from users.dependencies import (
    CreateUserCommand,
    get_create_user_command,
    get_tenant_scope,
    get_user_query_service,
    get_user_service,
)
from users.domain.value_objects import UserId
from users.ports.exceptions import DuplicateUserEmailError, UserNotFoundError
from users.presentation.models import (
    CreateUserRequest,
    UpdateUserRequest,
    UserCreatedResponse,
    UserResponse,
)

router = APIRouter(
    prefix="/users",
    tags=["users"],
)


def _parse_user_id(user_id: str) -> UserId:
    try:
        return UserId.from_string(user_id)
    except ValueError as e:
        # Not a ULID, so no such user can exist
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User {user_id} not found",
        ) from e


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    request: CreateUserRequest,
    scope: Annotated[TenantScope, Depends(get_tenant_scope)],
    create: Annotated[CreateUserCommand, Depends(get_create_user_command)],
) -> UserCreatedResponse:
    """Register a user in the caller's tenant.

    Returns:
        The new user's ID

    Raises:
        HTTPException: 409 if the email is taken in the tenant,
            422 if a field is invalid
    """
    try:
        user = await create(
            scope=scope,
            first_name=request.first_name,
            last_name=request.last_name,
            email=request.email,
            date_of_birth=request.date_of_birth,
        )
    except DuplicateUserEmailError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        ) from e
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e

    return UserCreatedResponse(id=user.id.value)


@router.get("/{user_id}")
async def get_user(
    user_id: str,
    scope: Annotated[TenantScope, Depends(get_tenant_scope)],
    service: Annotated[UserQueryService, Depends(get_user_query_service)],
) -> UserResponse:
    """Get a user of the caller's tenant.

    Raises:
        HTTPException: 404 if the tenant has no such user
    """
    view = await service.get_user(_parse_user_id(user_id), scope)
    if view is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User {user_id} not found",
        )
    return UserResponse.from_view(view)


@router.patch("/{user_id}")
async def update_user(
    user_id: str,
    request: UpdateUserRequest,
    scope: Annotated[TenantScope, Depends(get_tenant_scope)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    """Update a user's profile. Omitted fields are left unchanged.

    Raises:
        HTTPException: 404 if the tenant has no such user,
            409 if the new email is taken, 422 if a field is invalid
    """
    try:
        view = await service.update_user(
            _parse_user_id(user_id),
            scope,
            first_name=request.first_name,
            last_name=request.last_name,
            email=request.email,
            date_of_birth=request.date_of_birth,
        )
    except UserNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        ) from e
    except DuplicateUserEmailError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        ) from e
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e

    return UserResponse.from_view(view)
