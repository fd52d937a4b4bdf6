"""Pydantic models for users API requests and responses."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

from users.application.value_objects import UserView


class CreateUserRequest(BaseModel):
    """Request model for registering a user in the caller's tenant."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255)
    date_of_birth: date


class UpdateUserRequest(BaseModel):
    """Request model for a partial profile update. Omitted fields are kept."""

    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    email: str | None = Field(default=None, min_length=3, max_length=255)
    date_of_birth: date | None = None


class UserCreatedResponse(BaseModel):
    """Response model for a created user."""

    id: str = Field(..., description="User ID (ULID format)")


class UserResponse(BaseModel):
    """Response model for a user."""

    id: str = Field(..., description="User ID (ULID format)")
    full_name: str
    email: str
    age: int

    @classmethod
    def from_view(cls, view: UserView) -> UserResponse:
        """Convert the application read model to an API response."""
        return cls(
            id=view.id,
            full_name=view.full_name,
            email=view.email,
            age=view.age,
        )
