"""Read models for the users application layer."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Any

from users.domain.aggregates import User


@dataclass(frozen=True)
class UserView:
    """Read projection of a user, as served by GET and stored in the cache.

    Age is computed when the view is built, so a cached view may lag a
    birthday by at most the cache lifetime.
    """

    id: str
    full_name: str
    email: str
    age: int

    @classmethod
    def from_user(cls, user: User, today: date) -> UserView:
        return cls(
            id=user.id.value,
            full_name=user.full_name,
            email=user.email.value,
            age=user.age_on(today),
        )

    def to_cache(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_cache(cls, data: dict[str, Any]) -> UserView:
        return cls(
            id=data["id"],
            full_name=data["full_name"],
            email=data["email"],
            age=int(data["age"]),
        )
