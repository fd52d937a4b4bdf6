"""Users infrastructure: persistence and outbox integration."""

from users.infrastructure.models import UserModel
from users.infrastructure.outbox import UserEventSerializer, UserFanoutHandler
from users.infrastructure.user_repository import UserRepository

__all__ = [
    "UserEventSerializer",
    "UserFanoutHandler",
    "UserModel",
    "UserRepository",
]
