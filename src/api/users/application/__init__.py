"""Users application layer: services, read models and probes."""

from users.application.observability import DefaultUserServiceProbe, UserServiceProbe
from users.application.services import UserQueryService, UserService
from users.application.value_objects import UserView

__all__ = [
    "DefaultUserServiceProbe",
    "UserQueryService",
    "UserService",
    "UserServiceProbe",
    "UserView",
]
