"""Domain exceptions for the users bounded context.

Raised by repositories and the application service; translated to HTTP
status codes by the presentation layer.
"""


class UserNotFoundError(Exception):
    """Raised when a user does not exist in the requesting tenant.

    A user of another tenant is indistinguishable from a missing one.
    """

    pass


class DuplicateUserEmailError(Exception):
    """Raised when an email address is already registered in the tenant."""

    pass
