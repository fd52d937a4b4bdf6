"""Tenant scope value object.

Every read path that touches tenant-scoped data takes a TenantScope
explicitly. Nothing in the core infers the tenant from ambient state.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# Tenant ids become part of cache keys and channel names, so ':' is excluded
_TENANT_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


class InvalidTenantError(ValueError):
    """Raised when a tenant identifier is missing or malformed."""

    pass


@dataclass(frozen=True)
class TenantScope:
    """Resolved tenant for the current request.

    Attributes:
        tenant_id: The validated tenant identifier.
        source: How the tenant was resolved (e.g. 'header').
    """

    tenant_id: str
    source: str = "header"

    def __post_init__(self) -> None:
        if not self.tenant_id or not _TENANT_ID_PATTERN.match(self.tenant_id):
            raise InvalidTenantError(f"Invalid tenant id: {self.tenant_id!r}")

    def __str__(self) -> str:
        return self.tenant_id

    @classmethod
    def from_header(cls, value: str | None) -> TenantScope:
        """Build a scope from a raw header value.

        Raises:
            InvalidTenantError: If the header is absent, blank or malformed
        """
        if value is None or not value.strip():
            raise InvalidTenantError("Tenant header is missing")
        return cls(tenant_id=value.strip(), source="header")
