"""Cache key schema.

Key format: {tenant_id}:{entity_kind}-{identifier}

Where:
- tenant_id: tenant owning the entity, so equal identifiers in two
  tenants never share an entry
- entity_kind: "user", ...
- identifier: the entity's ULID

The shared tier additionally prepends its configured namespace.
"""


class CacheKeys:
    """Cache key generator following consistent naming convention."""

    @staticmethod
    def entity(kind: str, tenant_id: str, identifier: str) -> str:
        """Key for one entity instance.

        Raises:
            ValueError: If any component is empty or contains the ':' separator
        """
        for name, part in (("kind", kind), ("tenant_id", tenant_id), ("identifier", identifier)):
            if not part:
                raise ValueError(f"Cache key {name} must not be empty")
            if ":" in part:
                raise ValueError(f"Cache key {name} must not contain ':' ({part!r})")
        return f"{tenant_id}:{kind}-{identifier}"

    @classmethod
    def user(cls, tenant_id: str, user_id: str) -> str:
        """Key for a user read model."""
        return cls.entity("user", tenant_id, user_id)
