"""Value objects for the users domain."""

from __future__ import annotations

from dataclasses import dataclass

from ulid import ULID


@dataclass(frozen=True)
class UserId:
    """Identifier for a User aggregate.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> UserId:
        """Generate a new UserId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> UserId:
        """Create UserId from string value.

        Args:
            value: ULID string

        Returns:
            UserId instance

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid UserId: {value}") from e

        return cls(value=value)


@dataclass(frozen=True)
class EmailAddress:
    """A syntactically plausible email address, stored lower-cased."""

    value: str

    def __post_init__(self) -> None:
        local, sep, domain = self.value.partition("@")
        if not sep or not local or "." not in domain or " " in self.value:
            raise ValueError(f"Invalid email address: {self.value!r}")

    @classmethod
    def parse(cls, value: str) -> EmailAddress:
        return cls(value=value.strip().lower())

    def __str__(self) -> str:
        return self.value
