"""User aggregate."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, date, datetime

from users.domain.events import DomainEvent, UserCreated, UserUpdated
from users.domain.value_objects import EmailAddress, UserId


def _require_name(value: str, field_name: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{field_name} must not be empty")
    if len(value) > 100:
        raise ValueError(f"{field_name} must be at most 100 characters")
    return value


@dataclass
class User:
    """A person registered in one tenant.

    Business rules:
    - First and last name are non-empty
    - Email is unique per tenant (enforced by the repository)
    - Date of birth is not in the future

    Event collection:
    - create() records UserCreated, update_profile() records UserUpdated
    - Events are drained via collect_events()
    """

    id: UserId
    tenant_id: str
    first_name: str
    last_name: str
    email: EmailAddress
    date_of_birth: date
    _pending_events: list[DomainEvent] = field(default_factory=list, repr=False)

    @classmethod
    def create(
        cls,
        tenant_id: str,
        first_name: str,
        last_name: str,
        email: str,
        date_of_birth: date,
        occurred_at: datetime | None = None,
    ) -> User:
        """Factory method for registering a new user.

        Generates the ID, validates the profile, and records UserCreated.

        Raises:
            ValueError: If a field violates a business rule
        """
        occurred_at = occurred_at or datetime.now(UTC)
        if date_of_birth > occurred_at.date():
            raise ValueError("date_of_birth must not be in the future")

        user = cls(
            id=UserId.generate(),
            tenant_id=tenant_id,
            first_name=_require_name(first_name, "first_name"),
            last_name=_require_name(last_name, "last_name"),
            email=EmailAddress.parse(email),
            date_of_birth=date_of_birth,
        )
        user._pending_events.append(
            UserCreated(
                user_id=user.id.value,
                tenant_id=tenant_id,
                first_name=user.first_name,
                last_name=user.last_name,
                email=user.email.value,
                occurred_at=occurred_at,
            )
        )
        return user

    def update_profile(
        self,
        first_name: str | None = None,
        last_name: str | None = None,
        email: str | None = None,
        date_of_birth: date | None = None,
        occurred_at: datetime | None = None,
    ) -> bool:
        """Apply the given changes; omitted fields stay as they are.

        Returns:
            True if anything changed (and UserUpdated was recorded)

        Raises:
            ValueError: If a field violates a business rule
        """
        occurred_at = occurred_at or datetime.now(UTC)
        new_first = (
            _require_name(first_name, "first_name") if first_name is not None else self.first_name
        )
        new_last = (
            _require_name(last_name, "last_name") if last_name is not None else self.last_name
        )
        new_email = EmailAddress.parse(email) if email is not None else self.email
        new_dob = date_of_birth if date_of_birth is not None else self.date_of_birth
        if new_dob > occurred_at.date():
            raise ValueError("date_of_birth must not be in the future")

        if (new_first, new_last, new_email, new_dob) == (
            self.first_name,
            self.last_name,
            self.email,
            self.date_of_birth,
        ):
            return False

        self.first_name = new_first
        self.last_name = new_last
        self.email = new_email
        self.date_of_birth = new_dob
        self._pending_events.append(
            UserUpdated(
                user_id=self.id.value,
                tenant_id=self.tenant_id,
                first_name=self.first_name,
                last_name=self.last_name,
                email=self.email.value,
                occurred_at=occurred_at,
            )
        )
        return True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def age_on(self, today: date) -> int:
        """Age in whole years on ``today``."""
        age = today.year - self.date_of_birth.year
        if (today.month, today.day) < (self.date_of_birth.month, self.date_of_birth.day):
            age -= 1
        return age

    def collect_events(self) -> list[DomainEvent]:
        """Return and clear pending domain events."""
        events = self._pending_events.copy()
        self._pending_events.clear()
        return events
