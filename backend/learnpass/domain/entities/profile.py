"""Domain entity for learner profiles."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class Profile:
    """A learner profile keyed by canonical identity.

    Profiles are created lazily and later touches only fill fields that are
    still empty (first write wins).
    """

    id: str
    email: str | None = None
    full_name: str | None = None
    role: str | None = "student"
    status: str = "active"
    auth_provider: str | None = "clerk"
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def merge_missing(
        self,
        *,
        full_name: str | None = None,
        email: str | None = None,
        role: str | None = None,
        auth_provider: str | None = None,
    ) -> None:
        """Fill only the fields that are currently empty."""
        self.full_name = self.full_name or full_name
        self.email = self.email or email
        self.role = self.role or role
        self.auth_provider = self.auth_provider or auth_provider
        self.updated_at = datetime.now(timezone.utc)
