"""Abstract repository interface (port) for learner profiles."""

from abc import ABC, abstractmethod

from learnpass.domain.entities import Profile


class ProfileRepository(ABC):
    """Port for profile persistence."""

    @abstractmethod
    async def get_by_id(self, profile_id: str) -> Profile | None:
        """Retrieve a profile by canonical identity."""
        ...

    @abstractmethod
    async def get_or_create(
        self,
        external_id: str,
        full_name: str,
        email: str,
        role: str = "student",
    ) -> str:
        """Ensure a profile exists for ``external_id`` and return its canonical id.

        Resolves the canonical id itself. Fills only empty fields on an
        existing profile, and adopts (re-keys) a profile found by e-mail.
        """
        ...
