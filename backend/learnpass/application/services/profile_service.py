"""Application service for lazily ensured learner profiles."""

from learnpass.application.interfaces import ProfileRepository

DEFAULT_ROLE = "student"
DEFAULT_NAME = "Student"


class ProfileService:
    """Get-or-create profiles with the fallback identity data each workflow uses."""

    def __init__(self, repository: ProfileRepository):
        self._repository = repository

    async def ensure(
        self,
        external_id: str,
        *,
        full_name: str,
        email: str,
        role: str = DEFAULT_ROLE,
    ) -> str:
        return await self._repository.get_or_create(external_id, full_name, email, role)

    async def ensure_for_payment(self, external_id: str, email: str) -> str:
        """Payers are named after the local part of their e-mail address."""
        return await self.ensure(external_id, full_name=email.split("@")[0], email=email)

    async def ensure_for_learning(self, external_id: str) -> str:
        return await self.ensure(
            external_id, full_name=DEFAULT_NAME, email=f"{external_id}@temp.com"
        )

    async def display_name(self, profile_id: str) -> str | None:
        profile = await self._repository.get_by_id(profile_id)
        return profile.full_name if profile else None
