"""Abstract repository interfaces (ports) for credentials and templates."""

from abc import ABC, abstractmethod

from learnpass.domain.entities import Credential, CredentialTemplate


class CredentialRepository(ABC):
    """Port for issued credentials.

    Storage guarantees at most one active credential per (user, course);
    a conflicting insert raises DuplicateEntityError.
    """

    @abstractmethod
    async def find_active(self, user_id: str, course_id: str) -> Credential | None:
        ...

    @abstractmethod
    async def create(self, credential: Credential) -> Credential:
        ...

    @abstractmethod
    async def list_active_for_user(self, user_id: str) -> list[Credential]:
        ...

    @abstractmethod
    async def get_by_verification_code(self, code: str) -> Credential | None:
        ...


class CredentialTemplateRepository(ABC):
    """Port for certificate templates. At most one active default exists."""

    @abstractmethod
    async def get_default(self) -> CredentialTemplate | None:
        ...

    @abstractmethod
    async def create(self, template: CredentialTemplate) -> CredentialTemplate:
        """Insert a template. Raises DuplicateEntityError for a second active default."""
        ...
