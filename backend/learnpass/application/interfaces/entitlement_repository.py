"""Abstract repository interface (port) for subscriptions."""

from abc import ABC, abstractmethod

from learnpass.domain.entities import Entitlement


class EntitlementRepository(ABC):
    """Port for entitlement persistence. One row per identity."""

    @abstractmethod
    async def get_by_user(self, user_id: str) -> Entitlement | None:
        ...

    @abstractmethod
    async def upsert(self, entitlement: Entitlement) -> Entitlement:
        """Atomically insert, or overwrite the row with the same user_id."""
        ...

    @abstractmethod
    async def delete_by_user(self, user_id: str) -> bool:
        """Delete the identity's entitlement. Returns False if none existed."""
        ...
