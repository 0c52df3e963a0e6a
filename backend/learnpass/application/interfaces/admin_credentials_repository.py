"""Abstract repository interface (port) for stored gateway credentials."""

from abc import ABC, abstractmethod

from learnpass.domain.entities import GatewayCredentials


class AdminCredentialsRepository(ABC):

    @abstractmethod
    async def get_gateway_credentials(self) -> GatewayCredentials | None:
        """Return the stored key pair, or None when it is incomplete."""
        ...
