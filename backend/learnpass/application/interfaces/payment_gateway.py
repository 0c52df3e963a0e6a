"""Abstract interface for the payment gateway's order API."""

from abc import ABC, abstractmethod

from learnpass.domain.entities import GatewayCredentials, GatewayOrder


class PaymentGateway(ABC):
    """Creates orders at an external payment provider."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        ...

    @abstractmethod
    async def create_order(
        self,
        credentials: GatewayCredentials,
        amount_minor_units: int,
        currency: str,
        receipt: str | None = None,
    ) -> GatewayOrder:
        """Create an order. Raises UpstreamError when the gateway rejects it."""
        ...
