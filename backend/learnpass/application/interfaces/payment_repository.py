"""Abstract repository interface (port) for payment records."""

from abc import ABC, abstractmethod
from datetime import datetime

from learnpass.domain.entities import PaymentRecord


class PaymentRepository(ABC):
    """Port for payment persistence."""

    @abstractmethod
    async def get_by_payment_id(self, razorpay_payment_id: str) -> PaymentRecord | None:
        """Look up a payment by its gateway payment id."""
        ...

    @abstractmethod
    async def create(self, payment: PaymentRecord) -> PaymentRecord:
        """Insert a payment. Raises DuplicateEntityError if the payment id exists."""
        ...

    @abstractmethod
    async def mark_entitlement_applied(self, payment_id: str, applied_at: datetime) -> None:
        """Record that the entitlement extension for this payment was applied."""
        ...
