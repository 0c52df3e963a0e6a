"""Domain entities for payments and the payment gateway."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4


@dataclass
class PaymentRecord:
    """Append-only record of a verified gateway payment.

    ``razorpay_payment_id`` doubles as the idempotency key: the entitlement
    extension for this payment is applied at most once, tracked by
    ``entitlement_applied_at``.
    """

    user_id: str
    razorpay_order_id: str
    razorpay_payment_id: str
    razorpay_signature: str
    plan_type: str
    amount: float | None = None
    currency: str = "INR"
    status: str = "completed"
    entitlement_applied_at: datetime | None = None
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def entitlement_applied(self) -> bool:
        return self.entitlement_applied_at is not None


@dataclass(frozen=True)
class GatewayCredentials:
    """Key pair used for basic auth and callback signature checks."""

    key_id: str
    key_secret: str


@dataclass
class GatewayOrder:
    """An order created at the payment gateway, passed through untouched."""

    id: str
    amount: int
    currency: str
    receipt: str | None = None
    status: str | None = None
    raw: dict[str, Any] = field(default_factory=dict)
