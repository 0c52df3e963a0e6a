"""SQLAlchemy ORM models for payments and stored gateway credentials."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from learnpass.infrastructure.database.base import Base


class PaymentModel(Base):
    """ORM model — maps to the 'payments' table.

    ``razorpay_payment_id`` is unique: a gateway payment is recorded once.
    """

    __tablename__ = "payments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    razorpay_order_id: Mapped[str] = mapped_column(String(100), nullable=False)
    razorpay_payment_id: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    razorpay_signature: Mapped[str] = mapped_column(String(255), nullable=False)
    plan_type: Mapped[str] = mapped_column(String(50), nullable=False)
    amount: Mapped[float | None] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=True)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="INR")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="completed")
    entitlement_applied_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_payments_user", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<PaymentModel(id={self.id}, payment='{self.razorpay_payment_id}')>"


class AdminCredentialsModel(Base):
    """ORM model — maps to the 'admin_credentials' table (a single row)."""

    __tablename__ = "admin_credentials"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    razorpay_key_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    razorpay_key_secret: Mapped[str | None] = mapped_column(Text, nullable=True)
    pro_plan_price_inr: Mapped[int] = mapped_column(Integer, nullable=False, default=999)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
