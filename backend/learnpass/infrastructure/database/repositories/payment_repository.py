"""Concrete repository implementations for payments and stored gateway credentials."""

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from learnpass.application.interfaces import AdminCredentialsRepository, PaymentRepository
from learnpass.domain.entities import GatewayCredentials, PaymentRecord
from learnpass.domain.exceptions import DuplicateEntityError
from learnpass.infrastructure.database.dialect import as_utc
from learnpass.infrastructure.database.models import AdminCredentialsModel, PaymentModel


class SQLAlchemyPaymentRepository(PaymentRepository):
    """Implements the PaymentRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: PaymentModel) -> PaymentRecord:
        return PaymentRecord(
            id=model.id,
            user_id=model.user_id,
            razorpay_order_id=model.razorpay_order_id,
            razorpay_payment_id=model.razorpay_payment_id,
            razorpay_signature=model.razorpay_signature,
            plan_type=model.plan_type,
            amount=model.amount,
            currency=model.currency,
            status=model.status,
            entitlement_applied_at=as_utc(model.entitlement_applied_at),
            created_at=as_utc(model.created_at),
        )

    def _to_model(self, entity: PaymentRecord) -> PaymentModel:
        return PaymentModel(
            id=entity.id,
            user_id=entity.user_id,
            razorpay_order_id=entity.razorpay_order_id,
            razorpay_payment_id=entity.razorpay_payment_id,
            razorpay_signature=entity.razorpay_signature,
            plan_type=entity.plan_type,
            amount=entity.amount,
            currency=entity.currency,
            status=entity.status,
            entitlement_applied_at=entity.entitlement_applied_at,
            created_at=entity.created_at,
        )

    async def get_by_payment_id(self, razorpay_payment_id: str) -> PaymentRecord | None:
        stmt = select(PaymentModel).where(PaymentModel.razorpay_payment_id == razorpay_payment_id)
        model = (await self._session.execute(stmt)).scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, payment: PaymentRecord) -> PaymentRecord:
        model = self._to_model(payment)
        try:
            async with self._session.begin_nested():
                self._session.add(model)
        except IntegrityError as exc:
            raise DuplicateEntityError(
                "PaymentRecord", "razorpay_payment_id", payment.razorpay_payment_id
            ) from exc
        return self._to_entity(model)

    async def mark_entitlement_applied(self, payment_id: str, applied_at: datetime) -> None:
        stmt = (
            update(PaymentModel)
            .where(PaymentModel.id == payment_id)
            .values(entitlement_applied_at=applied_at)
        )
        async with self._session.begin_nested():
            await self._session.execute(stmt)


class SQLAlchemyAdminCredentialsRepository(AdminCredentialsRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_gateway_credentials(self) -> GatewayCredentials | None:
        stmt = select(AdminCredentialsModel).order_by(AdminCredentialsModel.id).limit(1)
        model = (await self._session.execute(stmt)).scalar_one_or_none()
        if model is None or not model.razorpay_key_id or not model.razorpay_key_secret:
            return None
        return GatewayCredentials(key_id=model.razorpay_key_id, key_secret=model.razorpay_key_secret)
