"""Concrete repository implementation for subscriptions backed by SQLAlchemy."""

from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from learnpass.application.interfaces import EntitlementRepository
from learnpass.domain.entities import Entitlement, EntitlementStatus
from learnpass.infrastructure.database.dialect import as_utc, dialect_insert
from learnpass.infrastructure.database.models import SubscriptionModel


class SQLAlchemyEntitlementRepository(EntitlementRepository):
    """Implements the EntitlementRepository port.

    ``upsert`` is a single ``INSERT … ON CONFLICT (user_id) DO UPDATE``:
    concurrent writers for the same identity end with the last write.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: SubscriptionModel) -> Entitlement:
        return Entitlement(
            id=model.id,
            user_id=model.user_id,
            plan_type=model.plan_type,
            status=EntitlementStatus(model.status),
            current_period_start=as_utc(model.current_period_start),
            current_period_end=as_utc(model.current_period_end),
            was_granted=model.was_granted,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )

    async def get_by_user(self, user_id: str) -> Entitlement | None:
        stmt = select(SubscriptionModel).where(SubscriptionModel.user_id == user_id)
        model = (await self._session.execute(stmt)).scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def upsert(self, entitlement: Entitlement) -> Entitlement:
        now = datetime.now(timezone.utc)
        insert = dialect_insert(self._session, SubscriptionModel).values(
            id=entitlement.id,
            user_id=entitlement.user_id,
            plan_type=entitlement.plan_type,
            status=entitlement.status.value,
            current_period_start=entitlement.current_period_start,
            current_period_end=entitlement.current_period_end,
            was_granted=entitlement.was_granted,
            created_at=now,
            updated_at=now,
        )
        stmt = insert.on_conflict_do_update(
            index_elements=[SubscriptionModel.user_id],
            set_={
                "plan_type": insert.excluded.plan_type,
                "status": insert.excluded.status,
                "current_period_start": insert.excluded.current_period_start,
                "current_period_end": insert.excluded.current_period_end,
                "was_granted": insert.excluded.was_granted,
                "updated_at": insert.excluded.updated_at,
            },
        )
        async with self._session.begin_nested():
            await self._session.execute(stmt)

        stored = await self._session.execute(
            select(SubscriptionModel)
            .where(SubscriptionModel.user_id == entitlement.user_id)
            .execution_options(populate_existing=True)
        )
        return self._to_entity(stored.scalar_one())

    async def delete_by_user(self, user_id: str) -> bool:
        result = await self._session.execute(
            delete(SubscriptionModel).where(SubscriptionModel.user_id == user_id)
        )
        await self._session.flush()
        return result.rowcount > 0
