"""Entitlement Manager: subscription grants keyed by canonical identity."""

import logging
from datetime import datetime, timezone

from learnpass.application.interfaces import EntitlementRepository
from learnpass.domain.entities import Entitlement, EntitlementStatus, add_months
from learnpass.domain.workflow_config import WorkflowConfig

logger = logging.getLogger(__name__)


class EntitlementManager:
    """Upserts the single subscription row of an identity.

    A purchase always resets the period to start *now*: calling
    ``grant_or_extend`` twice re-extends from the second call's time rather
    than accumulating. Callers that must not extend twice for one payment
    gate the call themselves (see PaymentWorkflow).
    """

    def __init__(self, repository: EntitlementRepository, config: WorkflowConfig):
        self._repository = repository
        self._config = config

    async def grant_or_extend(
        self,
        user_id: str,
        plan_type: str,
        now: datetime | None = None,
    ) -> Entitlement:
        """Purchase path: active, one cycle from now, not system-granted."""
        start = now or datetime.now(timezone.utc)
        entitlement = Entitlement(
            user_id=user_id,
            plan_type=plan_type,
            current_period_start=start,
            current_period_end=add_months(start, self._config.subscription_cycle_months),
            status=EntitlementStatus.ACTIVE,
            was_granted=False,
            updated_at=start,
        )
        return await self._repository.upsert(entitlement)

    async def grant_by_admin(
        self,
        user_id: str,
        plan_type: str,
        months: int = 1,
        now: datetime | None = None,
    ) -> Entitlement:
        """Administrative grant, flagged as system-granted."""
        start = now or datetime.now(timezone.utc)
        entitlement = Entitlement(
            user_id=user_id,
            plan_type=plan_type,
            current_period_start=start,
            current_period_end=add_months(start, months),
            status=EntitlementStatus.ACTIVE,
            was_granted=True,
            updated_at=start,
        )
        logger.info("Admin grant of '%s' to %s for %d month(s)", plan_type, user_id, months)
        return await self._repository.upsert(entitlement)

    async def revoke(self, user_id: str) -> bool:
        deleted = await self._repository.delete_by_user(user_id)
        logger.info("Admin revoke for %s: %s", user_id, "deleted" if deleted else "nothing to delete")
        return deleted

    async def get(self, user_id: str) -> Entitlement | None:
        return await self._repository.get_by_user(user_id)
