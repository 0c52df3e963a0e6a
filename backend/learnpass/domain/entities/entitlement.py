"""Domain entity for subscriptions (entitlements)."""

import calendar
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4


class EntitlementStatus(str, Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


def add_months(moment: datetime, months: int) -> datetime:
    """Shift ``moment`` by whole calendar months, clamping to the month's last day."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


@dataclass
class Entitlement:
    """Access to paid features for a bounded period. One row per identity."""

    user_id: str
    plan_type: str
    current_period_start: datetime
    current_period_end: datetime
    status: EntitlementStatus = EntitlementStatus.ACTIVE
    was_granted: bool = False
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def is_current(self, now: datetime | None = None) -> bool:
        """True while the entitlement is active and its period has not ended."""
        now = now or datetime.now(timezone.utc)
        return self.status == EntitlementStatus.ACTIVE and self.current_period_end > now
