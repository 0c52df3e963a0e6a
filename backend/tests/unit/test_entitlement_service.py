"""Unit tests for the EntitlementManager."""

from datetime import datetime, timedelta, timezone

import pytest

from learnpass.application.services import EntitlementManager
from learnpass.domain.entities import EntitlementStatus, add_months
from learnpass.domain.workflow_config import WorkflowConfig


@pytest.fixture
def manager(entitlement_repo, config) -> EntitlementManager:
    return EntitlementManager(entitlement_repo, config)


@pytest.mark.asyncio
async def test_first_grant_creates_one_month_entitlement(manager, entitlement_repo):
    now = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)
    entitlement = await manager.grant_or_extend("u1", "pro", now=now)

    assert entitlement.status == EntitlementStatus.ACTIVE
    assert entitlement.current_period_start == now
    assert entitlement.current_period_end == datetime(2026, 4, 10, 12, 0, tzinfo=timezone.utc)
    assert timedelta(days=28) <= entitlement.current_period_end - entitlement.current_period_start <= timedelta(days=31)
    assert entitlement.was_granted is False
    assert len(entitlement_repo.rows) == 1


@pytest.mark.asyncio
async def test_second_grant_overwrites_instead_of_accumulating(manager, entitlement_repo):
    first = datetime(2026, 1, 1, tzinfo=timezone.utc)
    second = datetime(2026, 1, 20, tzinfo=timezone.utc)
    await manager.grant_or_extend("u1", "pro", now=first)
    entitlement = await manager.grant_or_extend("u1", "pro", now=second)

    assert entitlement.current_period_start == second
    assert entitlement.current_period_end == datetime(2026, 2, 20, tzinfo=timezone.utc)
    assert len(entitlement_repo.rows) == 1


@pytest.mark.asyncio
async def test_cycle_length_comes_from_config(entitlement_repo):
    manager = EntitlementManager(entitlement_repo, WorkflowConfig(subscription_cycle_months=12))
    now = datetime(2026, 5, 1, tzinfo=timezone.utc)
    entitlement = await manager.grant_or_extend("u1", "pro", now=now)
    assert entitlement.current_period_end == datetime(2027, 5, 1, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_admin_grant_is_flagged(manager):
    now = datetime(2026, 5, 1, tzinfo=timezone.utc)
    entitlement = await manager.grant_by_admin("u1", "pro", months=3, now=now)
    assert entitlement.was_granted is True
    assert entitlement.current_period_end == datetime(2026, 8, 1, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_revoke(manager):
    await manager.grant_or_extend("u1", "pro")
    assert await manager.revoke("u1") is True
    assert await manager.get("u1") is None
    assert await manager.revoke("u1") is False


@pytest.mark.asyncio
async def test_is_current(manager):
    entitlement = await manager.grant_or_extend("u1", "pro")
    assert entitlement.is_current() is True
    assert entitlement.is_current(entitlement.current_period_end + timedelta(seconds=1)) is False


@pytest.mark.parametrize(
    "start, months, expected",
    [
        (datetime(2026, 1, 31), 1, datetime(2026, 2, 28)),
        (datetime(2028, 1, 31), 1, datetime(2028, 2, 29)),
        (datetime(2026, 12, 15), 1, datetime(2027, 1, 15)),
        (datetime(2026, 8, 31), 1, datetime(2026, 9, 30)),
        (datetime(2026, 3, 31), 11, datetime(2027, 2, 28)),
    ],
)
def test_add_months_clamps_to_month_end(start, months, expected):
    assert add_months(start, months) == expected
