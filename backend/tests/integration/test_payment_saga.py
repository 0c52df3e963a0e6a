"""verify_payment over ASGI against a file-backed SQLite database.

Runs the real repositories and the per-request commit, so partial progress
and best-effort failures are checked the way production persists them.
"""

from contextlib import asynccontextmanager

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select, text

from learnpass.config import get_settings
from learnpass.domain.signature import compute_payment_signature
from learnpass.infrastructure.database import (
    Base,
    build_engine,
    build_session_factory,
    get_db_session,
    request_scope,
)
from learnpass.infrastructure.database.models import PaymentModel, SubscriptionModel
from learnpass.main import app

KEY_SECRET = "rzp_test_secret"


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'saga.db'}"


@pytest.fixture(autouse=True)
def gateway_keys(monkeypatch):
    settings = get_settings()
    monkeypatch.setattr(settings, "razorpay_key_id", "rzp_test_key")
    monkeypatch.setattr(settings, "razorpay_key_secret", KEY_SECRET)


@asynccontextmanager
async def _wired(url: str):
    engine = build_engine(url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = build_session_factory(engine)

    async def _session():
        async with request_scope(factory) as session:
            yield session

    app.dependency_overrides[get_db_session] = _session
    try:
        yield engine, factory
    finally:
        app.dependency_overrides.clear()
        await engine.dispose()


async def _verify(payment_id: str, external_id: str = "user_X") -> tuple[int, dict]:
    order_id = f"order_{payment_id}"
    body = {
        "action": "verify_payment",
        "user_id": external_id,
        "user_email": "ada@example.com",
        "plan_type": "pro",
        "razorpay_order_id": order_id,
        "razorpay_payment_id": payment_id,
        "razorpay_signature": compute_payment_signature(order_id, payment_id, KEY_SECRET),
    }
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post("/api/v1/workflow", json=body)
    return response.status_code, response.json()


async def _count(factory, model) -> int:
    async with factory() as session:
        return (await session.execute(select(func.count()).select_from(model))).scalar_one()


@pytest.mark.asyncio
async def test_entitlement_failure_keeps_recorded_payment(database_url):
    async with _wired(database_url) as (engine, factory):
        async with engine.begin() as conn:
            await conn.execute(text(
                "CREATE TRIGGER subscriptions_locked BEFORE INSERT ON user_subscriptions "
                "BEGIN SELECT RAISE(ABORT, 'subscriptions locked'); END"
            ))

        status, body = await _verify("pay_1")

        assert status == 500
        assert body["success"] is False
        assert body["details"] == "entitlement"
        assert await _count(factory, PaymentModel) == 1
        assert await _count(factory, SubscriptionModel) == 0

        async with engine.begin() as conn:
            await conn.execute(text("DROP TRIGGER subscriptions_locked"))

        status, body = await _verify("pay_1")
        assert status == 200
        assert body["data"]["alreadyProcessed"] is False
        assert await _count(factory, PaymentModel) == 1
        assert await _count(factory, SubscriptionModel) == 1

        status, body = await _verify("pay_1")
        assert status == 200
        assert body["data"]["alreadyProcessed"] is True


@pytest.mark.asyncio
async def test_profile_write_failure_does_not_abort_purchase(database_url):
    async with _wired(database_url) as (engine, factory):
        status, body = await _verify("pay_1")
        assert status == 200
        assert body["degraded"] == []

        async with engine.begin() as conn:
            await conn.execute(text(
                "CREATE TRIGGER profiles_locked BEFORE UPDATE ON profiles "
                "BEGIN SELECT RAISE(ABORT, 'profiles locked'); END"
            ))

        status, body = await _verify("pay_2")

        assert status == 200
        assert body["success"] is True
        assert body["degraded"] == ["profile"]
        assert body["data"]["alreadyProcessed"] is False
        assert await _count(factory, PaymentModel) == 2

        async with factory() as session:
            stored = (await session.execute(
                select(PaymentModel).where(PaymentModel.razorpay_payment_id == "pay_2")
            )).scalar_one()
        assert stored.entitlement_applied_at is not None
