"""API tests for the workflow, entitlement and admin endpoints, backed by in-memory fakes."""

import pytest
from httpx import ASGITransport, AsyncClient

from learnpass.application.services import EntitlementManager
from learnpass.config import get_settings
from learnpass.domain.identity import resolve_v1
from learnpass.infrastructure.dependencies import (
    get_entitlement_manager,
    get_workflow_orchestrator,
)
from learnpass.main import app


@pytest.fixture
def client_app(orchestrator, entitlement_repo, config):
    app.dependency_overrides[get_workflow_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_entitlement_manager] = lambda: EntitlementManager(entitlement_repo, config)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def admin_token(monkeypatch):
    monkeypatch.setattr(get_settings(), "admin_api_token", "s3cret")
    return "s3cret"


async def _post(app, body: dict):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        return await client.post("/api/v1/workflow", json=body)


@pytest.mark.asyncio
async def test_unknown_action_returns_400(client_app):
    response = await _post(client_app, {"action": "nope"})
    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "data": None,
        "error": "Unknown action: nope",
        "details": "routing",
        "degraded": [],
    }


@pytest.mark.asyncio
async def test_nested_data_shape_is_accepted(client_app, learning_repo):
    response = await _post(
        client_app,
        {"action": "update", "data": {"clerkUserId": "user_123", "courseId": "c1", "totalModules": 4}},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["user_id"] == resolve_v1("user_123")
    assert body["data"]["total_modules_count"] == 4


@pytest.mark.asyncio
async def test_evaluate_assessment_over_http(client_app, question_repo):
    question_repo.seed("c1", 3)
    response = await _post(
        client_app,
        {
            "action": "evaluateAssessment",
            "clerkUserId": "user_123",
            "courseId": "c1",
            "courseName": "Data 101",
            "answers": [{"questionId": "q1", "selectedAnswer": "A"},
                        {"questionId": "q2", "selectedAnswer": "A"},
                        {"questionId": "q3", "selectedAnswer": "A"}],
        },
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["score"] == 100
    assert data["certificateStatus"] == "Issued"


@pytest.mark.asyncio
async def test_failure_envelope_uses_500(client_app):
    response = await _post(
        client_app,
        {"action": "evaluateAssessment", "clerkUserId": "user_123", "courseId": "none", "answers": []},
    )
    assert response.status_code == 500
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_entitlement_status(client_app, entitlement_repo, config):
    await EntitlementManager(entitlement_repo, config).grant_or_extend(resolve_v1("user_123"), "pro")
    async with AsyncClient(transport=ASGITransport(app=client_app), base_url="http://test") as client:
        found = await client.get("/api/v1/entitlements/user_123")
        missing = await client.get("/api/v1/entitlements/someone_else")

    assert found.status_code == 200
    assert found.json()["active"] is True
    assert found.json()["plan_type"] == "pro"
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_admin_endpoints_disabled_without_token(client_app, monkeypatch):
    monkeypatch.setattr(get_settings(), "admin_api_token", "")
    async with AsyncClient(transport=ASGITransport(app=client_app), base_url="http://test") as client:
        response = await client.post(
            "/api/v1/admin/entitlements",
            json={"external_id": "user_123"},
            headers={"X-Admin-Token": "anything"},
        )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_admin_grant_and_revoke(client_app, admin_token, entitlement_repo):
    headers = {"X-Admin-Token": admin_token}
    async with AsyncClient(transport=ASGITransport(app=client_app), base_url="http://test") as client:
        wrong = await client.post(
            "/api/v1/admin/entitlements", json={"external_id": "user_123"}, headers={"X-Admin-Token": "x"}
        )
        granted = await client.post(
            "/api/v1/admin/entitlements",
            json={"external_id": "user_123", "plan_type": "pro", "months": 2},
            headers=headers,
        )
        revoked = await client.delete("/api/v1/admin/entitlements/user_123", headers=headers)
        revoked_again = await client.delete("/api/v1/admin/entitlements/user_123", headers=headers)

    assert wrong.status_code == 403
    assert granted.status_code == 201
    assert granted.json()["was_granted"] is True
    assert revoked.status_code == 204
    assert revoked_again.status_code == 404
    assert entitlement_repo.rows == {}
