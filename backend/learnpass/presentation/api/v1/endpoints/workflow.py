"""Action-routed workflow endpoint."""

from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from learnpass.application.services import WorkflowOrchestrator, flatten_params
from learnpass.infrastructure.dependencies import get_workflow_orchestrator

router = APIRouter(prefix="/workflow", tags=["Workflow"])


@router.post("")
async def run_workflow(
    body: dict[str, Any] = Body(..., examples=[{"action": "fetch", "clerkUserId": "user_123"}]),
    orchestrator: WorkflowOrchestrator = Depends(get_workflow_orchestrator),
) -> JSONResponse:
    """Run one action. Always answers with the ``{success, data, error, details, degraded}`` envelope."""
    status_code, envelope = await orchestrator.dispatch(body.get("action"), flatten_params(body))
    return JSONResponse(status_code=status_code, content=envelope.model_dump(mode="json"))
