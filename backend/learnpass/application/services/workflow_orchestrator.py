"""Workflow Orchestrator: routes an action tag and a flat parameter bag to a workflow."""

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

from learnpass.application.schemas.workflow import (
    CreateOrderParams,
    LearningParams,
    VerifyPaymentParams,
    WorkflowEnvelope,
)
from learnpass.application.services.learning_workflow import LearningWorkflow
from learnpass.application.services.payment_workflow import PaymentWorkflow
from learnpass.application.services.workflow_steps import WorkflowResult
from learnpass.domain.exceptions import UnknownActionError, ValidationError, WorkflowError
from learnpass.infrastructure.logging.workflow_logger import WorkflowLogger, WorkflowStage

logger = logging.getLogger(__name__)
plog = WorkflowLogger("Orchestrator")

Handler = Callable[[Any], Awaitable[WorkflowResult]]


def flatten_params(body: Mapping[str, Any]) -> dict[str, Any]:
    """Merge a nested ``data`` object into the top-level bag; top-level keys win."""
    flat: dict[str, Any] = {}
    nested = body.get("data")
    if isinstance(nested, Mapping):
        flat.update(nested)
    flat.update({k: v for k, v in body.items() if k not in ("action", "data")})
    return flat


def _describe(exc: SchemaValidationError) -> str:
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or "request"
    if first.get("type") == "missing":
        return f"Missing required field: {field}"
    return f"Invalid value for {field}: {first.get('msg')}"


class WorkflowOrchestrator:
    """Single entry point for the action-routed endpoint.

    Each action is a bounded sequence of steps run in order within the
    request. Errors become ``(status, envelope)`` pairs here so the
    transport layer only serializes.
    """

    def __init__(self, payments: PaymentWorkflow, learning: LearningWorkflow):
        self._actions: dict[str, tuple[type[BaseModel], Handler]] = {
            "create_order": (CreateOrderParams, payments.create_order),
            "verify_payment": (VerifyPaymentParams, payments.verify_payment),
            "fetch": (LearningParams, learning.fetch),
            "update": (LearningParams, learning.update),
            "evaluateAssessment": (LearningParams, learning.evaluate_assessment),
        }

    async def dispatch(
        self, action: str | None, params: Mapping[str, Any]
    ) -> tuple[int, WorkflowEnvelope]:
        plog.step_start(WorkflowStage.WORKFLOW, "Dispatching action", action=action)
        try:
            result = await self._run(action, params)
        except WorkflowError as exc:
            plog.step_error(
                WorkflowStage.ERROR, exc.message,
                action=action, subsystem=exc.subsystem, status=exc.http_status,
            )
            return exc.http_status, WorkflowEnvelope(
                success=False, error=exc.message, details=exc.subsystem
            )
        except Exception as exc:
            logger.exception("Unhandled error in action %s", action)
            return 500, WorkflowEnvelope(success=False, error=str(exc), details="workflow")

        plog.step_complete(
            WorkflowStage.COMPLETE, "Action finished",
            action=action, degraded=",".join(result.degraded) or None,
        )
        return 200, WorkflowEnvelope(success=True, data=result.data, degraded=result.degraded)

    async def _run(self, action: str | None, params: Mapping[str, Any]) -> WorkflowResult:
        if action not in self._actions:
            raise UnknownActionError(str(action))
        schema, handler = self._actions[action]
        try:
            parsed = schema.model_validate(dict(params))
        except SchemaValidationError as exc:
            raise ValidationError(_describe(exc)) from exc
        return await handler(parsed)
