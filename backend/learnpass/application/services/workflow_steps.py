"""Step policy shared by the workflows: critical steps stop, best-effort steps degrade."""

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from learnpass.domain.exceptions import StorageFault, WorkflowError
from learnpass.infrastructure.logging.workflow_logger import Stage, WorkflowLogger


@dataclass
class WorkflowResult:
    """Payload of a successful workflow plus the best-effort steps that failed."""

    data: Any
    degraded: list[str] = field(default_factory=list)


class StepTracker:
    """Applies the failure policy to the steps of one workflow run.

    Usage:
        steps = StepTracker(plog)
        with steps.best_effort(WorkflowStage.PROFILE, "profile"):
            await profiles.ensure(...)
        with steps.critical(WorkflowStage.PAYMENT, "payment", "Failed to store payment record"):
            await payments.create(...)
    """

    def __init__(self, log: WorkflowLogger):
        self._log = log
        self.degraded: list[str] = []

    @contextmanager
    def critical(self, stage: Stage, subsystem: str, failure_message: str):
        """Turn any unexpected failure into a StorageFault tagged with ``subsystem``.

        Nothing already committed is rolled back.
        """
        try:
            yield
        except WorkflowError:
            raise
        except Exception as exc:
            self._log.step_error(stage, failure_message, error=exc)
            raise StorageFault(f"{failure_message}: {exc}", subsystem=subsystem) from exc

    @contextmanager
    def best_effort(self, stage: Stage, step_name: str):
        """Log and record a failure, then let the workflow continue."""
        try:
            yield
        except Exception as exc:
            self.degraded.append(step_name)
            self._log.degraded(stage, f"{step_name} step failed", error=exc)

    def result(self, data: Any) -> WorkflowResult:
        return WorkflowResult(data=data, degraded=list(self.degraded))
