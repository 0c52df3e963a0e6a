"""Learning workflow: progress tracking and assessment evaluation."""

import logging

from learnpass.application.interfaces import LearningRecordRepository
from learnpass.application.schemas.workflow import LearningParams
from learnpass.application.services.assessment_service import AssessmentService
from learnpass.application.services.credential_service import CredentialIssuer
from learnpass.application.services.profile_service import ProfileService
from learnpass.application.services.workflow_steps import StepTracker, WorkflowResult
from learnpass.domain.entities import (
    CredentialOutcome,
    CredentialStatus,
    LearningRecord,
    SubmittedAnswer,
)
from learnpass.domain.exceptions import DuplicateEntityError, ValidationError
from learnpass.domain.identity import IdentityResolver
from learnpass.infrastructure.logging.workflow_logger import WorkflowLogger, WorkflowStage

logger = logging.getLogger(__name__)
plog = WorkflowLogger("LearningWorkflow")


class LearningWorkflow:
    """Runs the fetch, update and evaluateAssessment actions."""

    def __init__(
        self,
        resolver: IdentityResolver,
        profiles: ProfileService,
        learning: LearningRecordRepository,
        assessments: AssessmentService,
        issuer: CredentialIssuer,
    ):
        self._resolver = resolver
        self._profiles = profiles
        self._learning = learning
        self._assessments = assessments
        self._issuer = issuer

    # ── Progress ─────────────────────────────────────────────────────

    async def fetch(self, params: LearningParams) -> WorkflowResult:
        """Return the learning record, creating it when the module count is known."""
        steps = StepTracker(plog)
        user_id = self._resolver.resolve(params.external_id)
        await self._ensure_profile(steps, params.external_id)

        if not params.course_id:
            return steps.result(None)

        with steps.critical(WorkflowStage.LEARNING, "learning", "Failed to fetch learning record"):
            record = await self._learning.get(user_id, params.course_id)

        if record is None and params.total_modules:
            with steps.best_effort(WorkflowStage.LEARNING, "learning_create"):
                record, _ = await self._create_or_get(
                    LearningRecord(
                        user_id=user_id,
                        course_id=params.course_id,
                        total_modules_count=params.total_modules,
                    )
                )
                plog.step_complete(WorkflowStage.LEARNING, "Created learning record", id=record.id)

        return steps.result(record.to_dict() if record else None)

    async def update(self, params: LearningParams) -> WorkflowResult:
        """Merge caller-supplied progress into the record, creating it if needed."""
        if not params.course_id:
            raise ValidationError("courseId is required to update learning progress")

        steps = StepTracker(plog)
        user_id = self._resolver.resolve(params.external_id)
        await self._ensure_profile(steps, params.external_id)

        with steps.critical(WorkflowStage.LEARNING, "learning", "Failed to update learning record"):
            record = await self._learning.get(user_id, params.course_id)
            created = False
            if record is None:
                record, created = await self._create_or_get(
                    LearningRecord(
                        user_id=user_id,
                        course_id=params.course_id,
                        progress=params.progress or {},
                        completed_modules_count=params.completed_modules or 0,
                        total_modules_count=params.total_modules or 0,
                    )
                )
            if not created:
                record.apply_progress(
                    progress=params.progress,
                    completed_modules=params.completed_modules,
                    total_modules=params.total_modules,
                )
                record = await self._learning.update(record)

        plog.step_complete(
            WorkflowStage.LEARNING, "Learning record saved",
            id=record.id, completed=record.completed_modules_count,
        )
        return steps.result(record.to_dict())

    # ── Assessment ───────────────────────────────────────────────────

    async def evaluate_assessment(self, params: LearningParams) -> WorkflowResult:
        """Score a submission, store the result and issue a certificate on a pass."""
        if not params.course_id or params.answers is None:
            raise ValidationError("Answers and courseId are required for assessment evaluation")

        plog.separator("evaluateAssessment")
        steps = StepTracker(plog)
        user_id = self._resolver.resolve(params.external_id)
        await self._ensure_profile(steps, params.external_id)

        answers = [
            SubmittedAnswer(question_id=str(a.question_id), selected_answer=a.selected_answer)
            for a in params.answers
        ]
        with plog.timed_step(WorkflowStage.ASSESSMENT, "Scoring submission",
                             course_id=params.course_id, answers=len(answers)):
            result = await self._assessments.evaluate(params.course_id, answers)
        plog.detail("Submission scored", score=result.score, passed=result.passed)

        with steps.critical(WorkflowStage.LEARNING, "learning", "Failed to save assessment results"):
            record = await self._learning.get(user_id, params.course_id)
            if record is None:
                fresh = LearningRecord(user_id=user_id, course_id=params.course_id)
                fresh.record_assessment(result.score, result.passed, params.total_modules)
                record, created = await self._create_or_get(fresh)
                if not created:
                    record.record_assessment(result.score, result.passed, params.total_modules)
                    await self._learning.update(record)
            else:
                record.record_assessment(result.score, result.passed, params.total_modules)
                await self._learning.update(record)

        outcome = CredentialOutcome(CredentialStatus.NOT_APPLICABLE, message="Not applicable")
        if result.passed and params.course_name:
            outcome = await self._issue_credential(steps, user_id, params, result.score)

        return steps.result({
            **result.to_dict(),
            "saved": True,
            "certificateGenerated": outcome.generated,
            "certificateId": outcome.credential_id,
            "certificateStatus": outcome.status.value,
            "certificateMessage": outcome.message,
        })

    # ── Helpers ──────────────────────────────────────────────────────

    async def _issue_credential(
        self,
        steps: StepTracker,
        user_id: str,
        params: LearningParams,
        score: int,
    ) -> CredentialOutcome:
        user_name = None
        with steps.best_effort(WorkflowStage.PROFILE, "profile_lookup"):
            user_name = await self._profiles.display_name(user_id)
        if not user_name:
            plog.step_error(WorkflowStage.CREDENTIAL, "No profile data available for certificate")
            return CredentialOutcome(CredentialStatus.NOT_ISSUED, message="No profile data available")

        outcome = await self._issuer.issue(
            user_id=user_id,
            user_name=user_name,
            course_id=params.course_id,
            course_name=params.course_name,
            score=score,
            external_id=params.external_id,
        )
        steps.degraded.extend(outcome.degraded)
        return outcome

    async def _ensure_profile(self, steps: StepTracker, external_id: str) -> None:
        with steps.best_effort(WorkflowStage.PROFILE, "profile"):
            await self._profiles.ensure_for_learning(external_id)

    async def _create_or_get(self, record: LearningRecord) -> tuple[LearningRecord, bool]:
        """Insert ``record``; if a concurrent request won, return the stored row."""
        try:
            return await self._learning.create(record), True
        except DuplicateEntityError:
            existing = await self._learning.get(record.user_id, record.course_id)
            if existing is None:
                raise
            return existing, False
