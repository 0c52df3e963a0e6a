"""Assessment Scorer: loads canonical answer keys and scores submissions."""

from collections.abc import Sequence

from learnpass.application.interfaces import CourseQuestionRepository
from learnpass.domain.entities import AssessmentScore, SubmittedAnswer
from learnpass.domain.exceptions import StorageFault
from learnpass.domain.scoring import score_assessment
from learnpass.domain.workflow_config import WorkflowConfig


class AssessmentService:

    def __init__(self, questions: CourseQuestionRepository, config: WorkflowConfig):
        self._questions = questions
        self._config = config

    async def evaluate(self, course_id: str, answers: Sequence[SubmittedAnswer]) -> AssessmentScore:
        """Score ``answers`` for ``course_id``.

        Raises ConfigurationError when the course has no active questions.
        """
        try:
            questions = await self._questions.list_active(course_id)
        except Exception as exc:
            raise StorageFault(
                f"Failed to fetch course questions: {exc}", subsystem="assessment"
            ) from exc
        return score_assessment(answers, questions, self._config.passing_score)
