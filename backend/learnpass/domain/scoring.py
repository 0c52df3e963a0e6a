"""Assessment scoring against canonical answer keys."""

from collections.abc import Iterable, Sequence

from learnpass.domain.entities import AnswerEvaluation, AssessmentScore, CourseQuestion, SubmittedAnswer
from learnpass.domain.exceptions import ConfigurationError
from learnpass.domain.workflow_config import DEFAULT_PASSING_SCORE


def score_assessment(
    submitted: Iterable[SubmittedAnswer],
    questions: Sequence[CourseQuestion],
    passing_score: int = DEFAULT_PASSING_SCORE,
) -> AssessmentScore:
    """Score a submission.

    The denominator is the number of canonical questions, not the number of
    answers submitted, so unanswered questions count as wrong. An answer
    whose question id is unknown is marked incorrect.
    """
    if not questions:
        raise ConfigurationError("No questions found for this course", subsystem="assessment")

    by_id = {str(q.id): q for q in questions}
    evaluations: list[AnswerEvaluation] = []
    correct_ids: set[str] = set()
    for answer in submitted:
        question = by_id.get(str(answer.question_id))
        is_correct = question is not None and answer.selected_answer == question.correct_answer
        if is_correct:
            correct_ids.add(str(answer.question_id))
        evaluations.append(
            AnswerEvaluation(
                question_id=answer.question_id,
                selected_answer=answer.selected_answer,
                is_correct=is_correct,
                correct_answer=question.correct_answer if question is not None else None,
            )
        )

    # A question answered twice still counts once, keeping the score within 0..100.
    correct = len(correct_ids)
    total = len(questions)
    # Integer round-half-up of 100 * correct / total.
    score = (200 * correct + total) // (2 * total)
    return AssessmentScore(
        total_questions=total,
        correct_answers=correct,
        score=score,
        passed=score >= passing_score,
        answers=evaluations,
    )
