"""Domain entities for course assessments."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class CourseQuestion:
    """A canonical question with its answer key."""

    id: str
    course_id: str
    question: str
    correct_answer: Any
    options: list[Any] = field(default_factory=list)
    order_index: int = 0
    is_active: bool = True


@dataclass(frozen=True)
class SubmittedAnswer:
    question_id: str
    selected_answer: Any


@dataclass(frozen=True)
class AnswerEvaluation:
    question_id: str
    selected_answer: Any
    is_correct: bool
    correct_answer: Any | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "questionId": self.question_id,
            "selectedAnswer": self.selected_answer,
            "isCorrect": self.is_correct,
            "correctAnswer": self.correct_answer,
        }


@dataclass(frozen=True)
class AssessmentScore:
    """Outcome of scoring one submission."""

    total_questions: int
    correct_answers: int
    score: int
    passed: bool
    answers: list[AnswerEvaluation]

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalQuestions": self.total_questions,
            "correctAnswers": self.correct_answers,
            "score": self.score,
            "passed": self.passed,
            "answers": [a.to_dict() for a in self.answers],
        }
