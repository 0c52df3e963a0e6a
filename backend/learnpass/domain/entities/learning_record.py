"""Domain entity for per-course learning progress."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4


@dataclass
class LearningRecord:
    """Progress and assessment state for one (identity, course) pair."""

    user_id: str
    course_id: str
    progress: dict[str, Any] = field(default_factory=dict)
    completed_modules_count: int = 0
    total_modules_count: int = 0
    assessment_attempted: bool = False
    assessment_passed: bool = False
    assessment_score: int | None = None
    last_assessment_score: int = 0
    assessment_completed_at: datetime | None = None
    is_completed: bool = False
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def apply_progress(
        self,
        *,
        progress: dict[str, Any] | None = None,
        completed_modules: int | None = None,
        total_modules: int | None = None,
    ) -> None:
        """Prefer the new value, fall back to the stored one."""
        if progress is not None:
            self.progress = progress
        if completed_modules is not None:
            self.completed_modules_count = completed_modules
        if total_modules is not None:
            self.total_modules_count = total_modules
        self.updated_at = datetime.now(timezone.utc)

    def record_assessment(self, score: int, passed: bool, total_modules: int | None = None) -> None:
        now = datetime.now(timezone.utc)
        self.assessment_attempted = True
        self.assessment_passed = passed
        self.assessment_score = score
        self.last_assessment_score = score
        self.assessment_completed_at = now
        self.is_completed = passed
        if total_modules is not None:
            self.total_modules_count = total_modules
        self.updated_at = now

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "course_id": self.course_id,
            "progress": self.progress,
            "completed_modules_count": self.completed_modules_count,
            "total_modules_count": self.total_modules_count,
            "assessment_attempted": self.assessment_attempted,
            "assessment_passed": self.assessment_passed,
            "assessment_score": self.assessment_score,
            "last_assessment_score": self.last_assessment_score,
            "assessment_completed_at": (
                self.assessment_completed_at.isoformat() if self.assessment_completed_at else None
            ),
            "is_completed": self.is_completed,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
