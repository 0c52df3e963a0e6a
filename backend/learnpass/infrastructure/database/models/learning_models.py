"""SQLAlchemy ORM models for learning progress and course questions."""

from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, DateTime, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from learnpass.infrastructure.database.base import Base


class LearningRecordModel(Base):
    """ORM model — maps to the 'user_learning' table."""

    __tablename__ = "user_learning"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    course_id: Mapped[str] = mapped_column(String(100), nullable=False)
    progress: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    completed_modules_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_modules_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    assessment_attempted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    assessment_passed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    assessment_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    last_assessment_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    assessment_completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_user_learning_user_course"),
    )

    def __repr__(self) -> str:
        return f"<LearningRecordModel(user_id={self.user_id}, course='{self.course_id}')>"


class CourseQuestionModel(Base):
    """ORM model — maps to the 'course_questions' table."""

    __tablename__ = "course_questions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    course_id: Mapped[str] = mapped_column(String(100), nullable=False)
    question: Mapped[str] = mapped_column(Text, nullable=False)
    options: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    correct_answer: Mapped[object] = mapped_column(JSON, nullable=False)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_course_questions_course", "course_id", "order_index"),
    )
