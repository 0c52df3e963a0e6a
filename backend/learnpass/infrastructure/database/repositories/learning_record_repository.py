"""Concrete repository implementations for learning records and course questions."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from learnpass.application.interfaces import CourseQuestionRepository, LearningRecordRepository
from learnpass.domain.entities import CourseQuestion, LearningRecord
from learnpass.domain.exceptions import DuplicateEntityError, EntityNotFoundError
from learnpass.infrastructure.database.dialect import as_utc
from learnpass.infrastructure.database.models import CourseQuestionModel, LearningRecordModel


class SQLAlchemyLearningRecordRepository(LearningRecordRepository):
    """Implements the LearningRecordRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: LearningRecordModel) -> LearningRecord:
        """Map ORM model → domain entity."""
        return LearningRecord(
            id=model.id,
            user_id=model.user_id,
            course_id=model.course_id,
            progress=dict(model.progress or {}),
            completed_modules_count=model.completed_modules_count,
            total_modules_count=model.total_modules_count,
            assessment_attempted=model.assessment_attempted,
            assessment_passed=model.assessment_passed,
            assessment_score=model.assessment_score,
            last_assessment_score=model.last_assessment_score,
            assessment_completed_at=as_utc(model.assessment_completed_at),
            is_completed=model.is_completed,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )

    def _to_model(self, entity: LearningRecord) -> LearningRecordModel:
        """Map domain entity → ORM model (for creation)."""
        return LearningRecordModel(
            id=entity.id,
            user_id=entity.user_id,
            course_id=entity.course_id,
            progress=entity.progress,
            completed_modules_count=entity.completed_modules_count,
            total_modules_count=entity.total_modules_count,
            assessment_attempted=entity.assessment_attempted,
            assessment_passed=entity.assessment_passed,
            assessment_score=entity.assessment_score,
            last_assessment_score=entity.last_assessment_score,
            assessment_completed_at=entity.assessment_completed_at,
            is_completed=entity.is_completed,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    async def get(self, user_id: str, course_id: str) -> LearningRecord | None:
        stmt = select(LearningRecordModel).where(
            LearningRecordModel.user_id == user_id,
            LearningRecordModel.course_id == course_id,
        )
        model = (await self._session.execute(stmt)).scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, record: LearningRecord) -> LearningRecord:
        model = self._to_model(record)
        try:
            async with self._session.begin_nested():
                self._session.add(model)
        except IntegrityError as exc:
            raise DuplicateEntityError(
                "LearningRecord", "user_id,course_id", f"{record.user_id},{record.course_id}"
            ) from exc
        return self._to_entity(model)

    async def update(self, record: LearningRecord) -> LearningRecord:
        model = await self._session.get(LearningRecordModel, record.id)
        if model is None:
            raise EntityNotFoundError("LearningRecord", record.id)
        model.progress = record.progress
        model.completed_modules_count = record.completed_modules_count
        model.total_modules_count = record.total_modules_count
        model.assessment_attempted = record.assessment_attempted
        model.assessment_passed = record.assessment_passed
        model.assessment_score = record.assessment_score
        model.last_assessment_score = record.last_assessment_score
        model.assessment_completed_at = record.assessment_completed_at
        model.is_completed = record.is_completed
        model.updated_at = record.updated_at
        await self._session.flush()
        return self._to_entity(model)


class SQLAlchemyCourseQuestionRepository(CourseQuestionRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def list_active(self, course_id: str) -> list[CourseQuestion]:
        stmt = (
            select(CourseQuestionModel)
            .where(
                CourseQuestionModel.course_id == course_id,
                CourseQuestionModel.is_active.is_(True),
            )
            .order_by(CourseQuestionModel.order_index)
        )
        result = await self._session.execute(stmt)
        return [
            CourseQuestion(
                id=row.id,
                course_id=row.course_id,
                question=row.question,
                correct_answer=row.correct_answer,
                options=list(row.options or []),
                order_index=row.order_index,
                is_active=row.is_active,
            )
            for row in result.scalars().all()
        ]
