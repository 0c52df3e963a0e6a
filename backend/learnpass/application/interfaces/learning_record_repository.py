"""Abstract repository interface (port) for learning records."""

from abc import ABC, abstractmethod

from learnpass.domain.entities import LearningRecord


class LearningRecordRepository(ABC):
    """Port for learning record persistence, unique per (user, course)."""

    @abstractmethod
    async def get(self, user_id: str, course_id: str) -> LearningRecord | None:
        ...

    @abstractmethod
    async def create(self, record: LearningRecord) -> LearningRecord:
        """Insert a record. Raises DuplicateEntityError if (user, course) exists."""
        ...

    @abstractmethod
    async def update(self, record: LearningRecord) -> LearningRecord:
        """Persist progress and assessment fields of an existing record."""
        ...
