"""Abstract repository interface (port) for canonical course questions."""

from abc import ABC, abstractmethod

from learnpass.domain.entities import CourseQuestion


class CourseQuestionRepository(ABC):

    @abstractmethod
    async def list_active(self, course_id: str) -> list[CourseQuestion]:
        """Active questions for a course, ordered by order_index."""
        ...
