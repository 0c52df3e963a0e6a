"""Abstract repository interface (port) for cross-system completion tracking."""

from abc import ABC, abstractmethod

from learnpass.domain.entities import CompletionRecord


class CompletionTrackingRepository(ABC):

    @abstractmethod
    async def record_completion(
        self,
        external_id: str,
        course_id: str,
        course_name: str,
        course_complete: bool,
        assessment_score: int,
    ) -> None:
        """Upsert the tracking row for (external_id, course_id)."""
        ...

    @abstractmethod
    async def list_passed(self, external_id: str) -> list[CompletionRecord]:
        """Rows where the course is complete and the assessment was passed."""
        ...
