"""Port interface for assignment history persistence."""

from abc import ABC, abstractmethod

from inquiry_router.domain.entities.assignment import AssignmentHistory


class AssignmentRepository(ABC):
    @abstractmethod
    async def save(self, record: AssignmentHistory) -> AssignmentHistory:
        ...

    @abstractmethod
    async def get_history(
        self,
        inquiry_id: str | None = None,
        engineer_id: str | None = None,
        limit: int = 50,
    ) -> list[AssignmentHistory]:
        """Newest first, optionally filtered by inquiry and/or assignee."""
        ...
