"""Port interface for inquiry persistence."""

from abc import ABC, abstractmethod

from inquiry_router.domain.entities.inquiry import Inquiry


class InquiryRepository(ABC):
    @abstractmethod
    async def get_by_id(self, inquiry_id: str) -> Inquiry | None:
        ...

    @abstractmethod
    async def get_all(self) -> list[Inquiry]:
        ...

    @abstractmethod
    async def confirm_assignment(
        self,
        inquiry_id: str,
        engineer_id: str,
        expected_version: int,
        require_unassigned: bool = False,
    ) -> bool:
        """Compare-and-set the assigned engineer.

        Succeeds only while the stored version equals ``expected_version``
        (and, with ``require_unassigned``, no engineer is set). Bumps the
        version on success. Returns False when another writer got there first.
        """
        ...
