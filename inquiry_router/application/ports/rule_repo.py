"""Port interface for assignment rule persistence."""

from abc import ABC, abstractmethod
from typing import Any

from inquiry_router.domain.entities.assignment_rule import AssignmentRule


class RuleRepository(ABC):
    @abstractmethod
    async def get_all(self) -> list[AssignmentRule]:
        ...

    @abstractmethod
    async def get_active(self) -> list[AssignmentRule]:
        ...

    @abstractmethod
    async def get_by_id(self, rule_id: str) -> AssignmentRule | None:
        ...

    @abstractmethod
    async def update(self, rule_id: str, changes: dict[str, Any]) -> AssignmentRule | None:
        """Apply partial changes and return the updated rule (None if missing).

        Raises InvalidRuleConditions when the resulting conditions do not fit
        the resulting rule type.
        """
        ...
