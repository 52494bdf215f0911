"""Port interface for engineer workloads, capabilities and preferences."""

from abc import ABC, abstractmethod

from inquiry_router.domain.entities.engineer import (
    EngineerCapability,
    EngineerPreference,
    EngineerWorkload,
)


class EngineerRepository(ABC):
    @abstractmethod
    async def get_workloads(self, product_category: str | None = None) -> list[EngineerWorkload]:
        """Return one workload snapshot per active engineer.

        When ``product_category`` is given, ``skill_level`` carries each
        engineer's capability level for that category (None if they have none).
        """
        ...

    @abstractmethod
    async def get_capabilities(self, engineer_id: str) -> list[EngineerCapability] | None:
        """All capabilities of an engineer, inactive ones included. None if unknown."""
        ...

    @abstractmethod
    async def save_capability(self, capability: EngineerCapability) -> EngineerCapability | None:
        """Create or replace the capability for (engineer, category). None if unknown engineer."""
        ...

    @abstractmethod
    async def update_preference(self, preference: EngineerPreference) -> EngineerPreference | None:
        ...
