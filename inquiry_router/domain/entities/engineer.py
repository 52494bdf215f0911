"""Engineer entities — qualifications, current load and assignment preferences."""

from dataclasses import dataclass, field
from datetime import datetime

from inquiry_router.domain.value_objects.rule_conditions import MAX_SKILL_LEVEL, MIN_SKILL_LEVEL


@dataclass(frozen=True)
class EngineerWorkload:
    engineer_id: str
    engineer_name: str
    skill_categories: frozenset[str] = frozenset()
    skill_level: int | None = None
    current_inquiries: int = 0
    completed_today: int = 0
    completed_this_week: int = 0
    completed_this_month: int = 0
    average_completion_hours: float | None = None
    last_assigned_at: datetime | None = None
    max_daily_assignments: int | None = field(default=None)

    def __post_init__(self) -> None:
        if self.current_inquiries < 0:
            raise ValueError(
                f"current_inquiries must be >= 0 (engineer {self.engineer_id}: {self.current_inquiries})"
            )

    def is_qualified_for(self, product_category: str) -> bool:
        return product_category in self.skill_categories

    def meets_skill_level(self, min_skill_level: int | None) -> bool:
        """Missing skill_level fails any minimum."""
        if min_skill_level is None:
            return True
        if self.skill_level is None:
            return False
        return self.skill_level >= min_skill_level


@dataclass(frozen=True)
class EngineerCapability:
    """One product category an engineer handles, at a skill level of 1-5."""

    engineer_id: str
    product_category: str
    skill_level: int = MIN_SKILL_LEVEL
    is_active: bool = True

    def __post_init__(self) -> None:
        if not self.product_category.strip():
            raise ValueError("product_category must not be blank")
        if not MIN_SKILL_LEVEL <= self.skill_level <= MAX_SKILL_LEVEL:
            raise ValueError(
                f"skill_level must be between {MIN_SKILL_LEVEL} and {MAX_SKILL_LEVEL}"
            )


@dataclass(frozen=True)
class EngineerPreference:
    """Per-engineer override of the self-select limit; None means the default."""

    engineer_id: str
    max_daily_assignments: int | None = None

    def __post_init__(self) -> None:
        if self.max_daily_assignments is not None and self.max_daily_assignments < 1:
            raise ValueError("max_daily_assignments must be >= 1")
