"""AssignmentRule entity — a configured routing policy."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

from inquiry_router.domain.value_objects.enums import RuleType
from inquiry_router.domain.value_objects.rule_conditions import (
    SKILL_ONLY_KEYS,
    CategoryConditions,
    RuleConditions,
    parse_conditions,
)

RULE_FIELDS = frozenset({"rule_name", "rule_type", "priority", "conditions", "is_active"})


@dataclass(frozen=True)
class AssignmentRule:
    id: str
    rule_name: str
    rule_type: RuleType
    priority: int
    conditions: RuleConditions = field(default_factory=CategoryConditions)
    is_active: bool = True
    created_at: datetime | None = field(default=None, compare=False)
    updated_at: datetime | None = field(default=None, compare=False)

    @classmethod
    def from_raw(
        cls,
        id: str,
        rule_name: str,
        rule_type: RuleType | str,
        priority: int,
        conditions: Mapping[str, Any] | None = None,
        is_active: bool = True,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ) -> "AssignmentRule":
        """Build a rule from stored/raw values, validating every field.

        Raises:
            ValueError: on a blank name, a non-integer priority, a non-boolean
                is_active, an unknown rule type or invalid conditions.
        """
        if not isinstance(rule_name, str) or not rule_name.strip():
            raise ValueError("rule_name must be a non-empty string")
        # bool is an int subclass; reject it explicitly
        if isinstance(priority, bool) or not isinstance(priority, int):
            raise ValueError("priority must be an integer")
        if not isinstance(is_active, bool):
            raise ValueError("is_active must be a boolean")

        rt = RuleType(rule_type)
        return cls(
            id=id,
            rule_name=rule_name.strip(),
            rule_type=rt,
            priority=priority,
            conditions=parse_conditions(rt, conditions),
            is_active=is_active,
            created_at=created_at,
            updated_at=updated_at,
        )

    def updated(self, changes: Mapping[str, Any]) -> "AssignmentRule":
        """Return this rule with ``changes`` applied and re-validated.

        Changing ``rule_type`` without sending ``conditions`` keeps the
        category conditions and drops keys the new type does not accept.

        Raises:
            ValueError: on fields outside RULE_FIELDS or any invalid value.
        """
        unknown = set(changes) - RULE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update rule fields: {', '.join(sorted(unknown))}")

        merged: dict[str, Any] = {
            "rule_name": self.rule_name,
            "rule_type": self.rule_type,
            "priority": self.priority,
            "conditions": self.conditions.to_dict(),
            "is_active": self.is_active,
        }
        merged.update(changes)

        if "conditions" not in changes and RuleType(merged["rule_type"]) != RuleType.SKILL_BASED:
            merged["conditions"] = {
                k: v for k, v in merged["conditions"].items() if k not in SKILL_ONLY_KEYS
            }

        return AssignmentRule.from_raw(
            id=self.id, created_at=self.created_at, updated_at=self.updated_at, **merged
        )

    def matches_category(self, product_category: str) -> bool:
        return self.conditions.matches_category(product_category)

    @property
    def sort_key(self) -> tuple[int, str]:
        return (self.priority, self.id)
