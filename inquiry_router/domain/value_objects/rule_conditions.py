"""Rule conditions — one closed, typed variant per rule type.

Stored rules keep their conditions as a JSON object. ``parse_conditions``
turns that object into the variant for the rule's type and refuses any key
the variant does not declare, so a typo in the settings UI can never be
silently ignored by the evaluator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from inquiry_router.domain.value_objects.enums import RuleType

MIN_SKILL_LEVEL = 1
MAX_SKILL_LEVEL = 5


class InvalidRuleConditions(ValueError):
    """Raised when a raw conditions mapping does not fit its rule type."""


@dataclass(frozen=True)
class CategoryConditions:
    """Conditions shared by auto, rotation and load_balance rules."""

    product_categories: frozenset[str] = frozenset()
    auto_assign: bool = True

    def matches_category(self, product_category: str) -> bool:
        # Empty set = any category
        return not self.product_categories or product_category in self.product_categories

    def to_dict(self) -> dict[str, Any]:
        return {
            "product_categories": sorted(self.product_categories),
            "auto_assign": self.auto_assign,
        }


@dataclass(frozen=True)
class SkillConditions(CategoryConditions):
    """Conditions of a skill_based rule."""

    min_skill_level: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.min_skill_level is not None:
            data["min_skill_level"] = self.min_skill_level
        return data


RuleConditions = CategoryConditions | SkillConditions

_CATEGORY_KEYS = frozenset({"product_categories", "auto_assign"})
SKILL_ONLY_KEYS = frozenset({"min_skill_level"})
_SKILL_KEYS = _CATEGORY_KEYS | SKILL_ONLY_KEYS


def parse_conditions(rule_type: RuleType, raw: Mapping[str, Any] | None) -> RuleConditions:
    """Build the conditions variant for ``rule_type`` from a raw mapping.

    Raises:
        InvalidRuleConditions: on unknown keys, wrong value types or a skill
            level outside 1-5.
    """
    raw = dict(raw or {})
    allowed = _SKILL_KEYS if rule_type == RuleType.SKILL_BASED else _CATEGORY_KEYS
    unknown = set(raw) - allowed
    if unknown:
        raise InvalidRuleConditions(
            f"Unknown condition keys for {rule_type.value} rule: {', '.join(sorted(unknown))}"
        )

    categories = _parse_categories(raw.get("product_categories"))

    auto_assign = raw.get("auto_assign", True)
    if auto_assign is None:
        auto_assign = True
    if not isinstance(auto_assign, bool):
        raise InvalidRuleConditions("auto_assign must be a boolean")

    if rule_type != RuleType.SKILL_BASED:
        return CategoryConditions(product_categories=categories, auto_assign=auto_assign)

    min_level = raw.get("min_skill_level")
    if min_level is not None:
        # bool is an int subclass; reject it explicitly
        if isinstance(min_level, bool) or not isinstance(min_level, int):
            raise InvalidRuleConditions("min_skill_level must be an integer")
        if not MIN_SKILL_LEVEL <= min_level <= MAX_SKILL_LEVEL:
            raise InvalidRuleConditions(
                f"min_skill_level must be between {MIN_SKILL_LEVEL} and {MAX_SKILL_LEVEL}"
            )

    return SkillConditions(
        product_categories=categories,
        auto_assign=auto_assign,
        min_skill_level=min_level,
    )


def _parse_categories(value: Any) -> frozenset[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str) or not isinstance(value, (list, tuple, set, frozenset)):
        raise InvalidRuleConditions("product_categories must be a list of strings")
    categories = set()
    for item in value:
        if not isinstance(item, str):
            raise InvalidRuleConditions("product_categories must be a list of strings")
        if item.strip():
            categories.add(item.strip())
    return frozenset(categories)
