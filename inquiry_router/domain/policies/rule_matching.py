"""RuleMatchingPolicy — which active rules apply to an inquiry, in what order."""

from __future__ import annotations

from typing import Iterable

from inquiry_router.domain.entities.assignment_rule import AssignmentRule
from inquiry_router.domain.entities.inquiry import Inquiry


def rule_matches(rule: AssignmentRule, inquiry: Inquiry) -> bool:
    """An active rule matches when its category set is empty or names the inquiry's."""
    return rule.is_active and rule.matches_category(inquiry.product_category)


def evaluate_rules(inquiry: Inquiry, rules: Iterable[AssignmentRule]) -> tuple[AssignmentRule, ...]:
    """Pure function: return the matching rules, governing rule first.

    Sorted by (priority ASC, id ASC) so equal priorities resolve the same way
    on every call.
    """
    matching = [r for r in rules if rule_matches(r, inquiry)]
    return tuple(sorted(matching, key=lambda r: r.sort_key))
