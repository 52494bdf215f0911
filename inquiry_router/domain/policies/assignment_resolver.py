"""AssignmentResolver — rule-driven engineer suggestion and assignment decisions.

Every function here is pure: it reads caller-supplied snapshots of the
inquiry, the rule set and the engineer roster, and returns a value. Nothing
is written; the caller commits a decision through the inquiry repository.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from inquiry_router.domain.entities.assignment_rule import AssignmentRule
from inquiry_router.domain.entities.engineer import EngineerWorkload
from inquiry_router.domain.entities.inquiry import Inquiry
from inquiry_router.domain.policies.engineer_selection import (
    has_rotation_history,
    pick_by_skill,
    pick_least_recent,
    pick_lowest_load,
    qualified_engineers,
)
from inquiry_router.domain.policies.rule_matching import evaluate_rules
from inquiry_router.domain.value_objects.assignment_error import AssignmentError
from inquiry_router.domain.value_objects.enums import (
    AssignmentErrorCode,
    AssignmentType,
    RuleType,
)
from inquiry_router.domain.value_objects.rule_conditions import SkillConditions

NO_MATCHING_RULE = "no matching rule"
NO_ENGINEERS_AVAILABLE = "no engineers available"
AUTO_ASSIGN_DISABLED = "auto-assign disabled for matching rule"

DEFAULT_MAX_DAILY_ASSIGNMENTS = 10

_LOWEST_LOAD = "lowest current workload among qualified engineers"


@dataclass(frozen=True)
class AssignmentSuggestion:
    """Result of ``suggest_engineer``."""

    suggested_engineer: EngineerWorkload | None
    reason: str
    matching_rules: tuple[AssignmentRule, ...] = ()
    governing_rule: AssignmentRule | None = None
    error: AssignmentErrorCode | None = None


@dataclass(frozen=True)
class AssignmentDecision:
    """Who should get an inquiry, or why nobody should."""

    engineer_id: str | None
    assignment_type: AssignmentType
    reason: str
    rule_id: str | None = None
    assigned_from: str | None = None
    error: AssignmentError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def refused(
        cls,
        assignment_type: AssignmentType,
        code: AssignmentErrorCode,
        message: str,
        rule_id: str | None = None,
    ) -> "AssignmentDecision":
        return cls(
            engineer_id=None,
            assignment_type=assignment_type,
            reason=message,
            rule_id=rule_id,
            error=AssignmentError(code=code, message=message),
        )


# ─── Suggestion ──────────────────────────────────────────────────────


def suggest_engineer(
    inquiry: Inquiry,
    rules: Iterable[AssignmentRule],
    engineers: Sequence[EngineerWorkload],
) -> AssignmentSuggestion:
    """Recommend an engineer for ``inquiry`` under the governing rule.

    Steps:
      1. Empty roster → nobody, NO_ENGINEERS_AVAILABLE.
      2. No active rule matches the category → nobody, NO_MATCH.
      3. The first matching rule (lowest priority, then id) governs:
         - skill_based: qualified engineers at or above min_skill_level,
           lowest load; falls through to load_balance when nobody qualifies
         - load_balance: qualified engineers, lowest load
         - rotation: least recently assigned; load_balance without history
         - auto: load_balance, or nobody when auto_assign is off
      4. Load ties are broken by engineer_id.

    Never raises for empty rosters or missing optional fields.
    """
    matching = evaluate_rules(inquiry, rules)

    if not engineers:
        return AssignmentSuggestion(
            suggested_engineer=None,
            reason=NO_ENGINEERS_AVAILABLE,
            matching_rules=matching,
            governing_rule=matching[0] if matching else None,
            error=AssignmentErrorCode.NO_ENGINEERS_AVAILABLE,
        )

    if not matching:
        return AssignmentSuggestion(
            suggested_engineer=None,
            reason=NO_MATCHING_RULE,
            error=AssignmentErrorCode.NO_MATCH,
        )

    rule = matching[0]

    if rule.rule_type == RuleType.AUTO and not rule.conditions.auto_assign:
        return AssignmentSuggestion(
            suggested_engineer=None,
            reason=AUTO_ASSIGN_DISABLED,
            matching_rules=matching,
            governing_rule=rule,
            error=AssignmentErrorCode.NO_MATCH,
        )

    qualified = qualified_engineers(engineers, inquiry.product_category)
    if not qualified:
        return AssignmentSuggestion(
            suggested_engineer=None,
            reason=(
                f"matched rule '{rule.rule_name}' — no engineers available "
                f"for category '{inquiry.product_category}'"
            ),
            matching_rules=matching,
            governing_rule=rule,
            error=AssignmentErrorCode.NO_ENGINEERS_AVAILABLE,
        )

    chosen, basis = _select(rule, qualified)
    return AssignmentSuggestion(
        suggested_engineer=chosen,
        reason=f"matched rule '{rule.rule_name}' — {basis}",
        matching_rules=matching,
        governing_rule=rule,
    )


def _select(
    rule: AssignmentRule,
    qualified: list[EngineerWorkload],
) -> tuple[EngineerWorkload, str]:
    """Apply the governing rule's strategy to a non-empty qualified set."""
    if rule.rule_type == RuleType.SKILL_BASED:
        min_level = (
            rule.conditions.min_skill_level
            if isinstance(rule.conditions, SkillConditions)
            else None
        )
        chosen = pick_by_skill(qualified, min_level)
        if chosen is not None:
            if min_level is None:
                return chosen, _LOWEST_LOAD
            return chosen, (
                f"lowest current workload among engineers with skill level >= {min_level}"
            )
        return pick_lowest_load(qualified), (
            f"no engineer meets skill level {min_level}, {_LOWEST_LOAD}"
        )

    if rule.rule_type == RuleType.ROTATION:
        if has_rotation_history(qualified):
            return pick_least_recent(qualified), "least recently assigned among qualified engineers"
        return pick_lowest_load(qualified), f"no rotation history, {_LOWEST_LOAD}"

    # load_balance and auto
    return pick_lowest_load(qualified), _LOWEST_LOAD


# ─── Decisions ───────────────────────────────────────────────────────


def auto_assign(
    inquiry: Inquiry,
    rules: Iterable[AssignmentRule],
    engineers: Sequence[EngineerWorkload],
) -> AssignmentDecision:
    """Decide a system-initiated assignment.

    An inquiry that already has an engineer is refused with ALREADY_ASSIGNED
    whatever the rule set says. The decision is advisory; nothing is written.
    """
    if inquiry.is_assigned():
        return AssignmentDecision.refused(
            AssignmentType.AUTO,
            AssignmentErrorCode.ALREADY_ASSIGNED,
            f"inquiry {inquiry.id} is already assigned to engineer {inquiry.assigned_engineer_id}",
        )

    suggestion = suggest_engineer(inquiry, rules, engineers)
    rule = suggestion.governing_rule
    rule_id = rule.id if rule else None

    if suggestion.suggested_engineer is None:
        return AssignmentDecision.refused(
            AssignmentType.AUTO,
            suggestion.error or AssignmentErrorCode.NO_MATCH,
            suggestion.reason,
            rule_id=rule_id,
        )

    if rule is None or not rule.conditions.auto_assign:
        return AssignmentDecision.refused(
            AssignmentType.AUTO,
            AssignmentErrorCode.NO_MATCH,
            AUTO_ASSIGN_DISABLED,
            rule_id=rule_id,
        )

    return AssignmentDecision(
        engineer_id=suggestion.suggested_engineer.engineer_id,
        assignment_type=AssignmentType.AUTO,
        reason=suggestion.reason,
        rule_id=rule_id,
    )


def manual_assign(
    inquiry: Inquiry,
    engineer_id: str,
    reason: str | None,
    assignment_type: AssignmentType,
    engineers: Sequence[EngineerWorkload],
) -> AssignmentDecision:
    """Validate a human-chosen assignment or reassignment.

    Raises:
        ValueError: if ``assignment_type`` is neither manual nor reassign.
    """
    assignment_type = AssignmentType(assignment_type)
    if assignment_type not in (AssignmentType.MANUAL, AssignmentType.REASSIGN):
        raise ValueError(f"manual_assign does not handle {assignment_type.value} assignments")

    engineer = _find(engineers, engineer_id)
    if engineer is None:
        return AssignmentDecision.refused(
            assignment_type,
            AssignmentErrorCode.UNKNOWN_ENGINEER,
            f"engineer {engineer_id} is not in the roster",
        )

    if assignment_type == AssignmentType.REASSIGN:
        if not inquiry.is_assigned():
            return AssignmentDecision.refused(
                assignment_type,
                AssignmentErrorCode.INVALID_REASSIGNMENT,
                f"inquiry {inquiry.id} is not assigned, nothing to reassign",
            )
        if inquiry.assigned_engineer_id == engineer_id:
            return AssignmentDecision.refused(
                assignment_type,
                AssignmentErrorCode.INVALID_REASSIGNMENT,
                f"inquiry {inquiry.id} is already assigned to engineer {engineer_id}",
            )

    if not engineer.is_qualified_for(inquiry.product_category):
        return AssignmentDecision.refused(
            assignment_type,
            AssignmentErrorCode.ENGINEER_NOT_QUALIFIED,
            f"engineer {engineer_id} is not qualified for category '{inquiry.product_category}'",
        )

    default_reason = "Reassigned" if assignment_type == AssignmentType.REASSIGN else "Manually assigned"
    return AssignmentDecision(
        engineer_id=engineer_id,
        assignment_type=assignment_type,
        reason=(reason or "").strip() or default_reason,
        assigned_from=inquiry.assigned_engineer_id,
    )


def self_select(
    inquiry: Inquiry,
    engineer_id: str,
    engineers: Sequence[EngineerWorkload],
    default_max_daily_assignments: int = DEFAULT_MAX_DAILY_ASSIGNMENTS,
) -> AssignmentDecision:
    """Validate an engineer picking an unassigned inquiry for themselves."""
    kind = AssignmentType.SELF_SELECT

    if inquiry.is_assigned():
        return AssignmentDecision.refused(
            kind,
            AssignmentErrorCode.ALREADY_ASSIGNED,
            f"inquiry {inquiry.id} is already assigned to engineer {inquiry.assigned_engineer_id}",
        )

    engineer = _find(engineers, engineer_id)
    if engineer is None:
        return AssignmentDecision.refused(
            kind,
            AssignmentErrorCode.UNKNOWN_ENGINEER,
            f"engineer {engineer_id} is not in the roster",
        )

    if not engineer.is_qualified_for(inquiry.product_category):
        return AssignmentDecision.refused(
            kind,
            AssignmentErrorCode.ENGINEER_NOT_QUALIFIED,
            f"engineer {engineer_id} is not qualified for category '{inquiry.product_category}'",
        )

    limit = engineer.max_daily_assignments or default_max_daily_assignments
    if engineer.current_inquiries >= limit:
        return AssignmentDecision.refused(
            kind,
            AssignmentErrorCode.MAX_ASSIGNMENTS_REACHED,
            f"engineer {engineer_id} already has {engineer.current_inquiries} inquiries (limit {limit})",
        )

    return AssignmentDecision(
        engineer_id=engineer_id,
        assignment_type=kind,
        reason="Engineer self-selected",
    )


def _find(engineers: Iterable[EngineerWorkload], engineer_id: str) -> EngineerWorkload | None:
    return next((e for e in engineers if e.engineer_id == engineer_id), None)
