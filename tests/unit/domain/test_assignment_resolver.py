"""Tests for AssignmentResolver — suggestion and assignment decisions."""

from datetime import datetime

import pytest

from inquiry_router.domain.policies.assignment_resolver import (
    AUTO_ASSIGN_DISABLED,
    NO_ENGINEERS_AVAILABLE,
    NO_MATCHING_RULE,
    auto_assign,
    manual_assign,
    self_select,
    suggest_engineer,
)
from inquiry_router.domain.value_objects.enums import (
    AssignmentErrorCode,
    AssignmentType,
    RuleType,
)
from tests.fakes import make_engineer, make_inquiry, make_rule

# ─── Scenarios ───────────────────────────────────────────────────────


def test_scenario_a_lowest_load_suggested(bolts_rule, bolts_engineers):
    s = suggest_engineer(make_inquiry(category="bolts"), [bolts_rule], bolts_engineers)
    assert s.suggested_engineer.engineer_id == "e2"
    assert s.matching_rules == (bolts_rule,)
    assert s.governing_rule == bolts_rule
    assert s.error is None


def test_scenario_b_no_matching_rule(bolts_rule, bolts_engineers):
    s = suggest_engineer(make_inquiry(category="nuts"), [bolts_rule], bolts_engineers)
    assert s.suggested_engineer is None
    assert s.reason == NO_MATCHING_RULE
    assert s.matching_rules == ()
    assert s.error == AssignmentErrorCode.NO_MATCH


def test_scenario_c_auto_assign_disabled(bolts_engineers):
    rule = make_rule("r1", RuleType.LOAD_BALANCE, categories={"bolts"}, auto_assign=False)
    decision = auto_assign(make_inquiry(category="bolts"), [rule], bolts_engineers)
    assert decision.engineer_id is None
    assert decision.error.code == AssignmentErrorCode.NO_MATCH
    assert "auto-assign disabled" in decision.error.message


def test_scenario_c_auto_rule_type_disabled(bolts_engineers):
    rule = make_rule("r1", RuleType.AUTO, categories={"bolts"}, auto_assign=False)
    s = suggest_engineer(make_inquiry(category="bolts"), [rule], bolts_engineers)
    assert s.suggested_engineer is None
    assert s.reason == AUTO_ASSIGN_DISABLED

    decision = auto_assign(make_inquiry(category="bolts"), [rule], bolts_engineers)
    assert decision.engineer_id is None
    assert decision.reason == AUTO_ASSIGN_DISABLED


def test_scenario_d_empty_roster_never_raises(bolts_rule):
    s = suggest_engineer(make_inquiry(category="bolts"), [bolts_rule], [])
    assert s.suggested_engineer is None
    assert s.reason == NO_ENGINEERS_AVAILABLE
    assert s.error == AssignmentErrorCode.NO_ENGINEERS_AVAILABLE


def test_empty_roster_and_no_rules():
    s = suggest_engineer(make_inquiry(), [], [])
    assert s.suggested_engineer is None
    assert s.error == AssignmentErrorCode.NO_ENGINEERS_AVAILABLE


# ─── Properties ──────────────────────────────────────────────────────


def test_determinism(bolts_rule, bolts_engineers):
    inquiry = make_inquiry(category="bolts")
    first = suggest_engineer(inquiry, [bolts_rule], bolts_engineers)
    for _ in range(5):
        assert suggest_engineer(inquiry, [bolts_rule], bolts_engineers) == first


def test_priority_ordering_selects_governing_rule():
    skill = make_rule("r20", RuleType.SKILL_BASED, priority=20, categories={"bolts"}, min_skill_level=5)
    balance = make_rule("r10", RuleType.LOAD_BALANCE, priority=10, categories={"bolts"})
    engineers = [
        make_engineer("e1", {"bolts"}, current=5, level=5),
        make_engineer("e2", {"bolts"}, current=0, level=1),
    ]
    s = suggest_engineer(make_inquiry(category="bolts"), [skill, balance], engineers)
    assert s.governing_rule.id == "r10"
    assert s.suggested_engineer.engineer_id == "e2"
    assert [r.id for r in s.matching_rules] == ["r10", "r20"]


def test_inactive_rule_excluded_from_matching_rules(bolts_engineers):
    inactive = make_rule("r0", priority=1, categories={"bolts"}, active=False)
    active = make_rule("r1", priority=10, categories={"bolts"})
    s = suggest_engineer(make_inquiry(category="bolts"), [inactive, active], bolts_engineers)
    assert inactive not in s.matching_rules
    assert s.governing_rule.id == "r1"


def test_load_tie_break_is_stable(bolts_rule):
    engineers = [make_engineer("e9", {"bolts"}, current=1), make_engineer("e3", {"bolts"}, current=1)]
    for roster in (engineers, list(reversed(engineers))):
        s = suggest_engineer(make_inquiry(category="bolts"), [bolts_rule], roster)
        assert s.suggested_engineer.engineer_id == "e3"


def test_reason_names_rule_and_basis(bolts_engineers):
    rule = make_rule("r1", RuleType.SKILL_BASED, categories={"bolts"}, name="Skill-based Bolts")
    s = suggest_engineer(make_inquiry(category="bolts"), [rule], bolts_engineers)
    assert s.reason == (
        "matched rule 'Skill-based Bolts' — lowest current workload among qualified engineers"
    )


def test_no_qualified_engineer_for_category(bolts_rule):
    rule = make_rule("any", priority=1)
    engineers = [make_engineer("e1", {"nuts"})]
    s = suggest_engineer(make_inquiry(category="bolts"), [rule, bolts_rule], engineers)
    assert s.suggested_engineer is None
    assert s.error == AssignmentErrorCode.NO_ENGINEERS_AVAILABLE
    assert "bolts" in s.reason


# ─── Strategies ──────────────────────────────────────────────────────


def test_skill_based_respects_min_level():
    rule = make_rule("r1", RuleType.SKILL_BASED, categories={"bolts"}, min_skill_level=3)
    engineers = [
        make_engineer("e1", {"bolts"}, current=0, level=2),
        make_engineer("e2", {"bolts"}, current=4, level=4),
        make_engineer("e3", {"bolts"}, current=0, level=None),
    ]
    s = suggest_engineer(make_inquiry(category="bolts"), [rule], engineers)
    assert s.suggested_engineer.engineer_id == "e2"
    assert "skill level >= 3" in s.reason


def test_skill_based_falls_through_to_load_balance():
    rule = make_rule("r1", RuleType.SKILL_BASED, categories={"bolts"}, min_skill_level=5)
    engineers = [
        make_engineer("e1", {"bolts"}, current=2, level=3),
        make_engineer("e2", {"bolts"}, current=1, level=None),
        make_engineer("e3", {"nuts"}, current=0, level=5),
    ]
    s = suggest_engineer(make_inquiry(category="bolts"), [rule], engineers)
    assert s.suggested_engineer.engineer_id == "e2"
    assert "no engineer meets skill level 5" in s.reason


def test_rotation_picks_least_recently_assigned():
    rule = make_rule("r1", RuleType.ROTATION, categories={"bolts"})
    engineers = [
        make_engineer("e1", {"bolts"}, current=0, last_assigned_at=datetime(2026, 5, 2)),
        make_engineer("e2", {"bolts"}, current=3, last_assigned_at=datetime(2026, 5, 1)),
    ]
    s = suggest_engineer(make_inquiry(category="bolts"), [rule], engineers)
    assert s.suggested_engineer.engineer_id == "e2"
    assert "least recently assigned" in s.reason


def test_rotation_without_history_degrades_to_load_balance(bolts_engineers):
    rule = make_rule("r1", RuleType.ROTATION, categories={"bolts"})
    s = suggest_engineer(make_inquiry(category="bolts"), [rule], bolts_engineers)
    assert s.suggested_engineer.engineer_id == "e2"
    assert "no rotation history" in s.reason


def test_auto_rule_behaves_like_load_balance(bolts_engineers):
    rule = make_rule("r1", RuleType.AUTO, categories={"bolts"})
    s = suggest_engineer(make_inquiry(category="bolts"), [rule], bolts_engineers)
    assert s.suggested_engineer.engineer_id == "e2"


# ─── auto_assign ─────────────────────────────────────────────────────


def test_auto_assign_returns_engineer(bolts_rule, bolts_engineers):
    decision = auto_assign(make_inquiry(category="bolts"), [bolts_rule], bolts_engineers)
    assert decision.ok
    assert decision.engineer_id == "e2"
    assert decision.rule_id == "r1"
    assert decision.assignment_type == AssignmentType.AUTO


@pytest.mark.parametrize("rules", [[], [make_rule("r1", categories={"bolts"})]])
def test_auto_assign_never_overrides(rules, bolts_engineers):
    decision = auto_assign(make_inquiry(category="bolts", assigned="e1"), rules, bolts_engineers)
    assert decision.engineer_id is None
    assert decision.error.code == AssignmentErrorCode.ALREADY_ASSIGNED


def test_auto_assign_no_match(bolts_rule, bolts_engineers):
    decision = auto_assign(make_inquiry(category="nuts"), [bolts_rule], bolts_engineers)
    assert decision.error.code == AssignmentErrorCode.NO_MATCH


def test_auto_assign_empty_roster(bolts_rule):
    decision = auto_assign(make_inquiry(category="bolts"), [bolts_rule], [])
    assert decision.error.code == AssignmentErrorCode.NO_ENGINEERS_AVAILABLE


# ─── manual_assign ───────────────────────────────────────────────────


def test_manual_assign_valid(bolts_engineers):
    decision = manual_assign(make_inquiry(), "e1", "  customer asked for e1 ", AssignmentType.MANUAL, bolts_engineers)
    assert decision.ok
    assert decision.engineer_id == "e1"
    assert decision.reason == "customer asked for e1"
    assert decision.assigned_from is None


def test_manual_assign_unknown_engineer(bolts_engineers):
    decision = manual_assign(make_inquiry(), "ghost", None, AssignmentType.MANUAL, bolts_engineers)
    assert decision.error.code == AssignmentErrorCode.UNKNOWN_ENGINEER


def test_reassign_unassigned_inquiry_invalid(bolts_engineers):
    decision = manual_assign(make_inquiry(), "e1", None, AssignmentType.REASSIGN, bolts_engineers)
    assert decision.error.code == AssignmentErrorCode.INVALID_REASSIGNMENT


def test_reassign_to_current_engineer_invalid(bolts_engineers):
    decision = manual_assign(make_inquiry(assigned="e1"), "e1", None, AssignmentType.REASSIGN, bolts_engineers)
    assert decision.error.code == AssignmentErrorCode.INVALID_REASSIGNMENT


def test_reassign_records_previous_engineer(bolts_engineers):
    decision = manual_assign(make_inquiry(assigned="e1"), "e2", "", AssignmentType.REASSIGN, bolts_engineers)
    assert decision.ok
    assert decision.assigned_from == "e1"
    assert decision.reason == "Reassigned"


def test_manual_assign_requires_qualification():
    engineers = [make_engineer("e1", {"nuts"})]
    decision = manual_assign(make_inquiry(category="bolts"), "e1", None, AssignmentType.MANUAL, engineers)
    assert decision.error.code == AssignmentErrorCode.ENGINEER_NOT_QUALIFIED


def test_manual_assign_rejects_other_types(bolts_engineers):
    with pytest.raises(ValueError):
        manual_assign(make_inquiry(), "e1", None, AssignmentType.AUTO, bolts_engineers)


# ─── self_select ─────────────────────────────────────────────────────


def test_self_select_valid(bolts_engineers):
    decision = self_select(make_inquiry(), "e1", bolts_engineers)
    assert decision.ok
    assert decision.assignment_type == AssignmentType.SELF_SELECT


def test_self_select_already_assigned(bolts_engineers):
    decision = self_select(make_inquiry(assigned="e2"), "e1", bolts_engineers)
    assert decision.error.code == AssignmentErrorCode.ALREADY_ASSIGNED


def test_self_select_default_limit():
    engineers = [make_engineer("e1", {"bolts"}, current=10)]
    decision = self_select(make_inquiry(), "e1", engineers)
    assert decision.error.code == AssignmentErrorCode.MAX_ASSIGNMENTS_REACHED


def test_self_select_engineer_limit_overrides_default():
    engineers = [make_engineer("e1", {"bolts"}, current=2, max_daily=2)]
    assert self_select(make_inquiry(), "e1", engineers, 10).error.code == (
        AssignmentErrorCode.MAX_ASSIGNMENTS_REACHED
    )
    engineers = [make_engineer("e1", {"bolts"}, current=12, max_daily=20)]
    assert self_select(make_inquiry(), "e1", engineers, 10).ok
