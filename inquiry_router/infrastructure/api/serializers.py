"""Domain object → API response dict converters."""

from __future__ import annotations

from inquiry_router.domain.entities.assignment import AssignmentHistory
from inquiry_router.domain.entities.assignment_rule import AssignmentRule
from inquiry_router.domain.entities.engineer import (
    EngineerCapability,
    EngineerPreference,
    EngineerWorkload,
)
from inquiry_router.domain.entities.inquiry import Inquiry
from inquiry_router.domain.policies.assignment_resolver import AssignmentSuggestion


def _iso(dt) -> str | None:
    return dt.isoformat() if dt else None


def serialize_rule(r: AssignmentRule) -> dict:
    return {
        "id": r.id,
        "rule_name": r.rule_name,
        "rule_type": r.rule_type.value,
        "priority": r.priority,
        "conditions": r.conditions.to_dict(),
        "is_active": r.is_active,
        "created_at": _iso(r.created_at),
        "updated_at": _iso(r.updated_at),
    }


def serialize_workload(e: EngineerWorkload) -> dict:
    return {
        "engineer_id": e.engineer_id,
        "engineer_name": e.engineer_name,
        "skill_categories": sorted(e.skill_categories),
        "skill_level": e.skill_level,
        "current_inquiries": e.current_inquiries,
        "completed_today": e.completed_today,
        "completed_this_week": e.completed_this_week,
        "completed_this_month": e.completed_this_month,
        "average_completion_hours": e.average_completion_hours,
        "last_assigned_at": _iso(e.last_assigned_at),
    }


def serialize_capability(c: EngineerCapability) -> dict:
    return {
        "engineer_id": c.engineer_id,
        "product_category": c.product_category,
        "skill_level": c.skill_level,
        "is_active": c.is_active,
    }


def serialize_preference(p: EngineerPreference) -> dict:
    return {
        "engineer_id": p.engineer_id,
        "max_daily_assignments": p.max_daily_assignments,
    }


def serialize_inquiry(i: Inquiry) -> dict:
    return {
        "id": i.id,
        "inquiry_no": i.inquiry_no,
        "customer_name": i.customer_name,
        "product_name": i.product_name,
        "product_category": i.product_category,
        "status": i.status.value,
        "assigned_engineer_id": i.assigned_engineer_id,
        "assigned_at": _iso(i.assigned_at),
        "version": i.version,
    }


def serialize_history(h: AssignmentHistory) -> dict:
    return {
        "id": h.id,
        "inquiry_id": h.inquiry_id,
        "assigned_from": h.assigned_from,
        "assigned_to": h.assigned_to,
        "assigned_by": h.assigned_by,
        "assignment_type": h.assignment_type.value,
        "assignment_reason": h.assignment_reason,
        "rule_id": h.rule_id,
        "assigned_at": _iso(h.assigned_at),
    }


def serialize_suggestion(s: AssignmentSuggestion) -> dict:
    return {
        "suggested_engineer": (
            serialize_workload(s.suggested_engineer) if s.suggested_engineer else None
        ),
        "reason": s.reason,
        "governing_rule_id": s.governing_rule.id if s.governing_rule else None,
        "matching_rules": [serialize_rule(r) for r in s.matching_rules],
        "error": s.error.value if s.error else None,
    }
