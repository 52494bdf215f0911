"""AssignInquiryUseCase — decide with the resolver, then commit with compare-and-set."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from inquiry_router.application.ports.assignment_repo import AssignmentRepository
from inquiry_router.application.ports.engineer_repo import EngineerRepository
from inquiry_router.application.ports.inquiry_repo import InquiryRepository
from inquiry_router.application.ports.rule_repo import RuleRepository
from inquiry_router.domain.entities.assignment import AssignmentHistory
from inquiry_router.domain.entities.inquiry import Inquiry
from inquiry_router.domain.policies import assignment_resolver
from inquiry_router.domain.policies.assignment_resolver import (
    DEFAULT_MAX_DAILY_ASSIGNMENTS,
    AssignmentDecision,
)
from inquiry_router.domain.value_objects.assignment_error import AssignmentError
from inquiry_router.domain.value_objects.enums import AssignmentErrorCode, AssignmentType

logger = logging.getLogger(__name__)


@dataclass
class AssignmentOutcome:
    """Summary of one assignment attempt."""

    inquiry_id: str
    decision: AssignmentDecision
    history: AssignmentHistory | None = None

    @property
    def error(self) -> AssignmentError | None:
        return self.decision.error


class AssignInquiryUseCase:
    """Auto, manual and self-select assignment of a single inquiry.

    Pipeline:
    1. Load the inquiry (with its version) and fresh rule/roster snapshots
    2. Ask the resolver for a decision
    3. Commit it with confirm_assignment(expected_version)
    4. Record the assignment history
    """

    def __init__(
        self,
        rule_repo: RuleRepository,
        engineer_repo: EngineerRepository,
        inquiry_repo: InquiryRepository,
        assignment_repo: AssignmentRepository,
        default_max_daily_assignments: int = DEFAULT_MAX_DAILY_ASSIGNMENTS,
    ):
        self._rules = rule_repo
        self._engineers = engineer_repo
        self._inquiries = inquiry_repo
        self._assignments = assignment_repo
        self._default_max = default_max_daily_assignments

    async def auto(self, inquiry_id: str) -> AssignmentOutcome:
        inquiry = await self._inquiries.get_by_id(inquiry_id)
        if inquiry is None:
            return _not_found(inquiry_id, AssignmentType.AUTO)

        rules = await self._rules.get_active()
        engineers = await self._engineers.get_workloads(inquiry.product_category)
        decision = assignment_resolver.auto_assign(inquiry, rules, engineers)
        return await self._commit(inquiry, decision, assigned_by=None)

    async def manual(
        self,
        inquiry_id: str,
        engineer_id: str,
        reason: str | None = None,
        assignment_type: AssignmentType = AssignmentType.MANUAL,
        assigned_by: str | None = None,
    ) -> AssignmentOutcome:
        inquiry = await self._inquiries.get_by_id(inquiry_id)
        if inquiry is None:
            return _not_found(inquiry_id, assignment_type)

        engineers = await self._engineers.get_workloads(inquiry.product_category)
        decision = assignment_resolver.manual_assign(
            inquiry, engineer_id, reason, assignment_type, engineers
        )
        return await self._commit(inquiry, decision, assigned_by=assigned_by)

    async def self_select(self, inquiry_id: str, engineer_id: str) -> AssignmentOutcome:
        inquiry = await self._inquiries.get_by_id(inquiry_id)
        if inquiry is None:
            return _not_found(inquiry_id, AssignmentType.SELF_SELECT)

        engineers = await self._engineers.get_workloads(inquiry.product_category)
        decision = assignment_resolver.self_select(
            inquiry, engineer_id, engineers, self._default_max
        )
        return await self._commit(inquiry, decision, assigned_by=engineer_id)

    async def _commit(
        self,
        inquiry: Inquiry,
        decision: AssignmentDecision,
        assigned_by: str | None,
    ) -> AssignmentOutcome:
        if not decision.ok:
            logger.warning(
                "Inquiry %s: %s assignment refused (%s)",
                inquiry.id, decision.assignment_type.value, decision.error,
            )
            return AssignmentOutcome(inquiry_id=inquiry.id, decision=decision)

        # Auto and self-select must never overwrite an existing engineer
        require_unassigned = decision.assignment_type in (
            AssignmentType.AUTO,
            AssignmentType.SELF_SELECT,
        )
        confirmed = await self._inquiries.confirm_assignment(
            inquiry.id,
            decision.engineer_id,
            expected_version=inquiry.version,
            require_unassigned=require_unassigned,
        )
        if not confirmed:
            conflict = await self._conflict(inquiry.id, decision, require_unassigned)
            logger.warning(
                "Inquiry %s: lost assignment race (%s)", inquiry.id, conflict.error,
            )
            return AssignmentOutcome(inquiry_id=inquiry.id, decision=conflict)

        history = await self._assignments.save(
            AssignmentHistory(
                id=None,
                inquiry_id=inquiry.id,
                assigned_to=decision.engineer_id,
                assignment_type=decision.assignment_type,
                assignment_reason=decision.reason,
                assigned_from=decision.assigned_from,
                assigned_by=assigned_by,
                rule_id=decision.rule_id,
            )
        )
        logger.info(
            "Inquiry %s → Engineer %s (%s, rule=%s): %s",
            inquiry.id, decision.engineer_id, decision.assignment_type.value,
            decision.rule_id, decision.reason,
        )
        return AssignmentOutcome(inquiry_id=inquiry.id, decision=decision, history=history)

    async def _conflict(
        self,
        inquiry_id: str,
        decision: AssignmentDecision,
        require_unassigned: bool,
    ) -> AssignmentDecision:
        current = await self._inquiries.get_by_id(inquiry_id)
        if require_unassigned and current is not None and current.is_assigned():
            return AssignmentDecision.refused(
                decision.assignment_type,
                AssignmentErrorCode.ALREADY_ASSIGNED,
                f"inquiry {inquiry_id} is already assigned to engineer {current.assigned_engineer_id}",
                rule_id=decision.rule_id,
            )
        return AssignmentDecision.refused(
            decision.assignment_type,
            AssignmentErrorCode.VERSION_CONFLICT,
            f"inquiry {inquiry_id} was modified concurrently, reload and retry",
            rule_id=decision.rule_id,
        )


def _not_found(inquiry_id: str, assignment_type: AssignmentType) -> AssignmentOutcome:
    return AssignmentOutcome(
        inquiry_id=inquiry_id,
        decision=AssignmentDecision.refused(
            assignment_type,
            AssignmentErrorCode.INQUIRY_NOT_FOUND,
            f"inquiry {inquiry_id} not found",
        ),
    )
