"""SuggestEngineerUseCase — load snapshots and ask the resolver for a suggestion."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from inquiry_router.application.ports.engineer_repo import EngineerRepository
from inquiry_router.application.ports.inquiry_repo import InquiryRepository
from inquiry_router.application.ports.rule_repo import RuleRepository
from inquiry_router.domain.entities.assignment_rule import AssignmentRule
from inquiry_router.domain.entities.inquiry import Inquiry
from inquiry_router.domain.policies.assignment_resolver import (
    AssignmentSuggestion,
    suggest_engineer,
)
from inquiry_router.domain.policies.rule_matching import evaluate_rules

logger = logging.getLogger(__name__)


@dataclass
class SuggestionResult:
    inquiry: Inquiry | None
    suggestion: AssignmentSuggestion | None
    error: str | None = None


class SuggestEngineerUseCase:
    """Read-only: nothing is assigned, the caller decides what to do."""

    def __init__(
        self,
        rule_repo: RuleRepository,
        engineer_repo: EngineerRepository,
        inquiry_repo: InquiryRepository,
    ):
        self._rules = rule_repo
        self._engineers = engineer_repo
        self._inquiries = inquiry_repo

    async def execute(self, inquiry_id: str) -> SuggestionResult:
        inquiry = await self._inquiries.get_by_id(inquiry_id)
        if inquiry is None:
            return SuggestionResult(inquiry=None, suggestion=None, error="Inquiry not found")

        rules = await self._rules.get_active()
        engineers = await self._engineers.get_workloads(inquiry.product_category)
        suggestion = suggest_engineer(inquiry, rules, engineers)

        logger.info(
            "Inquiry %s (%s): suggested=%s, rules=%d (%s)",
            inquiry.id, inquiry.product_category,
            suggestion.suggested_engineer.engineer_id if suggestion.suggested_engineer else None,
            len(suggestion.matching_rules), suggestion.reason,
        )
        return SuggestionResult(inquiry=inquiry, suggestion=suggestion)

    async def matching_rules(self, inquiry_id: str) -> tuple[AssignmentRule, ...] | None:
        """Matching rules for an inquiry in evaluation order, None if it does not exist."""
        inquiry = await self._inquiries.get_by_id(inquiry_id)
        if inquiry is None:
            return None
        return evaluate_rules(inquiry, await self._rules.get_all())
