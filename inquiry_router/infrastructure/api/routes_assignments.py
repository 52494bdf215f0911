"""Assignment endpoints — suggest, assign, rules, workload and history."""

from __future__ import annotations

import logging
from typing import Any, Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from inquiry_router.adapters.persistence.database import get_session
from inquiry_router.application.ports.assignment_repo import AssignmentRepository
from inquiry_router.application.ports.engineer_repo import EngineerRepository
from inquiry_router.application.ports.rule_repo import RuleRepository
from inquiry_router.application.use_cases.assign_inquiry import (
    AssignInquiryUseCase,
    AssignmentOutcome,
)
from inquiry_router.application.use_cases.suggest_engineer import SuggestEngineerUseCase
from inquiry_router.config import settings
from inquiry_router.domain.entities.engineer import EngineerCapability, EngineerPreference
from inquiry_router.domain.value_objects.enums import AssignmentErrorCode, AssignmentType
from inquiry_router.infrastructure.api.dependencies import (
    get_assign_inquiry_uc,
    get_assignment_repo,
    get_engineer_repo,
    get_rule_repo,
    get_suggest_engineer_uc,
)
from inquiry_router.infrastructure.api.serializers import (
    serialize_capability,
    serialize_history,
    serialize_preference,
    serialize_rule,
    serialize_suggestion,
    serialize_workload,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assignments", tags=["assignments"])

ERROR_STATUS: dict[AssignmentErrorCode, int] = {
    AssignmentErrorCode.INQUIRY_NOT_FOUND: 404,
    AssignmentErrorCode.ALREADY_ASSIGNED: 409,
    AssignmentErrorCode.VERSION_CONFLICT: 409,
}

# ── Request schemas ─────────────────────────────────────────────────


class AutoAssignmentRequest(BaseModel):
    inquiry_id: str


class AssignmentRequest(BaseModel):
    inquiry_id: str
    engineer_id: str
    reason: str | None = None
    assignment_type: Literal["manual", "reassign"] = "manual"
    assigned_by: str | None = None


class RuleUpdateRequest(BaseModel):
    rule_name: str | None = None
    rule_type: Literal["auto", "rotation", "load_balance", "skill_based"] | None = None
    priority: int | None = None
    conditions: dict[str, Any] | None = None
    is_active: bool | None = None


class CapabilityRequest(BaseModel):
    engineer_id: str
    product_category: str = Field(min_length=1)
    skill_level: int = Field(default=1, ge=1, le=5)
    is_active: bool = True


class PreferenceRequest(BaseModel):
    engineer_id: str
    max_daily_assignments: int | None = Field(default=None, ge=1)


# ── Suggestion ──────────────────────────────────────────────────────


@router.get("/suggest/{inquiry_id}")
async def suggest(
    inquiry_id: str,
    uc: SuggestEngineerUseCase = Depends(get_suggest_engineer_uc),
):
    """Recommend an engineer without assigning anything."""
    result = await uc.execute(inquiry_id)
    if result.suggestion is None:
        raise HTTPException(status_code=404, detail="Inquiry not found")
    return {"inquiry_id": inquiry_id, **serialize_suggestion(result.suggestion)}


@router.get("/matching-rules/{inquiry_id}")
async def matching_rules(
    inquiry_id: str,
    uc: SuggestEngineerUseCase = Depends(get_suggest_engineer_uc),
):
    """Active rules matching the inquiry, governing rule first."""
    rules = await uc.matching_rules(inquiry_id)
    if rules is None:
        raise HTTPException(status_code=404, detail="Inquiry not found")
    return {"inquiry_id": inquiry_id, "rules": [serialize_rule(r) for r in rules]}


# ── Assignment ──────────────────────────────────────────────────────


@router.post("/auto")
async def auto_assign(
    request: AutoAssignmentRequest,
    uc: AssignInquiryUseCase = Depends(get_assign_inquiry_uc),
    session: AsyncSession = Depends(get_session),
):
    """Assign an unassigned inquiry by the governing rule."""
    outcome = await uc.auto(request.inquiry_id)
    return await _finish(outcome, session)


@router.post("/manual")
async def manual_assign(
    request: AssignmentRequest,
    uc: AssignInquiryUseCase = Depends(get_assign_inquiry_uc),
    session: AsyncSession = Depends(get_session),
):
    """Assign or reassign an inquiry to a chosen engineer."""
    outcome = await uc.manual(
        request.inquiry_id,
        request.engineer_id,
        reason=request.reason,
        assignment_type=AssignmentType(request.assignment_type),
        assigned_by=request.assigned_by,
    )
    return await _finish(outcome, session)


@router.post("/self-select/{inquiry_id}")
async def self_select(
    inquiry_id: str,
    engineer_id: str = Query(...),
    uc: AssignInquiryUseCase = Depends(get_assign_inquiry_uc),
    session: AsyncSession = Depends(get_session),
):
    """An engineer takes an unassigned inquiry."""
    outcome = await uc.self_select(inquiry_id, engineer_id)
    return await _finish(outcome, session)


async def _finish(outcome: AssignmentOutcome, session: AsyncSession) -> dict:
    if outcome.error is not None:
        await session.rollback()
        raise HTTPException(
            status_code=ERROR_STATUS.get(outcome.error.code, 422),
            detail={"code": outcome.error.code.value, "message": outcome.error.message},
        )
    await session.commit()
    return serialize_history(outcome.history)


# ── Workload & history ──────────────────────────────────────────────


@router.get("/workload-stats")
async def workload_stats(
    product_category: str | None = None,
    repo: EngineerRepository = Depends(get_engineer_repo),
):
    """Per-engineer workload, optionally narrowed to engineers qualified for a category."""
    workloads = await repo.get_workloads(product_category)
    if product_category is not None:
        workloads = [w for w in workloads if w.is_qualified_for(product_category)]
        workloads.sort(key=lambda w: (w.current_inquiries, w.engineer_id))
    return [serialize_workload(w) for w in workloads]


@router.get("/history")
async def history(
    inquiry_id: str | None = None,
    engineer_id: str | None = None,
    limit: int | None = Query(default=None, ge=1, le=500),
    repo: AssignmentRepository = Depends(get_assignment_repo),
):
    records = await repo.get_history(
        inquiry_id=inquiry_id,
        engineer_id=engineer_id,
        limit=limit or settings.history_default_limit,
    )
    return [serialize_history(h) for h in records]


# ── Rules ───────────────────────────────────────────────────────────


@router.get("/rules")
async def list_rules(repo: RuleRepository = Depends(get_rule_repo)):
    return [serialize_rule(r) for r in await repo.get_all()]


@router.put("/rules/{rule_id}")
async def update_rule(
    rule_id: str,
    request: RuleUpdateRequest,
    repo: RuleRepository = Depends(get_rule_repo),
    session: AsyncSession = Depends(get_session),
):
    changes = request.model_dump(exclude_unset=True)
    try:
        rule = await repo.update(rule_id, changes)
    except ValueError as e:
        await session.rollback()
        raise HTTPException(status_code=422, detail=str(e))
    if rule is None:
        raise HTTPException(status_code=404, detail="Rule not found")

    await session.commit()
    logger.info("Rule %s updated: %s", rule_id, sorted(changes))
    return serialize_rule(rule)


# ── Engineer capabilities & preferences ─────────────────────────────


@router.get("/engineers/{engineer_id}/capabilities")
async def engineer_capabilities(
    engineer_id: str,
    repo: EngineerRepository = Depends(get_engineer_repo),
):
    capabilities = await repo.get_capabilities(engineer_id)
    if capabilities is None:
        raise HTTPException(status_code=404, detail="Engineer not found")
    return [serialize_capability(c) for c in capabilities]


@router.put("/capabilities")
async def update_capability(
    request: CapabilityRequest,
    repo: EngineerRepository = Depends(get_engineer_repo),
    session: AsyncSession = Depends(get_session),
):
    """Create or replace an engineer's capability for one product category."""
    try:
        capability = EngineerCapability(
            engineer_id=request.engineer_id,
            product_category=request.product_category.strip(),
            skill_level=request.skill_level,
            is_active=request.is_active,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    saved = await repo.save_capability(capability)
    if saved is None:
        await session.rollback()
        raise HTTPException(status_code=404, detail="Engineer not found")

    await session.commit()
    logger.info(
        "Engineer %s capability %s set to level %d (active=%s)",
        saved.engineer_id, saved.product_category, saved.skill_level, saved.is_active,
    )
    return serialize_capability(saved)


@router.put("/preferences")
async def update_preference(
    request: PreferenceRequest,
    repo: EngineerRepository = Depends(get_engineer_repo),
    session: AsyncSession = Depends(get_session),
):
    """Set or clear an engineer's daily self-select limit."""
    saved = await repo.update_preference(
        EngineerPreference(
            engineer_id=request.engineer_id,
            max_daily_assignments=request.max_daily_assignments,
        )
    )
    if saved is None:
        await session.rollback()
        raise HTTPException(status_code=404, detail="Engineer not found")

    await session.commit()
    logger.info("Engineer %s max_daily_assignments=%s", saved.engineer_id, saved.max_daily_assignments)
    return serialize_preference(saved)
