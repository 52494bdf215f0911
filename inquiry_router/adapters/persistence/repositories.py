"""SQLAlchemy repository implementations."""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from inquiry_router.adapters.persistence.models import (
    AssignmentHistoryModel,
    AssignmentRuleModel,
    EngineerCapabilityModel,
    EngineerModel,
    InquiryModel,
)
from inquiry_router.application.ports.assignment_repo import AssignmentRepository
from inquiry_router.application.ports.engineer_repo import EngineerRepository
from inquiry_router.application.ports.inquiry_repo import InquiryRepository
from inquiry_router.application.ports.rule_repo import RuleRepository
from inquiry_router.domain.entities.assignment import AssignmentHistory
from inquiry_router.domain.entities.assignment_rule import AssignmentRule
from inquiry_router.domain.entities.engineer import (
    EngineerCapability,
    EngineerPreference,
    EngineerWorkload,
)
from inquiry_router.domain.entities.inquiry import Inquiry
from inquiry_router.domain.value_objects.enums import (
    IN_FLIGHT_STATUSES,
    AssignmentType,
    InquiryStatus,
)

# ─── Mappers ─────────────────────────────────────────────────────────


def _rule_to_domain(m: AssignmentRuleModel) -> AssignmentRule:
    return AssignmentRule.from_raw(
        id=m.id,
        rule_name=m.rule_name,
        rule_type=m.rule_type,
        priority=m.priority,
        conditions=m.conditions,
        is_active=m.is_active,
        created_at=m.created_at,
        updated_at=m.updated_at,
    )


def _inquiry_to_domain(m: InquiryModel) -> Inquiry:
    return Inquiry(
        id=m.id,
        product_category=m.product_category,
        inquiry_no=m.inquiry_no,
        customer_name=m.customer_name,
        product_name=m.product_name,
        status=InquiryStatus(m.status),
        assigned_engineer_id=m.assigned_engineer_id,
        assigned_at=m.assigned_at,
        version=m.version,
    )


def _capability_to_domain(m: EngineerCapabilityModel) -> EngineerCapability:
    return EngineerCapability(
        engineer_id=m.engineer_id,
        product_category=m.product_category,
        skill_level=m.skill_level,
        is_active=m.is_active,
    )


def _history_to_domain(m: AssignmentHistoryModel) -> AssignmentHistory:
    return AssignmentHistory(
        id=m.id,
        inquiry_id=m.inquiry_id,
        assigned_to=m.assigned_to,
        assignment_type=AssignmentType(m.assignment_type),
        assignment_reason=m.assignment_reason,
        assigned_from=m.assigned_from,
        assigned_by=m.assigned_by,
        rule_id=m.rule_id,
        assigned_at=m.assigned_at,
    )


# ─── Repositories ────────────────────────────────────────────────────


class SqlRuleRepository(RuleRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def get_all(self) -> list[AssignmentRule]:
        result = await self._s.execute(
            select(AssignmentRuleModel).order_by(AssignmentRuleModel.priority, AssignmentRuleModel.id)
        )
        return [_rule_to_domain(m) for m in result.scalars()]

    async def get_active(self) -> list[AssignmentRule]:
        result = await self._s.execute(
            select(AssignmentRuleModel)
            .where(AssignmentRuleModel.is_active.is_(True))
            .order_by(AssignmentRuleModel.priority, AssignmentRuleModel.id)
        )
        return [_rule_to_domain(m) for m in result.scalars()]

    async def get_by_id(self, rule_id: str) -> AssignmentRule | None:
        m = await self._s.get(AssignmentRuleModel, rule_id)
        return _rule_to_domain(m) if m else None

    async def update(self, rule_id: str, changes: dict[str, Any]) -> AssignmentRule | None:
        m = await self._s.get(AssignmentRuleModel, rule_id)
        if m is None:
            return None

        # Validate the resulting rule before touching the row
        validated = _rule_to_domain(m).updated(changes)

        m.rule_name = validated.rule_name
        m.rule_type = validated.rule_type.value
        m.priority = validated.priority
        m.conditions = validated.conditions.to_dict()
        m.is_active = validated.is_active
        await self._s.flush()
        await self._s.refresh(m)
        return _rule_to_domain(m)


class SqlEngineerRepository(EngineerRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def get_workloads(self, product_category: str | None = None) -> list[EngineerWorkload]:
        result = await self._s.execute(
            select(EngineerModel)
            .where(EngineerModel.is_active.is_(True))
            .options(selectinload(EngineerModel.capabilities))
            .order_by(EngineerModel.id)
            .execution_options(populate_existing=True)
        )
        engineers = result.scalars().all()

        current = await self._current_counts()
        completed = await self._completed_stats()
        last_assigned = await self._last_assigned()

        workloads = []
        for e in engineers:
            active_caps = [c for c in e.capabilities if c.is_active]
            skill_level = None
            if product_category is not None:
                skill_level = next(
                    (c.skill_level for c in active_caps if c.product_category == product_category),
                    None,
                )
            stats = completed.get(e.id, {})
            workloads.append(
                EngineerWorkload(
                    engineer_id=e.id,
                    engineer_name=e.full_name,
                    skill_categories=frozenset(c.product_category for c in active_caps),
                    skill_level=skill_level,
                    current_inquiries=current.get(e.id, 0),
                    completed_today=stats.get("today", 0),
                    completed_this_week=stats.get("week", 0),
                    completed_this_month=stats.get("month", 0),
                    average_completion_hours=stats.get("avg_hours"),
                    last_assigned_at=last_assigned.get(e.id),
                    max_daily_assignments=e.max_daily_assignments,
                )
            )
        return workloads

    async def _current_counts(self) -> dict[str, int]:
        result = await self._s.execute(
            select(InquiryModel.assigned_engineer_id, func.count(InquiryModel.id))
            .where(
                InquiryModel.assigned_engineer_id.is_not(None),
                InquiryModel.status.in_([s.value for s in IN_FLIGHT_STATUSES]),
            )
            .group_by(InquiryModel.assigned_engineer_id)
        )
        return {engineer_id: count for engineer_id, count in result.all()}

    async def _completed_stats(self) -> dict[str, dict[str, Any]]:
        """Completion counts for today / this week / this month, plus average hours."""
        now = datetime.now()
        day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        week_start = day_start - timedelta(days=day_start.weekday())
        month_start = day_start.replace(day=1)

        result = await self._s.execute(
            select(
                InquiryModel.assigned_engineer_id,
                InquiryModel.assigned_at,
                InquiryModel.completed_at,
            ).where(
                InquiryModel.assigned_engineer_id.is_not(None),
                InquiryModel.status == InquiryStatus.COMPLETED.value,
                InquiryModel.completed_at >= min(week_start, month_start),
            )
        )

        stats: dict[str, dict[str, Any]] = defaultdict(
            lambda: {"today": 0, "week": 0, "month": 0, "hours": []}
        )
        for engineer_id, assigned_at, completed_at in result.all():
            s = stats[engineer_id]
            if completed_at >= day_start:
                s["today"] += 1
            if completed_at >= week_start:
                s["week"] += 1
            if completed_at >= month_start:
                s["month"] += 1
                if assigned_at is not None:
                    s["hours"].append((completed_at - assigned_at).total_seconds() / 3600)

        for s in stats.values():
            hours = s.pop("hours")
            s["avg_hours"] = round(sum(hours) / len(hours), 2) if hours else None
        return dict(stats)

    async def _last_assigned(self) -> dict[str, datetime]:
        result = await self._s.execute(
            select(AssignmentHistoryModel.assigned_to, func.max(AssignmentHistoryModel.assigned_at))
            .group_by(AssignmentHistoryModel.assigned_to)
        )
        return {engineer_id: ts for engineer_id, ts in result.all() if ts is not None}

    async def get_capabilities(self, engineer_id: str) -> list[EngineerCapability] | None:
        e = await self._s.get(
            EngineerModel,
            engineer_id,
            options=[selectinload(EngineerModel.capabilities)],
            populate_existing=True,
        )
        if e is None:
            return None
        return [_capability_to_domain(c) for c in sorted(e.capabilities, key=lambda c: c.product_category)]

    async def save_capability(self, capability: EngineerCapability) -> EngineerCapability | None:
        if await self._s.get(EngineerModel, capability.engineer_id) is None:
            return None

        result = await self._s.execute(
            select(EngineerCapabilityModel).where(
                EngineerCapabilityModel.engineer_id == capability.engineer_id,
                EngineerCapabilityModel.product_category == capability.product_category,
            )
        )
        m = result.scalar_one_or_none()
        if m is None:
            m = EngineerCapabilityModel(
                engineer_id=capability.engineer_id,
                product_category=capability.product_category,
            )
            self._s.add(m)
        m.skill_level = capability.skill_level
        m.is_active = capability.is_active
        await self._s.flush()
        return _capability_to_domain(m)

    async def update_preference(self, preference: EngineerPreference) -> EngineerPreference | None:
        e = await self._s.get(EngineerModel, preference.engineer_id)
        if e is None:
            return None
        e.max_daily_assignments = preference.max_daily_assignments
        await self._s.flush()
        return EngineerPreference(engineer_id=e.id, max_daily_assignments=e.max_daily_assignments)


class SqlInquiryRepository(InquiryRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def get_by_id(self, inquiry_id: str) -> Inquiry | None:
        # populate_existing: a compare-and-set may have changed the row behind the identity map
        m = await self._s.get(InquiryModel, inquiry_id, populate_existing=True)
        return _inquiry_to_domain(m) if m else None

    async def get_all(self) -> list[Inquiry]:
        result = await self._s.execute(select(InquiryModel).order_by(InquiryModel.created_at, InquiryModel.id))
        return [_inquiry_to_domain(m) for m in result.scalars()]

    async def confirm_assignment(
        self,
        inquiry_id: str,
        engineer_id: str,
        expected_version: int,
        require_unassigned: bool = False,
    ) -> bool:
        stmt = update(InquiryModel).where(
            InquiryModel.id == inquiry_id,
            InquiryModel.version == expected_version,
        )
        if require_unassigned:
            stmt = stmt.where(InquiryModel.assigned_engineer_id.is_(None))
        stmt = stmt.values(
            assigned_engineer_id=engineer_id,
            assigned_at=func.now(),
            status=InquiryStatus.ASSIGNED.value,
            version=InquiryModel.version + 1,
        ).execution_options(synchronize_session=False)

        result = await self._s.execute(stmt)
        await self._s.flush()
        return result.rowcount == 1


class SqlAssignmentRepository(AssignmentRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, record: AssignmentHistory) -> AssignmentHistory:
        m = AssignmentHistoryModel(
            inquiry_id=record.inquiry_id,
            assigned_from=record.assigned_from,
            assigned_to=record.assigned_to,
            assigned_by=record.assigned_by,
            assignment_type=record.assignment_type.value,
            assignment_reason=record.assignment_reason,
            rule_id=record.rule_id,
        )
        self._s.add(m)
        await self._s.flush()
        await self._s.refresh(m)
        record.id = m.id
        record.assigned_at = m.assigned_at
        return record

    async def get_history(
        self,
        inquiry_id: str | None = None,
        engineer_id: str | None = None,
        limit: int = 50,
    ) -> list[AssignmentHistory]:
        stmt = select(AssignmentHistoryModel)
        if inquiry_id is not None:
            stmt = stmt.where(AssignmentHistoryModel.inquiry_id == inquiry_id)
        if engineer_id is not None:
            stmt = stmt.where(AssignmentHistoryModel.assigned_to == engineer_id)
        stmt = stmt.order_by(
            AssignmentHistoryModel.assigned_at.desc(), AssignmentHistoryModel.id.desc()
        ).limit(limit)
        result = await self._s.execute(stmt)
        return [_history_to_domain(m) for m in result.scalars()]
