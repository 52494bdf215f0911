"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from inquiry_router.adapters.persistence.database import get_session
from inquiry_router.adapters.persistence.repositories import (
    SqlAssignmentRepository,
    SqlEngineerRepository,
    SqlInquiryRepository,
    SqlRuleRepository,
)
from inquiry_router.application.use_cases.assign_inquiry import AssignInquiryUseCase
from inquiry_router.application.use_cases.suggest_engineer import SuggestEngineerUseCase
from inquiry_router.config import settings


def get_rule_repo(session: AsyncSession = Depends(get_session)) -> SqlRuleRepository:
    return SqlRuleRepository(session)


def get_engineer_repo(session: AsyncSession = Depends(get_session)) -> SqlEngineerRepository:
    return SqlEngineerRepository(session)


def get_inquiry_repo(session: AsyncSession = Depends(get_session)) -> SqlInquiryRepository:
    return SqlInquiryRepository(session)


def get_assignment_repo(session: AsyncSession = Depends(get_session)) -> SqlAssignmentRepository:
    return SqlAssignmentRepository(session)


def get_suggest_engineer_uc(
    session: AsyncSession = Depends(get_session),
) -> SuggestEngineerUseCase:
    return SuggestEngineerUseCase(
        rule_repo=SqlRuleRepository(session),
        engineer_repo=SqlEngineerRepository(session),
        inquiry_repo=SqlInquiryRepository(session),
    )


def get_assign_inquiry_uc(
    session: AsyncSession = Depends(get_session),
) -> AssignInquiryUseCase:
    return AssignInquiryUseCase(
        rule_repo=SqlRuleRepository(session),
        engineer_repo=SqlEngineerRepository(session),
        inquiry_repo=SqlInquiryRepository(session),
        assignment_repo=SqlAssignmentRepository(session),
        default_max_daily_assignments=settings.default_max_daily_assignments,
    )
