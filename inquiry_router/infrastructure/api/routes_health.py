"""Health check endpoint: database reachability and the active rule and engineer counts."""

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from inquiry_router.adapters.persistence.database import get_session
from inquiry_router.adapters.persistence.models import AssignmentRuleModel, EngineerModel

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(session: AsyncSession = Depends(get_session)):
    """Report database status and the active rule and engineer counts.

    Status is "degraded" when the database is unreachable, and "idle" when it
    is reachable but there is no active rule or no active engineer. Then no
    inquiry can be auto-assigned.
    """
    active_rules = active_engineers = None
    try:
        active_rules = (await session.execute(
            select(func.count()).select_from(AssignmentRuleModel).where(AssignmentRuleModel.is_active.is_(True))
        )).scalar_one()
        active_engineers = (await session.execute(
            select(func.count()).select_from(EngineerModel).where(EngineerModel.is_active.is_(True))
        )).scalar_one()
        db_status = "connected"
    except Exception as e:
        db_status = f"error: {e}"

    if db_status != "connected":
        status = "degraded"
    elif not active_rules or not active_engineers:
        status = "idle"
    else:
        status = "ok"

    return {
        "status": status,
        "database": db_status,
        "active_rules": active_rules,
        "active_engineers": active_engineers,
    }
