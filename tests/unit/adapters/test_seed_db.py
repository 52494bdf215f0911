"""Tests for the CSV seed routine against in-memory SQLite."""

import csv
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from inquiry_router.adapters.persistence.database import Base
from inquiry_router.adapters.persistence.models import (
    AssignmentRuleModel,
    EngineerCapabilityModel,
    EngineerModel,
    InquiryModel,
)
from inquiry_router.tools.seed_db import seed


def _write_csv(rows: list[dict], path: Path) -> None:
    with open(path, "w", encoding="utf-8-sig", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=rows[0].keys())
        writer.writeheader()
        writer.writerows(rows)


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
def data_dir(tmp_path):
    _write_csv([
        {"name": "Chen Wei", "email": "chen@example.com", "capabilities": "bolts:4; nuts:2"},
        {"name": "Lin Hao", "email": "lin@example.com", "capabilities": "bolts"},
    ], tmp_path / "engineers.csv")
    _write_csv([
        {"rule_name": "Bolts", "rule_type": "load_balance", "priority": "10",
         "product_categories": "bolts", "min_skill_level": ""},
        {"rule_name": "Broken", "rule_type": "load_balance", "priority": "20",
         "product_categories": "nuts", "min_skill_level": "3"},
        {"rule_name": "Typo", "rule_type": "round_robin", "priority": "30",
         "product_categories": "", "min_skill_level": ""},
    ], tmp_path / "assignment_rules.csv")
    _write_csv([
        {"inquiry_no": "Q-001", "customer_name": "Acme", "product_category": "bolts"},
        {"inquiry_no": "Q-002", "customer_name": "Acme", "product_category": "nuts"},
    ], tmp_path / "inquiries.csv")
    return tmp_path


async def _count(factory, model) -> int:
    async with factory() as s:
        return (await s.execute(select(func.count()).select_from(model))).scalar_one()


@pytest.mark.asyncio
async def test_seed_loads_all_files(data_dir, session_factory):
    counts = await seed(data_dir, session_factory=session_factory)

    # min_skill_level on a load_balance rule and an unknown rule type are skipped
    assert counts == {"engineers": 2, "rules": 1, "inquiries": 2}
    assert await _count(session_factory, EngineerCapabilityModel) == 3

    async with session_factory() as s:
        rule = (await s.execute(select(AssignmentRuleModel))).scalar_one()
        assert rule.conditions == {"product_categories": ["bolts"], "auto_assign": True}
        inquiry = (await s.execute(
            select(InquiryModel).where(InquiryModel.inquiry_no == "Q-001")
        )).scalar_one()
        assert inquiry.status == "pending"
        assert inquiry.version == 0


@pytest.mark.asyncio
async def test_seed_is_idempotent(data_dir, session_factory):
    await seed(data_dir, session_factory=session_factory)
    counts = await seed(data_dir, session_factory=session_factory)

    assert counts == {"engineers": 0, "rules": 0, "inquiries": 0}
    assert await _count(session_factory, EngineerModel) == 2


@pytest.mark.asyncio
async def test_seed_drop_reloads(data_dir, session_factory):
    await seed(data_dir, session_factory=session_factory)
    counts = await seed(data_dir, drop=True, session_factory=session_factory)

    assert counts["engineers"] == 2
    assert await _count(session_factory, EngineerModel) == 2
    assert await _count(session_factory, InquiryModel) == 2


@pytest.mark.asyncio
async def test_seed_requires_engineers_file(tmp_path, session_factory):
    with pytest.raises(FileNotFoundError):
        await seed(tmp_path, session_factory=session_factory)
