"""Seed database from CSV files.

Usage:
    python -m inquiry_router.tools.seed_db
    python -m inquiry_router.tools.seed_db --data-dir data
    python -m inquiry_router.tools.seed_db --drop  # drop existing data first
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from inquiry_router.adapters.csv_loader.loader import load_engineers, load_inquiries, load_rules
from inquiry_router.adapters.persistence.database import async_session_factory
from inquiry_router.adapters.persistence.models import (
    AssignmentHistoryModel,
    AssignmentRuleModel,
    EngineerCapabilityModel,
    EngineerModel,
    InquiryModel,
)
from inquiry_router.domain.value_objects.enums import RuleType
from inquiry_router.domain.value_objects.rule_conditions import parse_conditions

logger = logging.getLogger(__name__)


async def _drop_data(session: AsyncSession) -> None:
    """Delete all data in correct order (respecting FK constraints)."""
    for model in [
        AssignmentHistoryModel,
        InquiryModel,
        AssignmentRuleModel,
        EngineerCapabilityModel,
        EngineerModel,
    ]:
        await session.execute(delete(model))
    await session.commit()
    logger.info("Dropped all existing data")


async def seed(
    data_dir: Path,
    drop: bool = False,
    session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
) -> dict[str, int]:
    """Main seed function. Returns counts of seeded records."""
    counts = {"engineers": 0, "rules": 0, "inquiries": 0}

    engineer_csv = _find_csv(data_dir, ["engineers", "engineer", "工程師"])
    rule_csv = _find_csv(data_dir, ["rules", "assignment_rules", "規則"])
    inquiry_csv = _find_csv(data_dir, ["inquiries", "inquiry", "詢價"])

    if not engineer_csv:
        raise FileNotFoundError(
            f"No engineers CSV found in {data_dir}. Expected something like engineers.csv"
        )

    async with session_factory() as session:
        if drop:
            await _drop_data(session)

        # 1. Engineers + capabilities
        for ed in load_engineers(engineer_csv):
            existing = await session.execute(
                select(EngineerModel).where(EngineerModel.full_name == ed["full_name"])
            )
            if existing.scalars().first():
                logger.debug("Engineer '%s' already exists, skipping", ed["full_name"])
                continue

            engineer = EngineerModel(
                full_name=ed["full_name"],
                email=ed["email"],
                is_active=ed["is_active"],
                max_daily_assignments=ed["max_daily_assignments"],
                capabilities=[
                    EngineerCapabilityModel(product_category=category, skill_level=level)
                    for category, level in ed["capabilities"].items()
                ],
            )
            session.add(engineer)
            counts["engineers"] += 1
        await session.commit()

        # 2. Rules (validated the same way the API validates updates)
        if rule_csv:
            for rd in load_rules(rule_csv):
                try:
                    rule_type = RuleType(rd["rule_type"])
                    conditions = parse_conditions(rule_type, rd["conditions"])
                except ValueError as e:
                    logger.warning("Rule '%s' skipped: %s", rd["rule_name"], e)
                    continue

                existing = await session.execute(
                    select(AssignmentRuleModel).where(AssignmentRuleModel.rule_name == rd["rule_name"])
                )
                if existing.scalars().first():
                    logger.debug("Rule '%s' already exists, skipping", rd["rule_name"])
                    continue

                session.add(
                    AssignmentRuleModel(
                        rule_name=rd["rule_name"],
                        rule_type=rule_type.value,
                        priority=rd["priority"],
                        conditions=conditions.to_dict(),
                        is_active=rd["is_active"],
                    )
                )
                counts["rules"] += 1
            await session.commit()
        else:
            logger.info("No rules CSV found — skipping rule import")

        # 3. Inquiries
        if inquiry_csv:
            for idata in load_inquiries(inquiry_csv):
                existing = await session.execute(
                    select(InquiryModel).where(InquiryModel.inquiry_no == idata["inquiry_no"])
                )
                if existing.scalar_one_or_none():
                    logger.debug("Inquiry '%s' already exists, skipping", idata["inquiry_no"])
                    continue
                session.add(InquiryModel(**idata, status="pending", version=0))
                counts["inquiries"] += 1
            await session.commit()
        else:
            logger.info("No inquiries CSV found — skipping inquiry import")

    logger.info(
        "Seed complete: %d engineers, %d rules, %d inquiries",
        counts["engineers"], counts["rules"], counts["inquiries"],
    )
    return counts


def _find_csv(data_dir: Path, name_hints: list[str]) -> Path | None:
    """Find a CSV file matching any of the name hints."""
    for f in sorted(data_dir.glob("*.csv")):
        fname_lower = f.stem.lower()
        for hint in name_hints:
            if hint in fname_lower:
                logger.info("Found CSV: %s (matched hint '%s')", f.name, hint)
                return f
    return None


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")

    parser = argparse.ArgumentParser(description="Seed the inquiry router database from CSV files")
    parser.add_argument(
        "--data-dir", type=str, default="data",
        help="Directory containing CSV files (default: data)",
    )
    parser.add_argument(
        "--drop", action="store_true",
        help="Drop existing data before seeding",
    )
    args = parser.parse_args()

    data_dir = Path(args.data_dir)
    if not data_dir.exists():
        logger.error("Data directory not found: %s", data_dir)
        sys.exit(1)

    asyncio.run(seed(data_dir, drop=args.drop))


if __name__ == "__main__":
    main()
