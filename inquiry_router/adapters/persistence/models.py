"""SQLAlchemy ORM models — maps to PostgreSQL tables."""

import uuid
from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inquiry_router.adapters.persistence.database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class EngineerModel(Base):
    __tablename__ = "engineers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str | None] = mapped_column(String(200), unique=True, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    max_daily_assignments: Mapped[int | None] = mapped_column(Integer, nullable=True)

    capabilities: Mapped[list["EngineerCapabilityModel"]] = relationship(
        back_populates="engineer", cascade="all, delete-orphan"
    )


class EngineerCapabilityModel(Base):
    __tablename__ = "engineer_capabilities"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    engineer_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("engineers.id", ondelete="CASCADE"), nullable=False
    )
    product_category: Mapped[str] = mapped_column(String(100), nullable=False)
    skill_level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    engineer: Mapped["EngineerModel"] = relationship(back_populates="capabilities")

    __table_args__ = (
        UniqueConstraint("engineer_id", "product_category", name="uq_capability_engineer_category"),
        Index("idx_capabilities_category", "product_category"),
    )


class AssignmentRuleModel(Base):
    __tablename__ = "assignment_rules"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    rule_name: Mapped[str] = mapped_column(String(200), nullable=False)
    rule_type: Mapped[str] = mapped_column(String(20), nullable=False)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    conditions: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (Index("idx_rules_active_priority", "is_active", "priority"),)


class InquiryModel(Base):
    __tablename__ = "inquiries"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    inquiry_no: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    customer_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    product_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    product_category: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    assigned_engineer_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("engineers.id"), nullable=True
    )
    assigned_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    assigned_engineer: Mapped["EngineerModel | None"] = relationship()

    __table_args__ = (
        Index("idx_inquiries_category", "product_category"),
        Index("idx_inquiries_engineer_status", "assigned_engineer_id", "status"),
    )


class AssignmentHistoryModel(Base):
    __tablename__ = "assignment_history"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    inquiry_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("inquiries.id", ondelete="CASCADE"), nullable=False
    )
    assigned_from: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("engineers.id"), nullable=True
    )
    assigned_to: Mapped[str] = mapped_column(
        String(36), ForeignKey("engineers.id"), nullable=False
    )
    assigned_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    assignment_type: Mapped[str] = mapped_column(String(20), nullable=False)
    assignment_reason: Mapped[str] = mapped_column(Text, nullable=False, default="")
    rule_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("assignment_rules.id", ondelete="SET NULL"), nullable=True
    )
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    __table_args__ = (
        Index("idx_history_inquiry", "inquiry_id"),
        Index("idx_history_assigned_to", "assigned_to"),
    )
