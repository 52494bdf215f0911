"""Initial schema — engineers, capabilities, rules, inquiries, history.

Revision ID: 001
Revises: None
Create Date: 2026-10-17
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Engineers
    op.create_table(
        "engineers",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(200), unique=True, nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("max_daily_assignments", sa.Integer, nullable=True),
    )

    # Capabilities
    op.create_table(
        "engineer_capabilities",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "engineer_id", sa.String(36),
            sa.ForeignKey("engineers.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("product_category", sa.String(100), nullable=False),
        sa.Column("skill_level", sa.Integer, nullable=False, server_default="1"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.UniqueConstraint(
            "engineer_id", "product_category", name="uq_capability_engineer_category"
        ),
    )
    op.create_index("idx_capabilities_category", "engineer_capabilities", ["product_category"])

    # Rules
    op.create_table(
        "assignment_rules",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("rule_name", sa.String(200), nullable=False),
        sa.Column("rule_type", sa.String(20), nullable=False),
        sa.Column("priority", sa.Integer, nullable=False, server_default="100"),
        sa.Column("conditions", sa.JSON, nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index("idx_rules_active_priority", "assignment_rules", ["is_active", "priority"])

    # Inquiries
    op.create_table(
        "inquiries",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("inquiry_no", sa.String(50), unique=True, nullable=False),
        sa.Column("customer_name", sa.String(200), nullable=True),
        sa.Column("product_name", sa.String(200), nullable=True),
        sa.Column("product_category", sa.String(100), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column(
            "assigned_engineer_id", sa.String(36),
            sa.ForeignKey("engineers.id"), nullable=True,
        ),
        sa.Column("assigned_at", sa.DateTime, nullable=True),
        sa.Column("completed_at", sa.DateTime, nullable=True),
        sa.Column("version", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index("idx_inquiries_category", "inquiries", ["product_category"])
    op.create_index(
        "idx_inquiries_engineer_status", "inquiries", ["assigned_engineer_id", "status"]
    )

    # Assignment history
    op.create_table(
        "assignment_history",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "inquiry_id", sa.String(36),
            sa.ForeignKey("inquiries.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("assigned_from", sa.String(36), sa.ForeignKey("engineers.id"), nullable=True),
        sa.Column("assigned_to", sa.String(36), sa.ForeignKey("engineers.id"), nullable=False),
        sa.Column("assigned_by", sa.String(36), nullable=True),
        sa.Column("assignment_type", sa.String(20), nullable=False),
        sa.Column("assignment_reason", sa.Text, nullable=False, server_default=""),
        sa.Column(
            "rule_id", sa.String(36),
            sa.ForeignKey("assignment_rules.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("assigned_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index("idx_history_inquiry", "assignment_history", ["inquiry_id"])
    op.create_index("idx_history_assigned_to", "assignment_history", ["assigned_to"])


def downgrade() -> None:
    op.drop_table("assignment_history")
    op.drop_table("inquiries")
    op.drop_table("assignment_rules")
    op.drop_table("engineer_capabilities")
    op.drop_table("engineers")
