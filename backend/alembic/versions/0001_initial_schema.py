"""initial schema: daily records, shift assignments, holidays, audit log

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "daily_record",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("version", sa.Integer(), server_default="1", nullable=False),
        sa.Column("company_id", sa.Uuid(), nullable=False),
        sa.Column("employee_id", sa.Uuid(), nullable=False),
        sa.Column("work_date", sa.Date(), nullable=False),
        sa.Column("policy_code", sa.String(length=50), nullable=False),
        sa.Column("is_holiday", sa.Boolean(), nullable=False),
        sa.Column("clock_in", sa.DateTime(timezone=True), nullable=True),
        sa.Column("clock_out", sa.DateTime(timezone=True), nullable=True),
        sa.Column("employee_comment", sa.String(), nullable=True),
        sa.Column("normal_hours", sa.Numeric(6, 2), nullable=False),
        sa.Column("overtime_hours", sa.Numeric(6, 2), nullable=False),
        sa.Column("unpaid_break_minutes", sa.Integer(), nullable=False),
        sa.Column("continuous_shift", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("overtime_multiplier", sa.Numeric(5, 2), nullable=False),
        sa.Column("status", sa.String(length=50), server_default="PENDING", nullable=False),
        sa.Column("supervisor_approved", sa.Boolean(), nullable=True),
        sa.Column("supervisor_code", sa.String(length=100), nullable=True),
        sa.Column("supervisor_comment", sa.String(), nullable=True),
        sa.Column("supervisor_decided_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rrhh_approved", sa.Boolean(), nullable=True),
        sa.Column("rrhh_code", sa.String(length=100), nullable=True),
        sa.Column("rrhh_comment", sa.String(), nullable=True),
        sa.Column("rrhh_decided_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("company_id", "employee_id", "work_date", name="uq_daily_record_employee_date"),
    )
    op.create_index("ix_daily_record_company_id", "daily_record", ["company_id"])
    op.create_index("ix_daily_record_employee_id", "daily_record", ["employee_id"])
    op.create_index("ix_daily_record_work_date", "daily_record", ["work_date"])
    op.create_index("ix_daily_record_status", "daily_record", ["status"])
    op.create_index("ix_daily_record_company_status", "daily_record", ["company_id", "status"])

    op.create_table(
        "shift_policy_assignment",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("company_id", sa.Uuid(), nullable=False),
        sa.Column("employee_id", sa.Uuid(), nullable=False),
        sa.Column("policy_code", sa.String(length=50), nullable=False),
        sa.Column("effective_from", sa.Date(), nullable=False),
        sa.Column("effective_to", sa.Date(), nullable=True),
        sa.Column("created_by", sa.Uuid(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("company_id", "employee_id", "effective_from", name="uq_shift_assignment_employee_from"),
    )
    op.create_index("ix_shift_policy_assignment_company_id", "shift_policy_assignment", ["company_id"])
    op.create_index("ix_shift_policy_assignment_employee_id", "shift_policy_assignment", ["employee_id"])
    op.create_index("ix_shift_policy_assignment_policy_code", "shift_policy_assignment", ["policy_code"])

    op.create_table(
        "company_holiday",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("company_id", sa.Uuid(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("name", sa.String(length=45), nullable=False),
        sa.Column("created_by", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("company_id", "date", name="uq_holiday_company_date"),
    )
    op.create_index("ix_company_holiday_company_id", "company_holiday", ["company_id"])

    op.create_table(
        "audit_log",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("company_id", sa.Uuid(), nullable=False),
        sa.Column("actor_id", sa.Uuid(), nullable=False),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.Uuid(), nullable=False),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("note", sa.String(length=255), nullable=True),
        sa.Column("before_json", sa.JSON(), nullable=True),
        sa.Column("after_json", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_log_company_id", "audit_log", ["company_id"])
    op.create_index("ix_audit_log_created_at", "audit_log", ["created_at"])
    op.create_index("ix_audit_entity", "audit_log", ["entity_type", "entity_id"])


def downgrade() -> None:
    op.drop_table("audit_log")
    op.drop_table("company_holiday")
    op.drop_table("shift_policy_assignment")
    op.drop_table("daily_record")
