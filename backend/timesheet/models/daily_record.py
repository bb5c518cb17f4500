# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field

from timesheet.models.base import TimestampMixin, UUIDBase, VersionedMixin
from timesheet.models.enums import ApprovalStatus


class DailyRecord(UUIDBase, TimestampMixin, VersionedMixin, table=True):
    """Computed hours for one employee and date, with its approval state."""

    __tablename__ = "daily_record"
    __table_args__ = (
        sa.UniqueConstraint("company_id", "employee_id", "work_date", name="uq_daily_record_employee_date"),
        sa.Index("ix_daily_record_company_status", "company_id", "status"),
    )

    company_id: uuid.UUID = Field(index=True)
    employee_id: uuid.UUID = Field(index=True)
    work_date: date = Field(index=True)
    policy_code: str = Field(max_length=50)
    is_holiday: bool = Field(default=False)
    clock_in: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    clock_out: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    employee_comment: str | None = None

    normal_hours: Decimal = Field(default=Decimal("0.00"), sa_type=sa.Numeric(6, 2))  # ty: ignore[invalid-argument-type]
    overtime_hours: Decimal = Field(default=Decimal("0.00"), sa_type=sa.Numeric(6, 2))  # ty: ignore[invalid-argument-type]
    unpaid_break_minutes: int = Field(default=0)
    continuous_shift: bool = Field(default=False)
    overtime_multiplier: Decimal = Field(default=Decimal("1.00"), sa_type=sa.Numeric(5, 2))  # ty: ignore[invalid-argument-type]

    status: str = Field(
        default=ApprovalStatus.PENDING, max_length=50, index=True, sa_column_kwargs={"server_default": "PENDING"}
    )
    supervisor_approved: bool | None = None
    supervisor_code: str | None = Field(default=None, max_length=100)
    supervisor_comment: str | None = None
    supervisor_decided_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    rrhh_approved: bool | None = None
    rrhh_code: str | None = Field(default=None, max_length=100)
    rrhh_comment: str | None = None
    rrhh_decided_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
