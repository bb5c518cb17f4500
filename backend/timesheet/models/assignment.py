# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date

import sqlalchemy as sa
from sqlmodel import Field

from timesheet.models.base import TimestampMixin, UUIDBase


class ShiftPolicyAssignment(UUIDBase, TimestampMixin, table=True):
    """Links an employee to a shift policy code with effective dating."""

    __tablename__ = "shift_policy_assignment"
    __table_args__ = (
        sa.UniqueConstraint(
            "company_id",
            "employee_id",
            "effective_from",
            name="uq_shift_assignment_employee_from",
        ),
    )

    company_id: uuid.UUID = Field(index=True)
    employee_id: uuid.UUID = Field(index=True)
    policy_code: str = Field(max_length=50, index=True)
    effective_from: date
    effective_to: date | None = None
    created_by: uuid.UUID
