# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import AliasChoices, BaseModel, Field

from timesheet.models.enums import ApprovalStatus

# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class SubmitRecordPayload(BaseModel):
    """Clock events for one employee and date; computes or recomputes the record."""

    employee_id: uuid.UUID
    work_date: date
    clock_in: datetime | None = Field(default=None, validation_alias=AliasChoices("clock_in", "horaEntrada"))
    clock_out: datetime | None = Field(default=None, validation_alias=AliasChoices("clock_out", "horaSalida"))
    continuous_shift: bool = Field(
        default=False, validation_alias=AliasChoices("continuous_shift", "esHoraCorrida")
    )
    comment: str | None = Field(
        default=None, max_length=1000, validation_alias=AliasChoices("comment", "comentarioEmpleado")
    )
    expected_version: int | None = Field(default=None, ge=1)


class SupervisorDecisionPayload(BaseModel):
    """Supervisor sign-off. Accepts the legacy ``aprobacionSupervisor`` field names."""

    approved: bool = Field(validation_alias=AliasChoices("approved", "aprobacionSupervisor"))
    approver_code: str | None = Field(
        default=None, max_length=100, validation_alias=AliasChoices("approver_code", "codigoSupervisor")
    )
    comment: str | None = Field(
        default=None, max_length=1000, validation_alias=AliasChoices("comment", "comentarioSupervisor")
    )
    expected_version: int | None = Field(default=None, ge=1)


class RrhhDecisionPayload(BaseModel):
    """HR sign-off. Accepts the legacy ``aprobacionRrhh`` field names."""

    approved: bool = Field(validation_alias=AliasChoices("approved", "aprobacionRrhh"))
    approver_code: str | None = Field(
        default=None, max_length=100, validation_alias=AliasChoices("approver_code", "codigoRrhh")
    )
    comment: str | None = Field(default=None, max_length=1000, validation_alias=AliasChoices("comment", "comentarioRrhh"))
    expected_version: int | None = Field(default=None, ge=1)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ApprovalResponse(BaseModel):
    """One stage's sign-off; ``approved`` is None until acted on."""

    approved: bool | None
    approver_code: str | None
    comment: str | None
    decided_at: datetime | None


class DailyRecordResponse(BaseModel):
    """Response schema for a single daily record."""

    id: uuid.UUID
    company_id: uuid.UUID
    employee_id: uuid.UUID
    work_date: date
    policy_code: str
    is_holiday: bool
    clock_in: datetime | None
    clock_out: datetime | None
    employee_comment: str | None
    normal_hours: Decimal
    overtime_hours: Decimal
    unpaid_break_minutes: int
    continuous_shift: bool
    overtime_multiplier: Decimal
    status: ApprovalStatus
    final: bool
    supervisor_approval: ApprovalResponse
    rrhh_approval: ApprovalResponse
    version: int
    created_at: datetime
    updated_at: datetime


class DailyRecordListResponse(BaseModel):
    """Paginated list of daily records."""

    items: list[DailyRecordResponse]
    total: int
