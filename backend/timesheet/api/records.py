# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query, status

from timesheet.api.deps import AuthDep, CatalogDep, validate_company_scope
from timesheet.db import SessionDep
from timesheet.models.enums import ApprovalStatus
from timesheet.schemas.daily_record import (
    DailyRecordListResponse,
    DailyRecordResponse,
    RrhhDecisionPayload,
    SubmitRecordPayload,
    SupervisorDecisionPayload,
)
from timesheet.services import daily_record as record_service

records_router = APIRouter(
    prefix="/companies/{company_id}/records",
    tags=["records"],
    dependencies=[Depends(validate_company_scope)],
)


@records_router.post("", response_model=DailyRecordResponse, status_code=status.HTTP_200_OK)
async def compute_record(
    payload: SubmitRecordPayload,
    session: SessionDep,
    auth: AuthDep,
    catalog: CatalogDep,
) -> DailyRecordResponse:
    """Compute, or recompute, an employee's daily record from clock events."""
    return await record_service.compute_record(session, auth, payload, catalog)


@records_router.get("", response_model=DailyRecordListResponse)
async def list_records(
    session: SessionDep,
    auth: AuthDep,
    employee_id: uuid.UUID | None = Query(default=None),
    status_filter: ApprovalStatus | None = Query(default=None, alias="status"),
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> DailyRecordListResponse:
    """List daily records with optional filters."""
    return await record_service.list_records(
        session, auth, employee_id, status_filter, date_from, date_to, offset, limit
    )


@records_router.get("/{record_id}", response_model=DailyRecordResponse)
async def get_record(
    record_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> DailyRecordResponse:
    """Get a single daily record."""
    return await record_service.get_record(session, auth, record_id)


@records_router.post("/{record_id}/supervisor-decision", response_model=DailyRecordResponse)
async def submit_supervisor_decision(
    record_id: uuid.UUID,
    payload: SupervisorDecisionPayload,
    session: SessionDep,
    auth: AuthDep,
) -> DailyRecordResponse:
    """Approve or reject a pending record (supervisor or admin)."""
    return await record_service.submit_supervisor_decision(session, auth, record_id, payload)


@records_router.post("/{record_id}/rrhh-decision", response_model=DailyRecordResponse)
async def submit_rrhh_decision(
    record_id: uuid.UUID,
    payload: RrhhDecisionPayload,
    session: SessionDep,
    auth: AuthDep,
) -> DailyRecordResponse:
    """Approve or reject a supervisor-approved record (RRHH or admin)."""
    return await record_service.submit_rrhh_decision(session, auth, record_id, payload)
