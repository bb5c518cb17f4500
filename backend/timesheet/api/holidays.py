# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query, status

from timesheet.api.deps import AdminDep, AuthDep, validate_company_scope
from timesheet.db import SessionDep
from timesheet.schemas.holiday import (
    CreateHolidayRequest,
    HolidayListResponse,
    HolidayResponse,
    RenameHolidayRequest,
)
from timesheet.services import holiday as holiday_service

holidays_router = APIRouter(
    prefix="/companies/{company_id}/holidays",
    tags=["holidays"],
    dependencies=[Depends(validate_company_scope)],
)


@holidays_router.post("", response_model=HolidayResponse, status_code=status.HTTP_201_CREATED)
async def create_holiday(
    payload: CreateHolidayRequest,
    session: SessionDep,
    auth: AdminDep,
) -> HolidayResponse:
    """Add a date to the holiday calendar (admin only)."""
    return await holiday_service.create_holiday(session, auth, payload)


@holidays_router.get("", response_model=HolidayListResponse)
async def list_holidays(
    session: SessionDep,
    auth: AuthDep,
    year: int | None = Query(default=None, ge=1900, le=2200),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=366),
) -> HolidayListResponse:
    """List the holiday calendar, optionally for one year."""
    return await holiday_service.list_holidays(session, auth.company_id, year, offset, limit)


@holidays_router.get("/{day}", response_model=HolidayResponse)
async def get_holiday(
    day: date,
    session: SessionDep,
    auth: AuthDep,
) -> HolidayResponse:
    """Look up the holiday on a calendar date."""
    return await holiday_service.get_holiday_by_date(session, auth.company_id, day)


@holidays_router.patch("/{day}", response_model=HolidayResponse)
async def rename_holiday(
    day: date,
    payload: RenameHolidayRequest,
    session: SessionDep,
    auth: AdminDep,
) -> HolidayResponse:
    """Rename the holiday on a calendar date (admin only)."""
    return await holiday_service.rename_holiday(session, auth, day, payload)


@holidays_router.delete("/{holiday_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_holiday(
    holiday_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> None:
    """Remove a date from the holiday calendar (admin only)."""
    await holiday_service.delete_holiday(session, auth, holiday_id)
