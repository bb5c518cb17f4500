from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import extract, func, select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from timesheet.exceptions import AppError
from timesheet.models.enums import AuditAction, AuditEntityType
from timesheet.models.holiday import CompanyHoliday
from timesheet.schemas.holiday import HolidayListResponse, HolidayResponse
from timesheet.services.audit import model_to_audit_dict, write_audit_log

if TYPE_CHECKING:
    import uuid
    from datetime import date

    from sqlalchemy.ext.asyncio import AsyncSession

    from timesheet.schemas.auth import AuthContext
    from timesheet.schemas.holiday import CreateHolidayRequest, RenameHolidayRequest

logger = logging.getLogger(__name__)


def _to_response(holiday: CompanyHoliday) -> HolidayResponse:
    return HolidayResponse.model_validate(holiday, from_attributes=True)


async def _get_by_date_or_404(session: AsyncSession, company_id: uuid.UUID, day: date) -> CompanyHoliday:
    result = await session.execute(
        select(CompanyHoliday).where(
            col(CompanyHoliday.company_id) == company_id,
            col(CompanyHoliday.date) == day,
        )
    )
    holiday = result.scalar_one_or_none()
    if holiday is None:
        raise AppError("No holiday on this date", status_code=404, context={"date": day})
    return holiday


async def is_holiday(session: AsyncSession, company_id: uuid.UUID, day: date) -> bool:
    """Whether ``day`` is on the company calendar; selects the HOLIDAY window."""
    result = await session.execute(
        select(col(CompanyHoliday.id))
        .where(
            col(CompanyHoliday.company_id) == company_id,
            col(CompanyHoliday.date) == day,
        )
        .limit(1)
    )
    return result.scalar_one_or_none() is not None


async def create_holiday(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateHolidayRequest,
) -> HolidayResponse:
    """Add a date to the company holiday calendar.

    Records already computed for that date keep their hours; recompute them
    to pick up the HOLIDAY window.
    """
    holiday = CompanyHoliday(
        company_id=auth.company_id,
        date=payload.date,
        name=payload.name,
        created_by=auth.user_id,
    )
    session.add(holiday)
    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise AppError(
            "Date is already on the holiday calendar",
            status_code=409,
            context={"date": payload.date},
        ) from None

    await write_audit_log(
        session,
        auth,
        entity_type=AuditEntityType.HOLIDAY,
        entity_id=holiday.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(holiday),
    )
    await session.commit()
    logger.info("Holiday %s (%s) added for company %s", holiday.date, holiday.name, holiday.company_id)
    return _to_response(holiday)


async def list_holidays(
    session: AsyncSession,
    company_id: uuid.UUID,
    year: int | None = None,
    offset: int = 0,
    limit: int = 50,
) -> HolidayListResponse:
    """Calendar in date order, optionally restricted to one year."""
    query = select(CompanyHoliday).where(col(CompanyHoliday.company_id) == company_id)
    if year is not None:
        query = query.where(extract("year", col(CompanyHoliday.date)) == year)

    total = (await session.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
    result = await session.execute(query.order_by(col(CompanyHoliday.date)).offset(offset).limit(limit))

    return HolidayListResponse(
        items=[_to_response(h) for h in result.scalars().all()],
        total=total,
    )


async def get_holiday_by_date(session: AsyncSession, company_id: uuid.UUID, day: date) -> HolidayResponse:
    return _to_response(await _get_by_date_or_404(session, company_id, day))


async def rename_holiday(
    session: AsyncSession,
    auth: AuthContext,
    day: date,
    payload: RenameHolidayRequest,
) -> HolidayResponse:
    """Change the label of the holiday on ``day``; the date itself is fixed."""
    holiday = await _get_by_date_or_404(session, auth.company_id, day)
    before = model_to_audit_dict(holiday)
    holiday.name = payload.name
    session.add(holiday)
    await write_audit_log(
        session,
        auth,
        entity_type=AuditEntityType.HOLIDAY,
        entity_id=holiday.id,
        action=AuditAction.UPDATE,
        before_json=before,
        after_json=model_to_audit_dict(holiday),
    )
    await session.commit()
    logger.info("Holiday %s renamed to %s for company %s", day, payload.name, auth.company_id)
    return _to_response(holiday)


async def delete_holiday(
    session: AsyncSession,
    auth: AuthContext,
    holiday_id: uuid.UUID,
) -> None:
    """Take a date off the calendar; computed records are left untouched."""
    holiday = await session.get(CompanyHoliday, holiday_id)
    if holiday is None or holiday.company_id != auth.company_id:
        raise AppError("Holiday not found", status_code=404, context={"holiday_id": holiday_id})

    await write_audit_log(
        session,
        auth,
        entity_type=AuditEntityType.HOLIDAY,
        entity_id=holiday.id,
        action=AuditAction.DELETE,
        before_json=model_to_audit_dict(holiday),
    )
    removed = holiday.date
    await session.delete(holiday)
    await session.commit()
    logger.info("Holiday %s removed for company %s", removed, auth.company_id)
