# ruff: noqa: TC003
from __future__ import annotations

import datetime
import uuid

from pydantic import AliasChoices, BaseModel, Field

from timesheet.models.holiday import HOLIDAY_NAME_MAX_LENGTH


class CreateHolidayRequest(BaseModel):
    """Request body for adding a date to the holiday calendar.

    Accepts the legacy ``fecha``/``nombre`` field names.
    """

    date: datetime.date = Field(validation_alias=AliasChoices("date", "fecha"))
    name: str = Field(
        min_length=1, max_length=HOLIDAY_NAME_MAX_LENGTH, validation_alias=AliasChoices("name", "nombre")
    )


class RenameHolidayRequest(BaseModel):
    name: str = Field(
        min_length=1, max_length=HOLIDAY_NAME_MAX_LENGTH, validation_alias=AliasChoices("name", "nombre")
    )


class HolidayResponse(BaseModel):
    """One calendar entry and who added it."""

    id: uuid.UUID
    company_id: uuid.UUID
    date: datetime.date
    name: str
    created_by: uuid.UUID
    created_at: datetime.datetime


class HolidayListResponse(BaseModel):
    """Paginated list of company holidays."""

    items: list[HolidayResponse]
    total: int
