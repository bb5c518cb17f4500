# ruff: noqa: TC003
from __future__ import annotations

import datetime
import uuid

import sqlalchemy as sa
from sqlmodel import Field

from timesheet.models.base import TimestampMixin, UUIDBase

HOLIDAY_NAME_MAX_LENGTH = 45


class CompanyHoliday(UUIDBase, TimestampMixin, table=True):
    """A calendar date on which every policy applies its HOLIDAY window.

    One row per company and date. Removing or renaming a holiday does not
    touch records already computed for that date.
    """

    __tablename__ = "company_holiday"
    __table_args__ = (sa.UniqueConstraint("company_id", "date", name="uq_holiday_company_date"),)

    company_id: uuid.UUID = Field(index=True)
    date: datetime.date
    name: str = Field(max_length=HOLIDAY_NAME_MAX_LENGTH)
    created_by: uuid.UUID
