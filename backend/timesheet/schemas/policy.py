from __future__ import annotations

from datetime import time
from decimal import Decimal

from pydantic import BaseModel

from timesheet.models.enums import DayClass


class ShiftWindowResponse(BaseModel):
    """Scheduled window for one day classification."""

    day: DayClass
    scheduled_start: time
    scheduled_end: time
    unpaid_break_minutes: int
    net_hours: Decimal
    is_day_off: bool


class ShiftPolicyResponse(BaseModel):
    code: str
    description: str
    overtime_multiplier: Decimal
    windows: list[ShiftWindowResponse]


class ShiftPolicyListResponse(BaseModel):
    items: list[ShiftPolicyResponse]
    total: int
