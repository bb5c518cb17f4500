"""Normal/overtime split for one employee-day.

Clock timestamps are truncated to whole minutes, then compared against the
policy's window anchored on the work date. Hours are reported as ``Decimal``
values rounded to :data:`HOURS_RESOLUTION` with ROUND_HALF_UP.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from timesheet.domain.policies import ShiftPolicy, ShiftWindow
from timesheet.exceptions import InvalidClockEventsError

HOURS_RESOLUTION = Decimal("0.01")
_ZERO = Decimal("0.00")


@dataclass(frozen=True)
class ClockEvents:
    """Actual clock-in/clock-out for a date. Either side may be missing.

    ``continuous_shift`` marks a day worked straight through: the window's
    unpaid break is not deducted.
    """

    clock_in: datetime | None = None
    clock_out: datetime | None = None
    continuous_shift: bool = False

    @property
    def complete(self) -> bool:
        return self.clock_in is not None and self.clock_out is not None


@dataclass(frozen=True)
class HoursComputation:
    """Result of one calculator run."""

    policy_code: str
    work_date: date
    is_holiday: bool
    window: ShiftWindow
    overtime_multiplier: Decimal
    continuous_shift: bool = False
    normal_hours: Decimal = _ZERO
    overtime_hours: Decimal = _ZERO
    unpaid_break_minutes: int = 0
    worked_minutes: int = 0
    worked: bool = False


def to_hours(minutes: int) -> Decimal:
    """Convert whole minutes to hours at the fixed resolution."""
    return (Decimal(minutes) / Decimal(60)).quantize(HOURS_RESOLUTION, rounding=ROUND_HALF_UP)


def _truncate_to_minute(value: datetime) -> datetime:
    return value.replace(second=0, microsecond=0)


def _minutes_between(start: datetime, end: datetime) -> int:
    return int((end - start).total_seconds()) // 60


def _window_bounds(window: ShiftWindow, work_date: date, clock_in: datetime) -> tuple[datetime, datetime]:
    start = datetime.combine(work_date, window.scheduled_start, tzinfo=clock_in.tzinfo)
    return start, start + timedelta(minutes=window.duration_minutes)


def compute(
    policy: ShiftPolicy,
    work_date: date,
    is_holiday: bool,
    clock_events: ClockEvents,
    *,
    employee_id: uuid.UUID | None = None,
) -> HoursComputation:
    """Split the worked span into normal hours, overtime hours and unpaid break.

    Time inside the scheduled window is normal time minus the window's unpaid
    break; everything outside it is overtime. When the in-window time is
    shorter than the break, normal hours floor at zero and the remaining break
    is dropped. A continuous shift takes no break at all.
    """
    window = policy.window_for(work_date.weekday(), is_holiday)
    empty = HoursComputation(
        policy_code=policy.code,
        work_date=work_date,
        is_holiday=is_holiday,
        window=window,
        overtime_multiplier=policy.overtime_multiplier,
        continuous_shift=clock_events.continuous_shift,
    )
    clock_in, clock_out = clock_events.clock_in, clock_events.clock_out
    if clock_in is None or clock_out is None:
        return empty

    context = {
        "employee_id": employee_id,
        "work_date": work_date,
        "policy_code": policy.code,
        "clock_in": clock_in,
        "clock_out": clock_out,
    }
    if (clock_in.tzinfo is None) != (clock_out.tzinfo is None):
        raise InvalidClockEventsError("clock_in and clock_out must both carry a UTC offset or neither", **context)
    if clock_out < clock_in:
        raise InvalidClockEventsError("clock_out is before clock_in", **context)

    clock_in = _truncate_to_minute(clock_in)
    clock_out = _truncate_to_minute(clock_out)
    window_start, window_end = _window_bounds(window, work_date, clock_in)

    worked = _minutes_between(clock_in, clock_out)
    overlap = max(_minutes_between(max(clock_in, window_start), min(clock_out, window_end)), 0)
    unpaid_break = 0 if clock_events.continuous_shift else min(window.unpaid_break_minutes, overlap)
    overtime = worked - overlap

    net_hours = to_hours(worked - unpaid_break)
    overtime_hours = to_hours(overtime)

    return HoursComputation(
        policy_code=policy.code,
        work_date=work_date,
        is_holiday=is_holiday,
        window=window,
        overtime_multiplier=policy.overtime_multiplier,
        continuous_shift=clock_events.continuous_shift,
        normal_hours=net_hours - overtime_hours,
        overtime_hours=overtime_hours,
        unpaid_break_minutes=unpaid_break,
        worked_minutes=worked,
        worked=True,
    )
