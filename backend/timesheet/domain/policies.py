"""Shift policies and the catalog they are resolved from.

A policy is plain data: one :class:`ShiftWindow` per day classification and a
single overtime multiplier. Lookups are pure, so a policy can be shared across
requests without locking.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import time
from decimal import Decimal
from types import MappingProxyType

from timesheet.exceptions import UnknownPolicyError
from timesheet.models.enums import DayClass


def _minutes_of(value: time) -> int:
    return value.hour * 60 + value.minute


@dataclass(frozen=True)
class ShiftWindow:
    """Scheduled start/end for one day classification plus its unpaid break."""

    scheduled_start: time
    scheduled_end: time
    unpaid_break_minutes: int = 0

    def __post_init__(self) -> None:
        if self.scheduled_end < self.scheduled_start:
            msg = "scheduled_end must not be before scheduled_start"
            raise ValueError(msg)
        if self.unpaid_break_minutes < 0:
            msg = "unpaid_break_minutes must be non-negative"
            raise ValueError(msg)
        if self.unpaid_break_minutes > self.duration_minutes:
            msg = "unpaid_break_minutes cannot exceed the scheduled duration"
            raise ValueError(msg)

    @property
    def duration_minutes(self) -> int:
        return _minutes_of(self.scheduled_end) - _minutes_of(self.scheduled_start)

    @property
    def net_minutes(self) -> int:
        """Scheduled minutes that count as normal time."""
        return self.duration_minutes - self.unpaid_break_minutes

    @property
    def is_day_off(self) -> bool:
        return self.duration_minutes == 0

    @classmethod
    def day_off(cls, at: time = time(7, 0)) -> ShiftWindow:
        """Zero-length window: every minute worked is overtime."""
        return cls(scheduled_start=at, scheduled_end=at)


@dataclass(frozen=True)
class ShiftPolicy:
    """A named shift policy.

    ``windows`` must hold an entry for every :class:`DayClass`; the HOLIDAY
    entry replaces the weekday window whenever the date is a holiday.
    """

    code: str
    windows: Mapping[DayClass, ShiftWindow] = field(hash=False)
    overtime_multiplier: Decimal = Decimal("1.25")
    description: str = ""

    def __post_init__(self) -> None:
        missing = [day.value for day in DayClass if day not in self.windows]
        if missing:
            msg = f"Policy {self.code} has no window for: {', '.join(missing)}"
            raise ValueError(msg)
        if self.overtime_multiplier < 1:
            msg = "overtime_multiplier must be >= 1"
            raise ValueError(msg)
        # Freeze the mapping so a registered policy cannot drift.
        object.__setattr__(self, "windows", MappingProxyType(dict(self.windows)))

    def window_for(self, day_of_week: int | DayClass, is_holiday: bool = False) -> ShiftWindow:
        """Return the window for a weekday (``date.weekday()`` or a DayClass)."""
        if is_holiday:
            return self.windows[DayClass.HOLIDAY]
        if isinstance(day_of_week, DayClass):
            return self.windows[day_of_week]
        return self.windows[DayClass.for_weekday(day_of_week)]


def weekly_policy(
    code: str,
    week: Mapping[DayClass, ShiftWindow],
    *,
    overtime_multiplier: Decimal = Decimal("1.25"),
    description: str = "",
) -> ShiftPolicy:
    """Build a policy from its working days; unlisted days (and holidays) are days off."""
    windows = {day: week.get(day, ShiftWindow.day_off()) for day in DayClass}
    if DayClass.HOLIDAY not in week:
        windows[DayClass.HOLIDAY] = ShiftWindow.day_off()
    return ShiftPolicy(
        code=code,
        windows=windows,
        overtime_multiplier=overtime_multiplier,
        description=description,
    )


class PolicyCatalog:
    """Immutable registry of shift policies keyed by code.

    Registration happens once, at construction.
    """

    __slots__ = ("_by_code", "_policies")

    def __init__(self, policies: Iterable[ShiftPolicy] = ()) -> None:
        ordered = tuple(policies)
        by_code: dict[str, ShiftPolicy] = {}
        for policy in ordered:
            if policy.code in by_code:
                msg = f"Duplicate shift policy code: {policy.code}"
                raise ValueError(msg)
            by_code[policy.code] = policy
        self._policies = ordered
        self._by_code: Mapping[str, ShiftPolicy] = MappingProxyType(by_code)

    @property
    def policies(self) -> tuple[ShiftPolicy, ...]:
        return self._policies

    def resolve(self, code: str) -> ShiftPolicy:
        """Return the policy registered under ``code``."""
        policy = self._by_code.get(code)
        if policy is None:
            raise UnknownPolicyError(code)
        return policy

    def codes(self) -> list[str]:
        return [policy.code for policy in self.policies]

    def __contains__(self, code: object) -> bool:
        return code in self._by_code

    def __iter__(self) -> Iterator[ShiftPolicy]:
        return iter(self.policies)

    def __len__(self) -> int:
        return len(self.policies)


# ---------------------------------------------------------------------------
# Built-in policies
# ---------------------------------------------------------------------------

_LONG_DAY = ShiftWindow(time(7, 0), time(17, 0), 60)
_SHORT_DAY = ShiftWindow(time(7, 0), time(16, 0), 60)

H4 = weekly_policy(
    "H4",
    {
        DayClass.MONDAY: _LONG_DAY,
        DayClass.TUESDAY: _LONG_DAY,
        DayClass.WEDNESDAY: _LONG_DAY,
        DayClass.THURSDAY: _LONG_DAY,
        DayClass.FRIDAY: _SHORT_DAY,
    },
    description="Control room, Mon-Thu 07:00-17:00, Fri 07:00-16:00, 1h unpaid lunch",
)

H1_1 = weekly_policy(
    "H1_1",
    dict(H4.windows),
    description="Mon-Thu 07:00-17:00, Fri 07:00-16:00, 1h unpaid lunch",
)

H1_2 = weekly_policy(
    "H1_2",
    {
        DayClass.TUESDAY: _LONG_DAY,
        DayClass.WEDNESDAY: _LONG_DAY,
        DayClass.THURSDAY: _LONG_DAY,
        DayClass.FRIDAY: _LONG_DAY,
        DayClass.SATURDAY: _SHORT_DAY,
    },
    description="H1_1 shifted one day: Tue-Fri 07:00-17:00, Sat 07:00-16:00, Sun and Mon off",
)

H1_4 = weekly_policy(
    "H1_4",
    {day: _LONG_DAY for day in DayClass if day is not DayClass.HOLIDAY},
    description="Every day 07:00-17:00, 1h unpaid lunch",
)

H1_5 = weekly_policy(
    "H1_5",
    {
        DayClass.MONDAY: _LONG_DAY,
        DayClass.TUESDAY: _LONG_DAY,
        DayClass.WEDNESDAY: _LONG_DAY,
        DayClass.THURSDAY: _LONG_DAY,
        DayClass.FRIDAY: ShiftWindow(time(7, 0), time(14, 0), 60),
        DayClass.SATURDAY: _LONG_DAY,
    },
    description="Mon-Thu and Sat 07:00-17:00, Fri 07:00-14:00, 1h unpaid lunch, Sun off",
)

_H1_6_DAY = ShiftWindow(time(8, 0), time(17, 0), 60)

H1_6 = weekly_policy(
    "H1_6",
    {
        DayClass.MONDAY: _H1_6_DAY,
        DayClass.TUESDAY: _H1_6_DAY,
        DayClass.WEDNESDAY: _H1_6_DAY,
        DayClass.THURSDAY: _H1_6_DAY,
        DayClass.FRIDAY: _H1_6_DAY,
        DayClass.SATURDAY: ShiftWindow(time(8, 0), time(12, 0)),
    },
    description="Mon-Fri 08:00-17:00 with 1h unpaid lunch, Sat 08:00-12:00, Sun off",
)

_EXTENDED_DAY = ShiftWindow(time(7, 0), time(19, 0), 60)

H1_7 = weekly_policy(
    "H1_7",
    {day: _EXTENDED_DAY for day in DayClass if day not in (DayClass.SUNDAY, DayClass.HOLIDAY)},
    description="Mon-Sat 07:00-19:00, 1h unpaid lunch, Sun off",
)

H2_2 = weekly_policy(
    "H2_2",
    dict(H4.windows),
    description="Mon-Fri crew, Mon-Thu 07:00-17:00, Fri 07:00-16:00, 1h unpaid lunch",
)

BUILTIN_POLICIES: tuple[ShiftPolicy, ...] = (H4, H1_1, H1_2, H1_4, H1_5, H1_6, H1_7, H2_2)


def default_catalog() -> PolicyCatalog:
    """Catalog registered at process start."""
    return PolicyCatalog(BUILTIN_POLICIES)


_catalog: PolicyCatalog | None = None


def get_policy_catalog() -> PolicyCatalog:
    """FastAPI dependency for the process-wide policy catalog."""
    global _catalog
    if _catalog is None:
        _catalog = default_catalog()
    return _catalog


def set_policy_catalog(catalog: PolicyCatalog) -> None:
    """Override the catalog (for testing or production wiring)."""
    global _catalog
    _catalog = catalog
