from __future__ import annotations

import enum


class DayClass(enum.StrEnum):
    """Day classification a shift policy defines a window for."""

    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"
    HOLIDAY = "HOLIDAY"

    @classmethod
    def for_weekday(cls, weekday: int) -> DayClass:
        """Map ``date.weekday()`` (Monday == 0) to its classification."""
        return _WEEKDAYS[weekday]


_WEEKDAYS = (
    DayClass.MONDAY,
    DayClass.TUESDAY,
    DayClass.WEDNESDAY,
    DayClass.THURSDAY,
    DayClass.FRIDAY,
    DayClass.SATURDAY,
    DayClass.SUNDAY,
)


class ApprovalStatus(enum.StrEnum):
    """State machine for daily record approval."""

    PENDING = "PENDING"
    SUPERVISOR_APPROVED = "SUPERVISOR_APPROVED"
    SUPERVISOR_REJECTED = "SUPERVISOR_REJECTED"
    RRHH_APPROVED = "RRHH_APPROVED"
    RRHH_REJECTED = "RRHH_REJECTED"


class ApprovalStage(enum.StrEnum):
    """Who signs off on a daily record."""

    SUPERVISOR = "SUPERVISOR"
    RRHH = "RRHH"


class AuditEntityType(enum.StrEnum):
    """Entity type recorded in the audit log."""

    DAILY_RECORD = "DAILY_RECORD"
    ASSIGNMENT = "ASSIGNMENT"
    HOLIDAY = "HOLIDAY"


class AuditAction(enum.StrEnum):
    """Action recorded in the audit log."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
