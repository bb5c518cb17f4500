from sqlmodel import SQLModel

from timesheet.models.assignment import ShiftPolicyAssignment
from timesheet.models.audit import AuditLog
from timesheet.models.base import TimestampMixin, UUIDBase, VersionedMixin
from timesheet.models.daily_record import DailyRecord
from timesheet.models.enums import (
    ApprovalStage,
    ApprovalStatus,
    AuditAction,
    AuditEntityType,
    DayClass,
)
from timesheet.models.holiday import CompanyHoliday

__all__ = [
    "ApprovalStage",
    "ApprovalStatus",
    "AuditAction",
    "AuditEntityType",
    "AuditLog",
    "CompanyHoliday",
    "DailyRecord",
    "DayClass",
    "SQLModel",
    "ShiftPolicyAssignment",
    "TimestampMixin",
    "UUIDBase",
    "VersionedMixin",
]
