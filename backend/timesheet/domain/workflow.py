"""Two-stage approval state machine for daily records.

PENDING -> SUPERVISOR_APPROVED -> RRHH_APPROVED, with SUPERVISOR_REJECTED and
RRHH_REJECTED as dead ends. Transition functions never touch storage: they
validate against the record's current status and return an
:class:`ApprovalChange` that the caller applies with a compare-and-swap write.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Any, Protocol

from timesheet.exceptions import ConcurrentModificationError, InvalidTransitionError
from timesheet.models.enums import ApprovalStage, ApprovalStatus

_TRANSITIONS: dict[tuple[ApprovalStatus, ApprovalStage], tuple[ApprovalStatus, ApprovalStatus]] = {
    (ApprovalStatus.PENDING, ApprovalStage.SUPERVISOR): (
        ApprovalStatus.SUPERVISOR_APPROVED,
        ApprovalStatus.SUPERVISOR_REJECTED,
    ),
    (ApprovalStatus.SUPERVISOR_APPROVED, ApprovalStage.RRHH): (
        ApprovalStatus.RRHH_APPROVED,
        ApprovalStatus.RRHH_REJECTED,
    ),
}

TERMINAL_STATUSES = frozenset(
    {ApprovalStatus.SUPERVISOR_REJECTED, ApprovalStatus.RRHH_APPROVED, ApprovalStatus.RRHH_REJECTED}
)


class ApprovalSubject(Protocol):
    """The fields of a daily record the workflow reads and writes."""

    employee_id: uuid.UUID
    work_date: date
    status: str
    version: int
    supervisor_approved: bool | None
    rrhh_approved: bool | None


@dataclass(frozen=True)
class ApprovalChange:
    """Field updates produced by one decision, guarded by the observed pre-state."""

    stage: ApprovalStage
    from_status: ApprovalStatus
    to_status: ApprovalStatus
    from_version: int
    approved: bool
    approver_code: str | None
    comment: str | None
    decided_at: datetime

    def values(self) -> dict[str, Any]:
        """Column values to write, keyed by record attribute name."""
        prefix = "supervisor" if self.stage is ApprovalStage.SUPERVISOR else "rrhh"
        return {
            "status": self.to_status.value,
            "version": self.from_version + 1,
            f"{prefix}_approved": self.approved,
            f"{prefix}_code": self.approver_code,
            f"{prefix}_comment": self.comment,
            f"{prefix}_decided_at": self.decided_at,
        }


def next_status(current: ApprovalStatus, stage: ApprovalStage, approved: bool) -> ApprovalStatus:
    """Return the status a decision leads to, or raise InvalidTransitionError."""
    targets = _TRANSITIONS.get((current, stage))
    if targets is None:
        msg = f"Cannot submit {stage.value} decision while record is {current.value}"
        raise InvalidTransitionError(msg, current_status=current.value, attempted=stage.value)
    return targets[0] if approved else targets[1]


def _decide(
    record: ApprovalSubject,
    stage: ApprovalStage,
    approved: bool,
    approver_code: str | None,
    comment: str | None,
    decided_at: datetime | None,
) -> ApprovalChange:
    current = ApprovalStatus(record.status)
    try:
        target = next_status(current, stage, approved)
    except InvalidTransitionError as exc:
        exc.context.update(employee_id=str(record.employee_id), work_date=record.work_date.isoformat())
        raise
    if stage is ApprovalStage.RRHH and approved and record.supervisor_approved is not True:
        raise InvalidTransitionError(
            "RRHH approval requires a supervisor approval",
            employee_id=record.employee_id,
            work_date=record.work_date,
            current_status=current.value,
            attempted=stage.value,
        )
    return ApprovalChange(
        stage=stage,
        from_status=current,
        to_status=target,
        from_version=record.version,
        approved=approved,
        approver_code=approver_code,
        comment=comment,
        decided_at=decided_at or datetime.now(UTC),
    )


def submit_supervisor_decision(
    record: ApprovalSubject,
    approved: bool,
    approver_code: str | None = None,
    comment: str | None = None,
    *,
    decided_at: datetime | None = None,
) -> ApprovalChange:
    """Supervisor sign-off; legal only from PENDING."""
    return _decide(record, ApprovalStage.SUPERVISOR, approved, approver_code, comment, decided_at)


def submit_rrhh_decision(
    record: ApprovalSubject,
    approved: bool,
    approver_code: str | None = None,
    comment: str | None = None,
    *,
    decided_at: datetime | None = None,
) -> ApprovalChange:
    """HR sign-off; legal only from SUPERVISOR_APPROVED."""
    return _decide(record, ApprovalStage.RRHH, approved, approver_code, comment, decided_at)


def apply_change(record: ApprovalSubject, change: ApprovalChange) -> None:
    """Apply a change to an in-memory record after checking it still holds the pre-state."""
    if record.version != change.from_version or ApprovalStatus(record.status) is not change.from_status:
        raise ConcurrentModificationError(
            "Record changed since the decision was prepared",
            employee_id=record.employee_id,
            work_date=record.work_date,
            expected_version=change.from_version,
            actual_version=record.version,
            expected_status=change.from_status.value,
            actual_status=record.status,
        )
    for key, value in change.values().items():
        setattr(record, key, value)


def can_recompute(record: ApprovalSubject) -> bool:
    """Hours may be recomputed only before anyone has signed off."""
    return record.supervisor_approved is None and record.rrhh_approved is None
