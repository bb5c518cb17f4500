"""Unit tests for the two-stage approval state machine."""

from __future__ import annotations

import uuid
from datetime import UTC, date, datetime

import pytest

from timesheet.domain.workflow import (
    TERMINAL_STATUSES,
    apply_change,
    can_recompute,
    next_status,
    submit_rrhh_decision,
    submit_supervisor_decision,
)
from timesheet.exceptions import ConcurrentModificationError, InvalidTransitionError
from timesheet.models.daily_record import DailyRecord
from timesheet.models.enums import ApprovalStage, ApprovalStatus

DECIDED_AT = datetime(2025, 3, 4, 9, 30, tzinfo=UTC)


def _record(**overrides: object) -> DailyRecord:
    fields: dict[str, object] = {
        "company_id": uuid.uuid4(),
        "employee_id": uuid.uuid4(),
        "work_date": date(2025, 3, 3),
        "policy_code": "H4",
    }
    fields.update(overrides)
    return DailyRecord(**fields)


def _supervisor_approved() -> DailyRecord:
    record = _record()
    apply_change(record, submit_supervisor_decision(record, True, "SUP-1", decided_at=DECIDED_AT))
    return record


# ---------------------------------------------------------------------------
# next_status
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("current", "stage", "approved", "expected"),
    [
        (ApprovalStatus.PENDING, ApprovalStage.SUPERVISOR, True, ApprovalStatus.SUPERVISOR_APPROVED),
        (ApprovalStatus.PENDING, ApprovalStage.SUPERVISOR, False, ApprovalStatus.SUPERVISOR_REJECTED),
        (ApprovalStatus.SUPERVISOR_APPROVED, ApprovalStage.RRHH, True, ApprovalStatus.RRHH_APPROVED),
        (ApprovalStatus.SUPERVISOR_APPROVED, ApprovalStage.RRHH, False, ApprovalStatus.RRHH_REJECTED),
    ],
)
def test_legal_transitions(
    current: ApprovalStatus, stage: ApprovalStage, approved: bool, expected: ApprovalStatus
) -> None:
    assert next_status(current, stage, approved) is expected


@pytest.mark.parametrize(
    ("current", "stage"),
    [
        (ApprovalStatus.PENDING, ApprovalStage.RRHH),
        (ApprovalStatus.SUPERVISOR_APPROVED, ApprovalStage.SUPERVISOR),
        (ApprovalStatus.SUPERVISOR_REJECTED, ApprovalStage.SUPERVISOR),
        (ApprovalStatus.SUPERVISOR_REJECTED, ApprovalStage.RRHH),
        (ApprovalStatus.RRHH_APPROVED, ApprovalStage.RRHH),
        (ApprovalStatus.RRHH_REJECTED, ApprovalStage.SUPERVISOR),
    ],
)
def test_illegal_transitions(current: ApprovalStatus, stage: ApprovalStage) -> None:
    with pytest.raises(InvalidTransitionError) as exc_info:
        next_status(current, stage, True)
    assert exc_info.value.status_code == 409
    assert exc_info.value.context["current_status"] == current.value


def test_terminal_statuses_accept_no_decision() -> None:
    for status in TERMINAL_STATUSES:
        for stage in ApprovalStage:
            with pytest.raises(InvalidTransitionError):
                next_status(status, stage, True)


# ---------------------------------------------------------------------------
# Decisions
# ---------------------------------------------------------------------------


def test_supervisor_approval_change() -> None:
    record = _record()
    change = submit_supervisor_decision(record, True, "SUP-1", "ok", decided_at=DECIDED_AT)
    assert change.from_status is ApprovalStatus.PENDING
    assert change.to_status is ApprovalStatus.SUPERVISOR_APPROVED
    assert change.values() == {
        "status": "SUPERVISOR_APPROVED",
        "version": 2,
        "supervisor_approved": True,
        "supervisor_code": "SUP-1",
        "supervisor_comment": "ok",
        "supervisor_decided_at": DECIDED_AT,
    }


def test_decision_does_not_touch_record() -> None:
    record = _record()
    submit_supervisor_decision(record, True)
    assert record.status == ApprovalStatus.PENDING
    assert record.version == 1
    assert record.supervisor_approved is None


def test_rrhh_decision_before_supervisor_rejected() -> None:
    record = _record()
    with pytest.raises(InvalidTransitionError) as exc_info:
        submit_rrhh_decision(record, True)
    assert exc_info.value.context["employee_id"] == str(record.employee_id)
    assert exc_info.value.context["work_date"] == "2025-03-03"
    assert exc_info.value.context["attempted"] == "RRHH"


def test_full_approval_path() -> None:
    record = _supervisor_approved()
    assert record.status == ApprovalStatus.SUPERVISOR_APPROVED
    assert record.version == 2

    apply_change(record, submit_rrhh_decision(record, True, "HR-7", "fine", decided_at=DECIDED_AT))
    assert record.status == ApprovalStatus.RRHH_APPROVED
    assert record.rrhh_approved is True
    assert record.rrhh_code == "HR-7"
    assert record.rrhh_comment == "fine"
    assert record.version == 3
    assert record.supervisor_approved is True


def test_rrhh_rejection_is_terminal() -> None:
    record = _supervisor_approved()
    apply_change(record, submit_rrhh_decision(record, False, comment="missing badge scan"))
    assert record.status == ApprovalStatus.RRHH_REJECTED
    assert record.rrhh_approved is False
    with pytest.raises(InvalidTransitionError):
        submit_rrhh_decision(record, True)


def test_supervisor_rejection_is_terminal() -> None:
    record = _record()
    apply_change(record, submit_supervisor_decision(record, False, "SUP-1"))
    assert record.status == ApprovalStatus.SUPERVISOR_REJECTED
    assert record.supervisor_approved is False
    with pytest.raises(InvalidTransitionError):
        submit_supervisor_decision(record, True)
    with pytest.raises(InvalidTransitionError):
        submit_rrhh_decision(record, True)


def test_rrhh_approval_requires_supervisor_flag() -> None:
    record = _record(status=ApprovalStatus.SUPERVISOR_APPROVED)
    with pytest.raises(InvalidTransitionError, match="requires a supervisor approval"):
        submit_rrhh_decision(record, True)


def test_decided_at_defaults_to_now() -> None:
    change = submit_supervisor_decision(_record(), True)
    assert change.decided_at.tzinfo is not None


# ---------------------------------------------------------------------------
# apply_change
# ---------------------------------------------------------------------------


def test_apply_change_refuses_stale_version() -> None:
    record = _record()
    change = submit_supervisor_decision(record, True)
    record.version = 2
    with pytest.raises(ConcurrentModificationError) as exc_info:
        apply_change(record, change)
    assert exc_info.value.context["expected_version"] == 1
    assert exc_info.value.context["actual_version"] == 2
    assert record.status == ApprovalStatus.PENDING


def test_second_of_two_racing_decisions_loses() -> None:
    record = _record()
    first = submit_supervisor_decision(record, True, "SUP-1")
    second = submit_supervisor_decision(record, False, "SUP-2")
    apply_change(record, first)
    with pytest.raises(ConcurrentModificationError):
        apply_change(record, second)
    assert record.status == ApprovalStatus.SUPERVISOR_APPROVED
    assert record.supervisor_code == "SUP-1"


# ---------------------------------------------------------------------------
# can_recompute
# ---------------------------------------------------------------------------


def test_can_recompute_only_before_sign_off() -> None:
    record = _record()
    assert can_recompute(record)
    apply_change(record, submit_supervisor_decision(record, False))
    assert not can_recompute(record)
