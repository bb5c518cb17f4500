"""Unit tests for request payload validation."""

from __future__ import annotations

import uuid
from datetime import date, datetime

import pytest
from pydantic import ValidationError

from timesheet.schemas.assignment import CreateAssignmentRequest
from timesheet.schemas.auth import AuthContext
from timesheet.schemas.daily_record import RrhhDecisionPayload, SubmitRecordPayload, SupervisorDecisionPayload

EMPLOYEE_ID = uuid.uuid4()

# ---------------------------------------------------------------------------
# SubmitRecordPayload
# ---------------------------------------------------------------------------


def test_submit_payload_clock_events_optional() -> None:
    payload = SubmitRecordPayload(employee_id=EMPLOYEE_ID, work_date=date(2025, 3, 3))
    assert payload.clock_in is None
    assert payload.clock_out is None
    assert payload.expected_version is None
    assert payload.continuous_shift is False


def test_submit_payload_legacy_names() -> None:
    payload = SubmitRecordPayload.model_validate(
        {
            "employee_id": str(EMPLOYEE_ID),
            "work_date": "2025-03-03",
            "horaEntrada": "2025-03-03T07:00:00",
            "horaSalida": "2025-03-03T17:00:00",
            "comentarioEmpleado": "late bus",
            "esHoraCorrida": True,
        }
    )
    assert payload.clock_in == datetime(2025, 3, 3, 7, 0)
    assert payload.clock_out == datetime(2025, 3, 3, 17, 0)
    assert payload.comment == "late bus"
    assert payload.continuous_shift is True


def test_submit_payload_rejects_version_zero() -> None:
    with pytest.raises(ValidationError):
        SubmitRecordPayload(employee_id=EMPLOYEE_ID, work_date=date(2025, 3, 3), expected_version=0)


# ---------------------------------------------------------------------------
# Decision payloads
# ---------------------------------------------------------------------------


def test_supervisor_payload_legacy_names() -> None:
    payload = SupervisorDecisionPayload.model_validate(
        {"aprobacionSupervisor": False, "codigoSupervisor": "SUP-3", "comentarioSupervisor": "wrong site"}
    )
    assert payload.approved is False
    assert payload.approver_code == "SUP-3"
    assert payload.comment == "wrong site"


def test_rrhh_payload_legacy_names() -> None:
    payload = RrhhDecisionPayload.model_validate({"aprobacionRrhh": True, "codigoRrhh": "HR-2"})
    assert payload.approved is True
    assert payload.approver_code == "HR-2"
    assert payload.comment is None


def test_decision_requires_approved_flag() -> None:
    with pytest.raises(ValidationError):
        SupervisorDecisionPayload.model_validate({"comment": "no verdict"})


# ---------------------------------------------------------------------------
# CreateAssignmentRequest and AuthContext
# ---------------------------------------------------------------------------


def test_assignment_dates_must_be_ordered() -> None:
    with pytest.raises(ValidationError, match="effective_to must be after effective_from"):
        CreateAssignmentRequest(
            employee_id=EMPLOYEE_ID,
            policy_code="H4",
            effective_from=date(2025, 3, 1),
            effective_to=date(2025, 3, 1),
        )


def test_admin_passes_every_role_check() -> None:
    admin = AuthContext(company_id=uuid.uuid4(), user_id=uuid.uuid4(), role="admin")
    supervisor = AuthContext(company_id=uuid.uuid4(), user_id=uuid.uuid4(), role="supervisor")
    assert admin.has_role("rrhh")
    assert supervisor.has_role("supervisor", "rrhh")
    assert not supervisor.has_role("rrhh")


def test_unknown_role_rejected() -> None:
    with pytest.raises(ValidationError):
        AuthContext(company_id=uuid.uuid4(), user_id=uuid.uuid4(), role="owner")  # type: ignore[arg-type]
