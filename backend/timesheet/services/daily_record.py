# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from timesheet.domain import workflow
from timesheet.domain.calculator import ClockEvents, HoursComputation, compute
from timesheet.domain.policies import PolicyCatalog, get_policy_catalog
from timesheet.exceptions import AppError, ConcurrentModificationError, InvalidTransitionError, UnknownPolicyError
from timesheet.models.daily_record import DailyRecord
from timesheet.models.enums import ApprovalStage, ApprovalStatus, AuditAction, AuditEntityType
from timesheet.schemas.daily_record import ApprovalResponse, DailyRecordListResponse, DailyRecordResponse
from timesheet.services.assignment import resolve_policy_code
from timesheet.services.audit import model_to_audit_dict, write_audit_log
from timesheet.services.holiday import is_holiday

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from timesheet.schemas.auth import AuthContext
    from timesheet.schemas.daily_record import (
        RrhhDecisionPayload,
        SubmitRecordPayload,
        SupervisorDecisionPayload,
    )

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_record_response(record: DailyRecord) -> DailyRecordResponse:
    """Map a daily record model to its response schema."""
    status = ApprovalStatus(record.status)
    return DailyRecordResponse(
        id=record.id,
        company_id=record.company_id,
        employee_id=record.employee_id,
        work_date=record.work_date,
        policy_code=record.policy_code,
        is_holiday=record.is_holiday,
        clock_in=record.clock_in,
        clock_out=record.clock_out,
        employee_comment=record.employee_comment,
        normal_hours=record.normal_hours,
        overtime_hours=record.overtime_hours,
        unpaid_break_minutes=record.unpaid_break_minutes,
        continuous_shift=record.continuous_shift,
        overtime_multiplier=record.overtime_multiplier,
        status=status,
        final=status in workflow.TERMINAL_STATUSES,
        supervisor_approval=ApprovalResponse(
            approved=record.supervisor_approved,
            approver_code=record.supervisor_code,
            comment=record.supervisor_comment,
            decided_at=record.supervisor_decided_at,
        ),
        rrhh_approval=ApprovalResponse(
            approved=record.rrhh_approved,
            approver_code=record.rrhh_code,
            comment=record.rrhh_comment,
            decided_at=record.rrhh_decided_at,
        ),
        version=record.version,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def _computed_values(computation: HoursComputation) -> dict[str, Any]:
    return {
        "normal_hours": computation.normal_hours,
        "overtime_hours": computation.overtime_hours,
        "unpaid_break_minutes": computation.unpaid_break_minutes,
        "continuous_shift": computation.continuous_shift,
        "overtime_multiplier": computation.overtime_multiplier,
        "is_holiday": computation.is_holiday,
        "policy_code": computation.policy_code,
    }


async def _get_record_or_404(
    session: AsyncSession,
    company_id: uuid.UUID,
    record_id: uuid.UUID,
) -> DailyRecord:
    """Fetch a record by ID scoped to company. Raises 404 if not found."""
    result = await session.execute(
        select(DailyRecord).where(
            col(DailyRecord.id) == record_id,
            col(DailyRecord.company_id) == company_id,
        )
    )
    record = result.scalar_one_or_none()
    if record is None:
        raise AppError("Daily record not found", status_code=404, context={"record_id": record_id})
    return record


async def _find_record(
    session: AsyncSession,
    company_id: uuid.UUID,
    employee_id: uuid.UUID,
    work_date: date,
) -> DailyRecord | None:
    result = await session.execute(
        select(DailyRecord).where(
            col(DailyRecord.company_id) == company_id,
            col(DailyRecord.employee_id) == employee_id,
            col(DailyRecord.work_date) == work_date,
        )
    )
    return result.scalar_one_or_none()


def _check_expected_version(record: DailyRecord, expected_version: int | None) -> None:
    if expected_version is not None and expected_version != record.version:
        raise ConcurrentModificationError(
            "Daily record was modified by another request",
            employee_id=record.employee_id,
            work_date=record.work_date,
            expected_version=expected_version,
            actual_version=record.version,
        )


async def _compare_and_swap(
    session: AsyncSession,
    record: DailyRecord,
    *,
    from_version: int,
    from_status: ApprovalStatus,
    values: dict[str, Any],
    attempted: str,
    require_unapproved: bool = False,
) -> None:
    """Write ``values`` only if the row still holds the observed version and status.

    Zero matched rows means another writer got there first: the transaction is
    rolled back and ConcurrentModificationError raised.
    """
    record_id, employee_id, work_date = record.id, record.employee_id, record.work_date
    stmt = update(DailyRecord).where(
        col(DailyRecord.id) == record_id,
        col(DailyRecord.version) == from_version,
        col(DailyRecord.status) == from_status.value,
    )
    if require_unapproved:
        stmt = stmt.where(
            col(DailyRecord.supervisor_approved).is_(None),
            col(DailyRecord.rrhh_approved).is_(None),
        )
    result = await session.execute(
        stmt.values(**values).execution_options(synchronize_session=False),
    )
    if result.rowcount != 1:
        await session.rollback()
        logger.warning(
            "Concurrent modification of daily record %s (employee=%s date=%s) during %s",
            record_id,
            employee_id,
            work_date,
            attempted,
        )
        raise ConcurrentModificationError(
            "Daily record was modified by another request",
            employee_id=employee_id,
            work_date=work_date,
            expected_version=from_version,
            expected_status=from_status.value,
            attempted=attempted,
        )


async def _commit_and_respond(session: AsyncSession, record: DailyRecord) -> DailyRecordResponse:
    await session.commit()
    await session.refresh(record)
    return _build_record_response(record)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def compute_record(
    session: AsyncSession,
    auth: AuthContext,
    payload: SubmitRecordPayload,
    catalog: PolicyCatalog | None = None,
) -> DailyRecordResponse:
    """Compute, or recompute, the daily record for an employee and date.

    Flow:
    1. Resolve the employee's shift policy for the date.
    2. Ask the holiday calendar about the date.
    3. Run the calculator on the clock events.
    4. Insert the record, or overwrite its hours while nobody has signed off.
    5. Audit log and commit.
    """
    if auth.user_id != payload.employee_id and not auth.has_role("supervisor", "rrhh"):
        raise AppError("Not authorized to submit hours for this employee", status_code=403)

    catalog = catalog or get_policy_catalog()
    policy_code = await resolve_policy_code(session, auth.company_id, payload.employee_id, payload.work_date)
    try:
        policy = catalog.resolve(policy_code)
    except UnknownPolicyError as exc:
        exc.context.update(employee_id=str(payload.employee_id), work_date=payload.work_date.isoformat())
        raise

    holiday = await is_holiday(session, auth.company_id, payload.work_date)
    events = ClockEvents(
        clock_in=payload.clock_in,
        clock_out=payload.clock_out,
        continuous_shift=payload.continuous_shift,
    )
    computation = compute(policy, payload.work_date, holiday, events, employee_id=payload.employee_id)

    record = await _find_record(session, auth.company_id, payload.employee_id, payload.work_date)

    if record is None:
        if not events.complete:
            raise AppError(
                "clock_in and clock_out are both required to create a daily record",
                status_code=400,
                context={"employee_id": payload.employee_id, "work_date": payload.work_date},
            )
        record = DailyRecord(
            company_id=auth.company_id,
            employee_id=payload.employee_id,
            work_date=payload.work_date,
            clock_in=payload.clock_in,
            clock_out=payload.clock_out,
            employee_comment=payload.comment,
            **_computed_values(computation),
        )
        session.add(record)
        try:
            await session.flush()
        except IntegrityError:
            await session.rollback()
            raise ConcurrentModificationError(
                "Daily record was created by another request",
                employee_id=payload.employee_id,
                work_date=payload.work_date,
                attempted="CREATE",
            ) from None
        await write_audit_log(
            session,
            auth,
            entity_type=AuditEntityType.DAILY_RECORD,
            entity_id=record.id,
            action=AuditAction.CREATE,
            after_json=model_to_audit_dict(record),
        )
    else:
        _check_expected_version(record, payload.expected_version)
        if not workflow.can_recompute(record):
            raise InvalidTransitionError(
                "Daily record already has an approval decision and cannot be recomputed",
                employee_id=record.employee_id,
                work_date=record.work_date,
                current_status=record.status,
                attempted="RECOMPUTE",
            )
        before_dict = model_to_audit_dict(record)
        await _compare_and_swap(
            session,
            record,
            from_version=record.version,
            from_status=ApprovalStatus(record.status),
            values={
                **_computed_values(computation),
                "clock_in": payload.clock_in,
                "clock_out": payload.clock_out,
                "employee_comment": payload.comment,
                "version": record.version + 1,
            },
            attempted="RECOMPUTE",
            require_unapproved=True,
        )
        await session.refresh(record)
        await write_audit_log(
            session,
            auth,
            entity_type=AuditEntityType.DAILY_RECORD,
            entity_id=record.id,
            action=AuditAction.UPDATE,
            before_json=before_dict,
            after_json=model_to_audit_dict(record),
        )

    logger.info(
        "Daily record employee=%s date=%s policy=%s holiday=%s normal=%s overtime=%s break=%dmin",
        payload.employee_id,
        payload.work_date,
        policy.code,
        holiday,
        computation.normal_hours,
        computation.overtime_hours,
        computation.unpaid_break_minutes,
    )
    return await _commit_and_respond(session, record)


async def _submit_decision(
    session: AsyncSession,
    auth: AuthContext,
    record_id: uuid.UUID,
    stage: ApprovalStage,
    payload: SupervisorDecisionPayload | RrhhDecisionPayload,
) -> DailyRecordResponse:
    """Apply one approval decision.

    1. Fetch the record and check the caller's expected version.
    2. Validate the transition against the current status.
    3. Compare-and-swap the approval fields, status and version.
    4. Audit log and commit.
    """
    record = await _get_record_or_404(session, auth.company_id, record_id)
    _check_expected_version(record, payload.expected_version)

    decide = (
        workflow.submit_supervisor_decision if stage is ApprovalStage.SUPERVISOR else workflow.submit_rrhh_decision
    )
    change = decide(record, payload.approved, payload.approver_code, payload.comment)

    before_dict = model_to_audit_dict(record)
    await _compare_and_swap(
        session,
        record,
        from_version=change.from_version,
        from_status=change.from_status,
        values=change.values(),
        attempted=stage.value,
    )
    await session.refresh(record)

    await write_audit_log(
        session,
        auth,
        entity_type=AuditEntityType.DAILY_RECORD,
        entity_id=record.id,
        action=AuditAction.APPROVE if change.approved else AuditAction.REJECT,
        before_json=before_dict,
        after_json=model_to_audit_dict(record),
        note=stage.value,
    )

    logger.info(
        "%s decision on daily record %s (employee=%s date=%s): %s -> %s",
        stage.value,
        record.id,
        record.employee_id,
        record.work_date,
        change.from_status.value,
        change.to_status.value,
    )
    return await _commit_and_respond(session, record)


async def submit_supervisor_decision(
    session: AsyncSession,
    auth: AuthContext,
    record_id: uuid.UUID,
    payload: SupervisorDecisionPayload,
) -> DailyRecordResponse:
    """Supervisor approves or rejects a pending record."""
    if not auth.has_role("supervisor"):
        raise AppError("Supervisor access required", status_code=403)
    return await _submit_decision(session, auth, record_id, ApprovalStage.SUPERVISOR, payload)


async def submit_rrhh_decision(
    session: AsyncSession,
    auth: AuthContext,
    record_id: uuid.UUID,
    payload: RrhhDecisionPayload,
) -> DailyRecordResponse:
    """HR approves or rejects a supervisor-approved record."""
    if not auth.has_role("rrhh"):
        raise AppError("RRHH access required", status_code=403)
    return await _submit_decision(session, auth, record_id, ApprovalStage.RRHH, payload)


async def get_record(
    session: AsyncSession,
    auth: AuthContext,
    record_id: uuid.UUID,
) -> DailyRecordResponse:
    """Get a single record; employees only see their own."""
    record = await _get_record_or_404(session, auth.company_id, record_id)
    if auth.role == "employee" and record.employee_id != auth.user_id:
        raise AppError("Not authorized to view this record", status_code=403)
    return _build_record_response(record)


async def list_records(
    session: AsyncSession,
    auth: AuthContext,
    employee_id: uuid.UUID | None = None,
    status_filter: ApprovalStatus | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    offset: int = 0,
    limit: int = 50,
) -> DailyRecordListResponse:
    """List records with optional filters, ordered by work_date DESC."""
    if auth.role == "employee":
        employee_id = auth.user_id

    filters = [col(DailyRecord.company_id) == auth.company_id]
    if employee_id is not None:
        filters.append(col(DailyRecord.employee_id) == employee_id)
    if status_filter is not None:
        filters.append(col(DailyRecord.status) == status_filter.value)
    if date_from is not None:
        filters.append(col(DailyRecord.work_date) >= date_from)
    if date_to is not None:
        filters.append(col(DailyRecord.work_date) <= date_to)

    count_result = await session.execute(select(func.count()).select_from(DailyRecord).where(*filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(DailyRecord)
        .where(*filters)
        .order_by(col(DailyRecord.work_date).desc(), col(DailyRecord.employee_id))
        .offset(offset)
        .limit(limit)
    )
    records = list(result.scalars().all())

    return DailyRecordListResponse(
        items=[_build_record_response(r) for r in records],
        total=total,
    )
