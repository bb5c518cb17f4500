# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from datetime import date, timedelta
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from timesheet.domain.policies import get_policy_catalog
from timesheet.exceptions import AppError
from timesheet.models.assignment import ShiftPolicyAssignment
from timesheet.models.enums import AuditAction, AuditEntityType
from timesheet.schemas.assignment import AssignmentListResponse, AssignmentResponse
from timesheet.services.audit import model_to_audit_dict, write_audit_log

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from timesheet.schemas.assignment import CreateAssignmentRequest
    from timesheet.schemas.auth import AuthContext

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _to_response(assignment: ShiftPolicyAssignment) -> AssignmentResponse:
    return AssignmentResponse.model_validate(assignment, from_attributes=True)


def _for_employee(company_id: uuid.UUID, employee_id: uuid.UUID) -> list[Any]:
    return [
        col(ShiftPolicyAssignment.company_id) == company_id,
        col(ShiftPolicyAssignment.employee_id) == employee_id,
    ]


def _overlapping(start: date, end: date | None) -> list[Any]:
    """Assignments whose [effective_from, effective_to) meets [start, end)."""
    filters: list[Any] = [
        or_(
            col(ShiftPolicyAssignment.effective_to).is_(None),
            col(ShiftPolicyAssignment.effective_to) > start,
        )
    ]
    if end is not None:
        filters.append(col(ShiftPolicyAssignment.effective_from) < end)
    return filters


async def _get_assignment_or_404(
    session: AsyncSession,
    company_id: uuid.UUID,
    assignment_id: uuid.UUID,
) -> ShiftPolicyAssignment:
    assignment = await session.get(ShiftPolicyAssignment, assignment_id)
    if assignment is None or assignment.company_id != company_id:
        raise AppError("Assignment not found", status_code=404, context={"assignment_id": assignment_id})
    return assignment


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def create_assignment(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateAssignmentRequest,
) -> AssignmentResponse:
    """Put an employee on a shift policy from ``effective_from`` onwards.

    The code must be registered in the catalog, and an employee is on at
    most one policy on any date.
    """
    get_policy_catalog().resolve(payload.policy_code)

    clash = await session.execute(
        select(col(ShiftPolicyAssignment.policy_code))
        .where(
            *_for_employee(auth.company_id, payload.employee_id),
            *_overlapping(payload.effective_from, payload.effective_to),
        )
        .limit(1)
    )
    existing_code = clash.scalar_one_or_none()
    if existing_code is not None:
        raise AppError(
            "Employee already has a shift policy assignment in that period",
            status_code=409,
            context={
                "employee_id": payload.employee_id,
                "effective_from": payload.effective_from,
                "existing_policy_code": existing_code,
            },
        )

    assignment = ShiftPolicyAssignment(
        company_id=auth.company_id,
        employee_id=payload.employee_id,
        policy_code=payload.policy_code,
        effective_from=payload.effective_from,
        effective_to=payload.effective_to,
        created_by=auth.user_id,
    )
    session.add(assignment)
    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise AppError("Duplicate assignment", status_code=409) from None

    await write_audit_log(
        session,
        auth,
        entity_type=AuditEntityType.ASSIGNMENT,
        entity_id=assignment.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(assignment),
    )
    await session.commit()
    logger.info(
        "Employee %s assigned to shift policy %s from %s",
        assignment.employee_id,
        assignment.policy_code,
        assignment.effective_from,
    )
    return _to_response(assignment)


async def list_assignments_by_employee(
    session: AsyncSession,
    company_id: uuid.UUID,
    employee_id: uuid.UUID,
    offset: int = 0,
    limit: int = 50,
) -> AssignmentListResponse:
    """An employee's assignment history, most recent first."""
    filters = _for_employee(company_id, employee_id)
    total = (
        await session.execute(select(func.count()).select_from(ShiftPolicyAssignment).where(*filters))
    ).scalar_one()
    result = await session.execute(
        select(ShiftPolicyAssignment)
        .where(*filters)
        .order_by(col(ShiftPolicyAssignment.effective_from).desc())
        .offset(offset)
        .limit(limit)
    )
    return AssignmentListResponse(items=[_to_response(a) for a in result.scalars().all()], total=total)


async def end_date_assignment(
    session: AsyncSession,
    auth: AuthContext,
    assignment_id: uuid.UUID,
    effective_to: date,
) -> AssignmentResponse:
    """Close an open assignment; ``effective_to`` is the first day it no longer applies."""
    assignment = await _get_assignment_or_404(session, auth.company_id, assignment_id)
    if assignment.effective_to is not None:
        raise AppError(
            "Assignment is already end-dated",
            status_code=400,
            context={"effective_to": assignment.effective_to},
        )
    if effective_to <= assignment.effective_from:
        raise AppError("effective_to must be after effective_from", status_code=400)

    before = model_to_audit_dict(assignment)
    assignment.effective_to = effective_to
    await session.flush()

    await write_audit_log(
        session,
        auth,
        entity_type=AuditEntityType.ASSIGNMENT,
        entity_id=assignment.id,
        action=AuditAction.UPDATE,
        before_json=before,
        after_json=model_to_audit_dict(assignment),
    )
    await session.commit()
    return _to_response(assignment)


async def resolve_policy_code(
    session: AsyncSession,
    company_id: uuid.UUID,
    employee_id: uuid.UUID,
    at_date: date,
) -> str:
    """Return the policy code the employee is on for ``at_date``.

    Raises AppError(400) when the employee has no active assignment.
    """
    result = await session.execute(
        select(col(ShiftPolicyAssignment.policy_code))
        .where(
            *_for_employee(company_id, employee_id),
            *_overlapping(at_date, at_date + timedelta(days=1)),
        )
        .limit(1)
    )
    policy_code = result.scalar_one_or_none()
    if policy_code is None:
        raise AppError(
            "Employee has no shift policy assigned on the given date",
            status_code=400,
            context={"employee_id": employee_id, "work_date": at_date},
        )
    return policy_code
