from __future__ import annotations

import uuid
from datetime import date, datetime, time
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from timesheet.models.audit import AuditLog

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlmodel import SQLModel

    from timesheet.models.enums import AuditAction, AuditEntityType
    from timesheet.schemas.auth import AuthContext


def model_to_audit_dict(model: SQLModel) -> dict[str, Any]:
    """Serialize a SQLModel instance to a JSON-safe dict for audit logging."""
    data: dict[str, Any] = {}
    for key, value in model.model_dump().items():
        if isinstance(value, uuid.UUID):
            data[key] = str(value)
        elif isinstance(value, (datetime, date, time)):
            data[key] = value.isoformat()
        elif isinstance(value, Decimal):
            data[key] = str(value)
        else:
            data[key] = value
    return data


async def write_audit_log(
    session: AsyncSession,
    auth: AuthContext,
    *,
    entity_type: AuditEntityType,
    entity_id: uuid.UUID,
    action: AuditAction,
    before_json: dict[str, Any] | None = None,
    after_json: dict[str, Any] | None = None,
    note: str | None = None,
) -> AuditLog:
    """Add an audit entry to the caller's transaction."""
    entry = AuditLog(
        company_id=auth.company_id,
        actor_id=auth.user_id,
        entity_type=entity_type.value,
        entity_id=entity_id,
        action=action.value,
        note=note,
        before_json=before_json,
        after_json=after_json,
    )
    session.add(entry)
    return entry
