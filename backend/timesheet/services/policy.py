from __future__ import annotations

from typing import TYPE_CHECKING

from timesheet.domain.calculator import to_hours
from timesheet.models.enums import DayClass
from timesheet.schemas.policy import ShiftPolicyListResponse, ShiftPolicyResponse, ShiftWindowResponse

if TYPE_CHECKING:
    from timesheet.domain.policies import PolicyCatalog, ShiftPolicy


def build_policy_response(policy: ShiftPolicy) -> ShiftPolicyResponse:
    """Render a policy with one window per day classification."""
    windows = []
    for day in DayClass:
        window = policy.windows[day]
        windows.append(
            ShiftWindowResponse(
                day=day,
                scheduled_start=window.scheduled_start,
                scheduled_end=window.scheduled_end,
                unpaid_break_minutes=window.unpaid_break_minutes,
                net_hours=to_hours(window.net_minutes),
                is_day_off=window.is_day_off,
            )
        )
    return ShiftPolicyResponse(
        code=policy.code,
        description=policy.description,
        overtime_multiplier=policy.overtime_multiplier,
        windows=windows,
    )


def list_policies(catalog: PolicyCatalog) -> ShiftPolicyListResponse:
    items = [build_policy_response(policy) for policy in catalog]
    return ShiftPolicyListResponse(items=items, total=len(items))


def get_policy(catalog: PolicyCatalog, code: str) -> ShiftPolicyResponse:
    return build_policy_response(catalog.resolve(code))
