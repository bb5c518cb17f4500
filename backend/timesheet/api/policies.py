# ruff: noqa: TC001
from __future__ import annotations

from fastapi import APIRouter

from timesheet.api.deps import CatalogDep
from timesheet.schemas.policy import ShiftPolicyListResponse, ShiftPolicyResponse
from timesheet.services import policy as policy_service

policies_router = APIRouter(prefix="/policies", tags=["policies"])


@policies_router.get("", response_model=ShiftPolicyListResponse)
async def list_policies(catalog: CatalogDep) -> ShiftPolicyListResponse:
    """List the registered shift policies."""
    return policy_service.list_policies(catalog)


@policies_router.get("/{code}", response_model=ShiftPolicyResponse)
async def get_policy(code: str, catalog: CatalogDep) -> ShiftPolicyResponse:
    """Get one shift policy with its window for every day classification."""
    return policy_service.get_policy(catalog, code)
