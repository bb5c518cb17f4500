import logging
from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel
from sqlalchemy import text

from timesheet.api.deps import CatalogDep
from timesheet.config import get_settings
from timesheet.db import SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["ok", "degraded", "error"]
    version: str
    environment: str
    policies: int


@router.get("/health", response_model=HealthResponse)
async def health(session: SessionDep, catalog: CatalogDep) -> HealthResponse:
    """Report service status; a failed database probe degrades it."""
    settings = get_settings()
    status: Literal["ok", "degraded", "error"] = "ok"

    try:
        await session.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Health check: database connectivity failed")
        status = "degraded"

    if len(catalog) == 0:
        status = "error"

    return HealthResponse(
        status=status,
        version=settings.app_version,
        environment=settings.environment,
        policies=len(catalog),
    )
