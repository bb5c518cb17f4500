from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from timesheet.api.health import router as health_router
from timesheet.api.router import api_router
from timesheet.config import configure_logging, get_settings
from timesheet.db import dispose_engine
from timesheet.domain.policies import get_policy_catalog
from timesheet.exceptions import setup_exception_handlers
from timesheet.middleware import setup_middleware

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager for startup and shutdown."""
    settings = get_settings()
    configure_logging(settings)
    catalog = get_policy_catalog()
    logger.info(
        "Starting %s v%s [%s] with shift policies: %s",
        settings.app_name,
        settings.app_version,
        settings.environment,
        ", ".join(catalog.codes()),
    )
    yield
    await dispose_engine()
    logger.info("Shutting down %s", settings.app_name)


def create_app() -> FastAPI:
    """Application factory."""
    settings = get_settings()

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.environment != "production" else None,
        redoc_url="/redoc" if settings.environment != "production" else None,
    )

    setup_middleware(application, settings)
    setup_exception_handlers(application)

    application.include_router(health_router)
    application.include_router(api_router)

    return application


app = create_app()
