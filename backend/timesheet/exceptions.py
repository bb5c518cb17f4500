from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: str
    detail: str | None = None
    status_code: int
    context: dict[str, Any] | None = None


def _jsonable(value: object) -> object:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    return str(value)


class AppError(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.context = {key: _jsonable(value) for key, value in (context or {}).items()}
        super().__init__(self.message)


class UnknownPolicyError(AppError):
    """No shift policy is registered under the requested code."""

    def __init__(self, policy_code: str, **context: Any) -> None:
        self.policy_code = policy_code
        super().__init__(
            f"Unknown shift policy: {policy_code}",
            status_code=status.HTTP_404_NOT_FOUND,
            context={"policy_code": policy_code, **context},
        )


class InvalidClockEventsError(AppError):
    """Clock events are out of order or mix naive and timezone-aware timestamps."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, context=context)


class InvalidTransitionError(AppError):
    """An approval decision was submitted out of order or on a closed record."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message, status_code=status.HTTP_409_CONFLICT, context=context)


class ConcurrentModificationError(AppError):
    """The record changed between read and write."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message, status_code=status.HTTP_409_CONFLICT, context=context)


async def _app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code == status.HTTP_409_CONFLICT:
        logger.warning("%s on %s %s: %s %s", type(exc).__name__, request.method, request.url.path, exc.message, exc.context)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=type(exc).__name__,
            detail=exc.message,
            status_code=exc.status_code,
            context=exc.context or None,
        ).model_dump(),
    )


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error="ValidationError",
            detail=str(exc.errors()),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        ).model_dump(),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the application."""
    app.add_exception_handler(AppError, _app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
