from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from timesheet.db import get_session
from timesheet.domain.policies import PolicyCatalog, set_policy_catalog
from timesheet.main import app

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


async def test_health_ok(async_client: AsyncClient) -> None:
    response = await async_client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data == {"status": "ok", "version": "0.1.0", "environment": "development", "policies": 8}


async def test_health_echoes_request_id(async_client: AsyncClient) -> None:
    response = await async_client.get("/health", headers={"X-Request-Id": "abc123"})
    assert response.headers["X-Request-Id"] == "abc123"

    generated = await async_client.get("/health")
    assert generated.headers["X-Request-Id"]


async def test_health_error_with_empty_catalog(async_client: AsyncClient) -> None:
    set_policy_catalog(PolicyCatalog())
    response = await async_client.get("/health")
    assert response.json()["status"] == "error"
    assert response.json()["policies"] == 0


async def test_health_degraded_on_db_failure() -> None:
    """GET /health reports degraded when the database probe fails."""
    mock_session = AsyncMock(spec=AsyncSession)
    mock_session.execute.side_effect = ConnectionError("DB unreachable")

    async def _broken_session() -> AsyncIterator[AsyncSession]:
        yield mock_session

    app.dependency_overrides[get_session] = _broken_session
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
    finally:
        app.dependency_overrides.clear()
