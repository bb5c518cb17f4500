from __future__ import annotations

import os

# Tests run against in-memory SQLite unless DATABASE_URL points elsewhere.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from typing import TYPE_CHECKING, Any  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from timesheet.config import get_settings  # noqa: E402
from timesheet.db import get_session  # noqa: E402
from timesheet.domain.policies import default_catalog, set_policy_catalog  # noqa: E402
from timesheet.main import app  # noqa: E402
from timesheet.models import SQLModel  # noqa: E402

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator

    from sqlalchemy.ext.asyncio import AsyncEngine


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Create a fresh schema per test and drop it afterwards.

    A single shared connection keeps an in-memory SQLite database alive for
    the life of the engine.
    """
    url = get_settings().database_url
    kwargs: dict[str, Any] = {"poolclass": StaticPool} if url.startswith("sqlite") else {}
    _engine = create_async_engine(url, **kwargs)
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield _engine
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await _engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Yield a database session bound to the per-test engine."""
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncIterator[AsyncClient]:
    """Async HTTP client with the database session dependency overridden."""

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_session] = _override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def _reset_policy_catalog() -> Iterator[None]:
    """Tests that swap the catalog must not leak it into other tests."""
    yield
    set_policy_catalog(default_catalog())
