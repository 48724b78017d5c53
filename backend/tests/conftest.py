from __future__ import annotations

import uuid
from datetime import date, timedelta
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from intranet.config import Settings, reset_settings
from intranet.db import create_tables, get_session
from intranet.main import app
from intranet.services.clock import local_today

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable, Iterator

    from sqlalchemy.ext.asyncio import AsyncEngine

ADMIN_ID = uuid.UUID("00000000-0000-0000-0000-00000000a001")
ADMIN_HEADERS = {"X-User-Id": str(ADMIN_ID), "X-Role": "admin"}


def user_headers(user_id: uuid.UUID) -> dict[str, str]:
    """Headers for a regular employee acting as themselves."""
    return {"X-User-Id": str(user_id), "X-Role": "user"}


def next_weekday(start: date, weekday: int = 0) -> date:
    """First date strictly after start falling on weekday (0 = Monday)."""
    days_ahead = (weekday - start.weekday()) % 7 or 7
    return start + timedelta(days=days_ahead)


@pytest.fixture(autouse=True)
def _default_settings() -> Iterator[Settings]:
    """Pin settings for every test so a local .env cannot leak in."""
    settings = Settings(_env_file=None, environment="development", timezone="Asia/Seoul", allowed_attendance_ips=[])  # type: ignore[call-arg]
    reset_settings(settings)
    yield settings
    reset_settings()


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Fresh in-memory SQLite database per test."""
    _engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_tables(_engine)
    yield _engine
    await _engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Yield a database session bound to the per-test database."""
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
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


@pytest.fixture
def today() -> date:
    return local_today()


@pytest.fixture
def create_employee(async_client: AsyncClient) -> Callable[..., Awaitable[uuid.UUID]]:
    """Factory that upserts an employee through the API and returns its ID."""

    async def _create(
        joined_at: date | None = None,
        display_name: str = "Test Employee",
        email: str | None = None,
        team: str | None = None,
        role: str = "user",
        employee_id: uuid.UUID | None = None,
    ) -> uuid.UUID:
        employee_id = employee_id or uuid.uuid4()
        resp = await async_client.put(
            f"/employees/{employee_id}",
            json={
                "email": email or f"{employee_id.hex[:12]}@example.com",
                "display_name": display_name,
                "role": role,
                "team": team,
                "joined_at": joined_at.isoformat() if joined_at else None,
            },
            headers=ADMIN_HEADERS,
        )
        assert resp.status_code == 200, resp.text
        return employee_id

    return _create
