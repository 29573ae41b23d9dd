"""
Habit Tracker Backend — Test Configuration (conftest.py)
==========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment is pointed at a throw-away SQLite file BEFORE any
       habit_tracker import, so the module-level engine binds to it.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session:   AsyncMock session for service unit tests
    ├── db_tables:         create_all / drop_all around a test
    ├── db_session:        real AsyncSession on the SQLite test database
    ├── test_client:       HTTPX AsyncClient against a fresh create_app()
    ├── register_account:  coroutine registering + logging in any account
    └── registered_account: John Doe registered + bearer token headers
"""

import os
import tempfile
from unittest.mock import AsyncMock, MagicMock

_test_dir = tempfile.mkdtemp(prefix="habit_tracker_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_test_dir, 'test.db')}"
os.environ["JWT_SECRET_KEY"] = "test-secret-not-for-production"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

import habit_tracker.models  # noqa: E402,F401
from habit_tracker.database import Base, async_session_factory, engine  # noqa: E402

JOHN = {"name": "John Doe", "email": "john@example.com", "password": "pw123"}


@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession.

    Services never touch it directly (repositories are mocked too), but it
    stands in for the session argument every service method takes.
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_tables():
    """Fresh schema for one test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session(db_tables):
    async with async_session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def test_client(db_tables):
    """
    HTTPX AsyncClient wired to a new application instance.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from habit_tracker.main import create_app

    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def register_and_login(client: AsyncClient, account: dict) -> dict:
    """Register `account`, log in, and return {"id", "headers"}."""
    registered = await client.post("/api/register", json=account)
    assert registered.status_code == 201, registered.text
    login = await client.post(
        "/api/login",
        json={"email": account["email"], "password": account["password"]},
    )
    assert login.status_code == 200, login.text
    token = login.json()["access_token"]
    return {
        "id": registered.json()["id"],
        "headers": {"Authorization": f"Bearer {token}"},
    }


@pytest.fixture
def register_account(test_client):
    """Registers + logs in another account: `await register_account(JANE)`."""
    async def register(account: dict) -> dict:
        return await register_and_login(test_client, account)
    return register


@pytest_asyncio.fixture
async def registered_account(test_client):
    return await register_and_login(test_client, JOHN)


@pytest.fixture
def habit_payload():
    """Builds a POST /api/habits body in the nested-owner wire format."""
    def build(owner_id: int, **overrides) -> dict:
        payload = {
            "title": "Drink Water",
            "startDate": "2026-01-05",
            "frequency": "Daily",
            "status": "Active",
            "user": {"id": owner_id},
        }
        payload.update(overrides)
        return payload
    return build
