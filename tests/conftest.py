"""
Test configuration and shared fixtures.
Each test gets its own in-memory SQLite database; every request runs in
its own session and commits, like the real get_db.
"""
from __future__ import annotations

import os

# Settings are read at import time.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from collections.abc import AsyncGenerator, Awaitable, Callable  # noqa: E402
from typing import Any  # noqa: E402

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

import teamhub.models  # noqa: E402,F401
from teamhub.db.base import Base  # noqa: E402
from teamhub.db.session import get_db  # noqa: E402
from teamhub.main import app  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

API = "/api/v1"
PASSWORD = "TestPass1"


# ── Database ──────────────────────────────────────────────────────────────────

@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """A session for tests that talk to the data layer directly."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against the app with the test database injected."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# ── Helper fixtures ───────────────────────────────────────────────────────────

@pytest_asyncio.fixture
async def register(client: AsyncClient) -> Callable[..., Awaitable[dict[str, Any]]]:
    """Factory registering a user through the API; returns the account payload."""

    async def _register(username: str, **extra: Any) -> dict[str, Any]:
        response = await client.post(
            f"{API}/auth/register",
            json={
                "email": f"{username}@example.com",
                "username": username,
                "password": PASSWORD,
                **extra,
            },
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest_asyncio.fixture
async def alice(register) -> dict[str, Any]:
    return await register("alice", first_name="Alice", last_name="Liddell")


@pytest_asyncio.fixture
async def bob(register) -> dict[str, Any]:
    return await register("bob")


def basic(username: str) -> tuple[str, str]:
    """httpx auth tuple for HTTP basic authentication."""
    return (username, PASSWORD)


@pytest_asyncio.fixture
async def project(client: AsyncClient, alice: dict) -> dict[str, Any]:
    """A project owned by alice."""
    response = await client.post(
        f"{API}/projects", json={"name": "Website Redesign"}, auth=basic("alice")
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest_asyncio.fixture
async def add_member(client: AsyncClient, project: dict):
    """Factory adding a user to alice's project with the given role."""

    async def _add(user: dict[str, Any], role: int) -> dict[str, Any]:
        response = await client.post(
            f"{API}/projects/{project['id']}/people",
            json={"user_id": user["id"], "role": role},
            auth=basic("alice"),
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _add


@pytest_asyncio.fixture
async def task_list(client: AsyncClient, project: dict) -> dict[str, Any]:
    response = await client.post(
        f"{API}/projects/{project['id']}/task_lists",
        json={"name": "Launch"},
        auth=basic("alice"),
    )
    assert response.status_code == 201, response.text
    return response.json()
