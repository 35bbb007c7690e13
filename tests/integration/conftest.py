"""Integration-test fixtures.

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool and Redis pool (both created at import time)
remain valid across the entire test session.

Requires running PostgreSQL + Redis with migrations applied; modules skip
unless PF_INTEGRATION=1.
"""

import uuid

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.main import app


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client — keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="https://test") as ac:
        yield ac


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def auth_headers(client: AsyncClient) -> dict[str, str]:
    """Registers a fresh user and returns its Bearer header."""
    resp = await client.post("/api/v1/auth/register", json={
        "name": "Integration User",
        "email": f"it_{uuid.uuid4().hex[:8]}@example.com",
        "password": "TestPass123!",
    })
    client.cookies.clear()
    return {"Authorization": f"Bearer {resp.json()['data']['access_token']}"}
