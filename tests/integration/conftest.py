"""Integration-test fixtures.

Requires Docker (PostgreSQL + Redis) and `alembic upgrade head`.
All integration tests share one event loop and one application lifespan so
the engine pool and Redis client stay valid for the whole session.
"""

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text

from src.main import app, lifespan


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client running the real lifespan."""
    async with lifespan(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac


@pytest_asyncio.fixture(loop_scope="session")
async def clean_state(client: AsyncClient) -> AsyncClient:
    """Empty the items table and drop cached keys before a test."""
    async with app.state.engine.begin() as conn:
        await conn.execute(text("TRUNCATE items RESTART IDENTITY"))
    await app.state.item_cache.client.flushdb()
    return client
