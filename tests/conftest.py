"""Pytest configuration and fixtures."""

import os
from datetime import datetime
from typing import Optional

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

# Set test environment variables before imports
os.environ["DATABASE_PATH"] = ":memory:"
os.environ["PUBLIC_URL"] = "http://localhost:8080"
os.environ["SESSION_SECRET_KEY"] = "test-session-secret"


class MemorySessionStore:
    """Dict-backed session store for route tests."""

    def __init__(self):
        self.sessions: dict[str, dict] = {}

    async def get(self, sid: str) -> Optional[dict]:
        data = self.sessions.get(sid)
        return dict(data) if data is not None else None

    async def set(self, sid: str, data: dict, expires_at: datetime) -> None:
        self.sessions[sid] = dict(data)

    async def destroy(self, sid: str) -> None:
        self.sessions.pop(sid, None)


@pytest_asyncio.fixture
async def test_db():
    """Create a test database."""
    from sessionauth.database import get_database, close_database, init_schema
    import sessionauth.database as db_module

    # Reset the global connection
    db_module._db_connection = None

    # Create in-memory database
    db = await get_database()
    await init_schema(db)

    yield db

    await close_database()
    db_module._db_connection = None


@pytest.fixture
def client():
    """Create a test client for the FastAPI app."""
    from sessionauth.main import app

    with TestClient(app) as c:
        yield c


@pytest_asyncio.fixture
async def async_client(test_db):
    """Create an async test client bound to the test database."""
    from sessionauth.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def memory_sessions():
    """Replace the session store with an in-memory one."""
    from sessionauth.auth.session import get_session_store
    from sessionauth.main import app

    store = MemorySessionStore()
    app.dependency_overrides[get_session_store] = lambda: store

    yield store

    app.dependency_overrides.pop(get_session_store, None)
