"""
Fixtures for the backend API tests.

Each test gets a fresh SQLite database file; the app's session dependency
is overridden to use it.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.db.base import Base
from app.db.session import get_async_session
from app.main import app
from app.models import Customer, User  # noqa: F401  (registers the tables)

AGENT_EMAIL = "agent@example.com"
AGENT_PASSWORD = "secret123"


@pytest.fixture
def database_url(tmp_path) -> str:
    path = tmp_path / "crm.db"
    engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(engine)
    engine.dispose()
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture
def client(database_url: str):
    engine = create_async_engine(database_url, poolclass=NullPool)
    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async def override_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_async_session] = override_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_client(client: TestClient) -> TestClient:
    """Client holding the session cookie of a freshly registered user."""
    response = client.post(
        "/auth/register",
        json={"email": AGENT_EMAIL, "password": AGENT_PASSWORD, "name": "Agent"},
    )
    assert response.status_code == 201
    return client


@pytest.fixture
def current_user_id(auth_client: TestClient) -> str:
    return auth_client.get("/auth/me").json()["data"]["id"]
