"""Test fixtures — fresh in-memory database per test, real auth pipeline.

Pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own SQLite engine (aiosqlite, StaticPool so every
   session shares the one in-memory connection) with the schema created.
2. get_db is overridden to hand out sessions from that engine.
3. Auth is NOT mocked: tests register organizations and use the tokens
   they get back, so tenant scoping is exercised end to end.
"""

import os
import uuid

# Cheap hashes for tests; must be set before taskhub.config is imported.
os.environ.setdefault("TASKHUB_BCRYPT_ROUNDS", "4")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from taskhub.db.engine import get_db
from taskhub.db.models import Base
from taskhub.main import app

PASSWORD = "password_123"


@pytest_asyncio.fixture()
async def db_engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def client(session_factory):
    """HTTP client with only get_db overridden."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def register(client):
    """Register a brand-new organization; returns the auth response + headers."""
    async def _register(org: str = "Acme", email: str = None, password: str = PASSWORD):
        email = email or f"admin-{uuid.uuid4().hex[:8]}@example.com"
        r = await client.post(
            "/api/v1/auth/register",
            json={
                "email": email,
                "password": password,
                "firstName": "Ada",
                "lastName": "Admin",
                "organizationName": org,
            },
        )
        assert r.status_code == 201, r.text
        data = r.json()
        data["headers"] = bearer(data["token"])
        return data

    return _register


@pytest.fixture()
def add_user(client):
    """Have an ADMIN add a user with the given role, then log that user in."""
    async def _add_user(admin: dict, role: str = "MEMBER", first_name: str = "Mo"):
        email = f"{role.lower()}-{uuid.uuid4().hex[:8]}@example.com"
        r = await client.post(
            "/api/v1/users",
            json={
                "email": email,
                "password": PASSWORD,
                "firstName": first_name,
                "lastName": "User",
                "role": role,
            },
            headers=admin["headers"],
        )
        assert r.status_code == 201, r.text
        r = await client.post(
            "/api/v1/auth/login", json={"email": email, "password": PASSWORD}
        )
        assert r.status_code == 200, r.text
        data = r.json()
        data["headers"] = bearer(data["token"])
        return data

    return _add_user
