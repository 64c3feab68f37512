"""Test fixtures — a fresh in-memory database per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own SQLite in-memory engine (aiosqlite, StaticPool so
   every session sees the same connection) with the schema created.
2. get_db is overridden to hand that session to every request.
3. get_clock is overridden with a FakeClock the test can move forward,
   which is how expiry is exercised without sleeping.

This gives us fast, isolated tests without a database server.
"""

import os

# Cheap bcrypt in tests; must be set before eventdesk.config is imported.
os.environ.setdefault("EVENTDESK_BCRYPT_ROUNDS", "4")

from datetime import datetime, timedelta, timezone

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from eventdesk.auth.dependencies import AuthContext, get_auth_context, get_clock
from eventdesk.auth.password import hash_password
from eventdesk.db.engine import get_db
from eventdesk.db.models import Base
from eventdesk.main import app
from eventdesk.services.credential_store import SqlCredentialStore

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

ALICE_PASSWORD = "alice-password-1"
BOB_PASSWORD = "bob-password-1"


class FakeClock:
    """Callable clock that only moves when a test says so."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


async def login(client: AsyncClient, username: str, password: str):
    return await client.post(
        "/api/login", json={"username": username, "password": password}
    )


@pytest_asyncio.fixture()
async def db_session():
    """Per-test session on a fresh in-memory schema."""
    engine = create_async_engine(
        TEST_DB_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session = AsyncSession(bind=engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()
        await engine.dispose()


@pytest_asyncio.fixture()
async def clock():
    return FakeClock(datetime.now(timezone.utc).replace(microsecond=0))


@pytest_asyncio.fixture()
async def store(db_session):
    return SqlCredentialStore(db_session)


@pytest_asyncio.fixture()
async def alice(store):
    return await store.create_user(
        username="alice",
        password_hash=hash_password(ALICE_PASSWORD),
        first_name="Alice",
        last_name="Archer",
        email="alice@example.com",
    )


@pytest_asyncio.fixture()
async def bob(store):
    return await store.create_user(
        username="bob",
        password_hash=hash_password(BOB_PASSWORD),
        first_name="Bob",
        last_name="Baker",
        email="bob@example.com",
    )


@pytest_asyncio.fixture()
async def unauthenticated_client(db_session, clock):
    """HTTP client with the real auth pipeline (sessions and API keys).

    Only get_db and get_clock are overridden. Tests log in with the
    login() helper or send X-API-Key headers themselves.
    """
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def client(unauthenticated_client, alice):
    """HTTP client authenticated as alice.

    Learn: We override get_auth_context to return alice's identity so CRUD
    tests don't need to log in first. Auth tests use unauthenticated_client.
    """
    user_id = alice.id
    app.dependency_overrides[get_auth_context] = lambda: AuthContext(
        user_id=user_id, auth_method="session"
    )
    yield unauthenticated_client
