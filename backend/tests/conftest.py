"""
Centralized Test Configuration.
"""

import pytest
from datetime import timedelta
from types import SimpleNamespace
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from backend.app.main import app
from backend.app.db.session import get_db, Base
from backend.app.core.jwt import create_access_token
from backend.app.core.redis_client import get_redis
from backend.app.core.dependencies import get_payment_gateway
from backend.app.services.payment_gateway import StripePaymentGateway

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Event handler to enable foreign keys for SQLite
from sqlalchemy import event
from sqlalchemy.pool import Pool

@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

# Mock Redis for reliability in CI/CD
class MockRedis:
    def __init__(self):
        self.store = {}
        self._closed = False

    async def ping(self):
        if self._closed:
            return False
        return True

    async def get(self, key):
        if self._closed:
            return None
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        if self._closed:
            return False
        self.store[key] = value
        return True

    async def delete(self, key):
        if self._closed:
            return 0
        if key in self.store:
            del self.store[key]
            return 1
        return 0

    async def exists(self, key):
        if self._closed:
            return 0
        return 1 if key in self.store else 0

    async def flushdb(self):
        if not self._closed:
            self.store = {}

    async def aclose(self):
        self._closed = True
        self.store = {}


class FakeStripeGateway(StripePaymentGateway):
    """Real validation and error mapping, no network."""

    def __init__(self):
        super().__init__(api_key="sk_test_dummy")
        self.calls = []

    async def _create_intent(self, amount_in_cents: int):
        self.calls.append(amount_in_cents)
        return SimpleNamespace(client_secret=f"pi_test_{amount_in_cents}_secret")


# Redis Fixture (Session Scope)
@pytest.fixture(scope="session")
def redis_client_session():
    return MockRedis()


@pytest.fixture
def payment_gateway():
    return FakeStripeGateway()


@pytest.fixture(autouse=True)
def apply_overrides(redis_client_session, payment_gateway):
    """Point the app's collaborators at the test doubles."""

    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    async def override_get_redis():
        return redis_client_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = override_get_redis
    app.dependency_overrides[get_payment_gateway] = lambda: payment_gateway
    yield

    # Restore and clear
    app.dependency_overrides = {}

@pytest.fixture(autouse=True)
async def setup_database(redis_client_session):
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    await redis_client_session.flushdb()

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

@pytest.fixture
def session_factory():
    """Fresh sessions for reading back committed state."""
    return TestingSessionLocal


# Shared session for fixture data creation
@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


def make_token(email: str, uid: str = None, expires_delta: timedelta = None) -> str:
    """Token as the identity provider would issue it."""
    return create_access_token(
        {"sub": uid or f"uid-{email}", "email": email},
        expires_delta=expires_delta,
    )


def bearer(email: str) -> dict:
    return {"Authorization": f"Bearer {make_token(email)}"}


@pytest.fixture
def alice_headers():
    return bearer("alice@example.com")


@pytest.fixture
def bob_headers():
    return bearer("bob@example.com")


@pytest.fixture
async def admin_headers(db_session):
    """Admin user stored in the users table, with a token."""
    from backend.app.models.user import User
    from backend.app.models.enums import UserRole

    admin = User(email="admin@example.com", name="Admin", role=UserRole.ADMIN)
    db_session.add(admin)
    await db_session.commit()
    return bearer("admin@example.com")


@pytest.fixture
async def alice_parcel(client, alice_headers):
    """An unpaid parcel owned by alice, created through the API."""
    response = await client.post("/parcels", json={
        "title": "Birthday gift",
        "parcel_type": "non-document",
        "weight_kg": 2.5,
        "cost": 150.0,
        "sender_name": "Alice",
        "receiver_name": "Carol",
        "receiver_address": "12 Harbour Road",
        "tracking_id": "TRK-ALICE-001",
    }, headers=alice_headers)
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def headers_for():
    """Build Authorization headers for any email."""
    return bearer
