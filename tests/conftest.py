"""Pytest configuration and shared fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from evoting.connection import DatabaseService, MySQLManager
from evoting.core import security
from evoting.core.config import Settings
from evoting.core.security import create_access_token, hash_password
from evoting.database import STATUS_ACTIVE, User, init_db
from evoting.server import create_app


TEST_DATABASE_URL = "mysql://u:p@db:3306/votes"
TEST_SECRET = "test-secret-key-12345"
TEST_RECOVERY_KEY = "recovery-key-67890"


# ============================================================================
# Fake aiomysql pool
# ============================================================================

class FakeConnection:
    """Stands in for an aiomysql connection."""

    def __init__(self, ping_error=None):
        self.ping_error = ping_error
        self.pings = 0

    async def ping(self, reconnect=True):
        self.pings += 1
        if self.ping_error is not None:
            raise self.ping_error


class FakePool:
    """Records acquire/release/close calls like an aiomysql pool."""

    def __init__(self, ping_error=None, acquire_error=None):
        self.connection = FakeConnection(ping_error)
        self.acquire_error = acquire_error
        self.acquired = 0
        self.released = 0
        self.close_calls = 0
        self.wait_closed_calls = 0
        self.kwargs = {}

    async def acquire(self):
        if self.acquire_error is not None:
            raise self.acquire_error
        self.acquired += 1
        return self.connection

    async def release(self, connection):
        # Only counted once awaited, like aiomysql's wakeup task
        assert connection is self.connection
        self.released += 1

    def close(self):
        self.close_calls += 1

    async def wait_closed(self):
        self.wait_closed_calls += 1


def make_pool_factory(pool: FakePool):
    async def factory(**kwargs):
        pool.kwargs = kwargs
        return pool
    return factory


@pytest.fixture
def fake_pool():
    return FakePool()


@pytest.fixture
def mysql_manager(fake_pool):
    return MySQLManager(TEST_DATABASE_URL, pool_factory=make_pool_factory(fake_pool))


# ============================================================================
# Settings, database and app
# ============================================================================

@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """Cheap bcrypt rounds keep the suite fast."""
    monkeypatch.setattr(security, "BCRYPT_ROUNDS", 4)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        DATABASE_URL=TEST_DATABASE_URL,
        JWT_SECRET=TEST_SECRET,
        ADMIN_EMAIL="admin@example.com",
        ADMIN_PASSWORD="AdminPass123!",
        ADMIN_RECOVERY_KEY=TEST_RECOVERY_KEY,
    )


@pytest.fixture
async def engine():
    """In-memory SQLite engine shared by every session in a test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def database(engine, mysql_manager):
    service = DatabaseService(TEST_DATABASE_URL, engine=engine, mysql_manager=mysql_manager)
    await service.connect()
    yield service
    await service.disconnect()


@pytest.fixture
async def session(database):
    async with database.session_maker() as session:
        yield session


class RecordingSender:
    """OTP sender that keeps the last code per email."""

    def __init__(self):
        self.codes = {}

    async def send(self, email, code):
        self.codes[email] = code


@pytest.fixture
def otp_sender():
    return RecordingSender()


@pytest.fixture
def app(settings, database, otp_sender):
    return create_app(settings, database, otp_sender=otp_sender)


@pytest.fixture
async def client(app):
    """Create an async HTTP client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ============================================================================
# Test Utilities
# ============================================================================

@pytest.fixture
def make_user(database):
    """Factory that inserts a committed user."""
    async def _factory(
        email="voter@example.com",
        role="VOTER",
        status=STATUS_ACTIVE,
        password="Password123!",
        name="Test User",
    ) -> User:
        async with database.session() as session:
            user = User(
                email=email.lower(),
                password_hash=hash_password(password),
                name=name,
                role=role,
                status=status,
            )
            session.add(user)
            await session.flush()
            await session.refresh(user)
        return user
    return _factory


def auth_headers(user: User, secret: str = TEST_SECRET) -> dict:
    token = create_access_token(user.id, user.role, secret)
    return {"Authorization": f"Bearer {token}"}
