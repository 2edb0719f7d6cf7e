"""Pytest configuration for all tests."""

from datetime import datetime, timedelta
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from authcore.core.config import Settings
from authcore.infrastructure.auth import PasswordHashingService, TokenCodec
from authcore.infrastructure.persistence import Base, SqlAlchemyUnitOfWork
from authcore.infrastructure.persistence import models  # noqa: F401
from authcore.infrastructure.persistence.repositories import (
    IdentityRepository,
    ResetTokenRepository,
    SessionTokenRepository,
)

ACCESS_SECRET = "test-access-secret-0123456789abcdef0123456789"
REFRESH_SECRET = "test-refresh-secret-0123456789abcdef012345678"


class RecordingNotifier:
    """Reset notifier that keeps every delivered token in memory."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, datetime]] = []

    async def send_reset_token(self, email: str, token: str, expires_at: datetime) -> None:
        self.sent.append((email, token, expires_at))

    @property
    def last_token(self) -> str:
        return self.sent[-1][1]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        environment="testing",
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_access_secret=ACCESS_SECRET,
        jwt_refresh_secret=REFRESH_SECRET,
        password_hash_time_cost=1,
        password_hash_memory_cost=1024,
        password_hash_parallelism=1,
    )


@pytest.fixture
def password_hasher() -> PasswordHashingService:
    """Hasher with minimal cost so tests stay fast."""
    return PasswordHashingService(time_cost=1, memory_cost=1024, parallelism=1)


@pytest.fixture
def token_codec() -> TokenCodec:
    return TokenCodec(
        access_secret=ACCESS_SECRET,
        refresh_secret=REFRESH_SECRET,
        access_ttl=timedelta(minutes=15),
        refresh_ttl=timedelta(days=7),
    )


@pytest.fixture
def access_secret() -> str:
    return ACCESS_SECRET


@pytest.fixture
def refresh_secret() -> str:
    return REFRESH_SECRET


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database for testing.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def identity_repo(db_session: AsyncSession) -> IdentityRepository:
    return IdentityRepository(db_session)


@pytest.fixture
def session_repo(db_session: AsyncSession) -> SessionTokenRepository:
    return SessionTokenRepository(db_session)


@pytest.fixture
def reset_repo(db_session: AsyncSession) -> ResetTokenRepository:
    return ResetTokenRepository(db_session)


@pytest.fixture
def unit_of_work(db_session: AsyncSession) -> SqlAlchemyUnitOfWork:
    return SqlAlchemyUnitOfWork(db_session)


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession,
    token_codec: TokenCodec,
    password_hasher: PasswordHashingService,
    notifier: RecordingNotifier,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with overridden dependencies."""
    from authcore.infrastructure.api.app import app
    from authcore.infrastructure.api.dependencies import (
        get_password_hasher,
        get_reset_notifier,
        get_token_codec,
    )
    from authcore.infrastructure.persistence.database import get_db_session

    app.dependency_overrides[get_db_session] = lambda: db_session
    app.dependency_overrides[get_token_codec] = lambda: token_codec
    app.dependency_overrides[get_password_hasher] = lambda: password_hasher
    app.dependency_overrides[get_reset_notifier] = lambda: notifier

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides = {}
