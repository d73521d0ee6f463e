"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator, Generator
from datetime import datetime, timezone
from pathlib import Path

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.services.activity_service import ActivityService
from domain.services.profile_service import ProfileService
from domain.services.view_controller import ViewController, ViewRegistry
from infrastructure.auth.jwt_provider import JWTIdentityProvider
from infrastructure.auth.provider import Identity
from infrastructure.database.models import Base
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.realtime.channel import SnapshotChannel

# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Fixed test user ID for consistency
TEST_USER_ID = "110169484474386276334"

# Mon Jan 01 2024, 09:00 AM
TEST_NOW = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


class FixedClock:
    """Clock that always reports the same moment."""

    def __init__(self, moment: datetime = TEST_NOW) -> None:
        self.moment = moment

    def now(self) -> datetime:
        return self.moment


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database with all tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def test_identity() -> Identity:
    """Create a test identity with fixed uid."""
    return Identity(
        uid=TEST_USER_ID,
        email="test@example.com",
        display_name="Test User",
    )


@pytest.fixture
def identity_provider() -> JWTIdentityProvider:
    """Create identity provider for testing."""
    return JWTIdentityProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
        issuer="",
        audience="",
    )


@pytest.fixture
def auth_token(identity_provider: JWTIdentityProvider, test_identity: Identity) -> str:
    """Create auth token for test identity."""
    return str(identity_provider.create_token(test_identity))


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def profile_service(session_factory: async_sessionmaker[AsyncSession]) -> ProfileService:
    return ProfileService(lambda: SQLAlchemyUnitOfWork(session_factory))


@pytest.fixture
def channel() -> SnapshotChannel:
    return SnapshotChannel()


@pytest.fixture
def activity_service(
    session_factory: async_sessionmaker[AsyncSession],
    channel: SnapshotChannel,
    clock: FixedClock,
) -> ActivityService:
    return ActivityService(lambda: SQLAlchemyUnitOfWork(session_factory), channel, clock=clock)


@pytest.fixture
def registry(
    identity_provider: JWTIdentityProvider,
    profile_service: ProfileService,
    activity_service: ActivityService,
    clock: FixedClock,
) -> Generator[ViewRegistry, None, None]:
    """Registry wired to the test stores; banners dismiss quickly."""

    def controller_factory(user_id: str | None) -> ViewController:
        return ViewController(
            user_id,
            profiles=profile_service,
            activities=activity_service,
            identity_provider=identity_provider,
            clock=clock,
            success_message_seconds=0.05,
        )

    registry = ViewRegistry(identity_provider, controller_factory)
    yield registry
    registry.close()


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def app_client(
    identity_provider: JWTIdentityProvider,
    profile_service: ProfileService,
    activity_service: ActivityService,
    registry: ViewRegistry,
    clock: FixedClock,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client wired to the in-memory stores.

    This client:
    - Uses an in-memory SQLite database
    - Verifies HS256 tokens signed with the test secret
    - Uses a fixed clock (Mon Jan 01 2024, 09:00 AM UTC)
    """
    from api.dependencies.auth import get_identity_provider
    from api.v1.dependencies import (
        get_activity_service,
        get_clock,
        get_profile_service,
        get_view_registry,
    )
    from main import create_app

    app = create_app()

    app.dependency_overrides[get_identity_provider] = lambda: identity_provider
    app.dependency_overrides[get_profile_service] = lambda: profile_service
    app.dependency_overrides[get_activity_service] = lambda: activity_service
    app.dependency_overrides[get_view_registry] = lambda: registry
    app.dependency_overrides[get_clock] = lambda: clock

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
