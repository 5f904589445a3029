"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cableindex.config import Settings
from cableindex.core.database import build_engine, get_session, get_session_factory
from cableindex.main import create_app
from cableindex.models import Base, CableType, SiteLocation
from cableindex.schemas import DatacentreLocationCreate, SiteCreate
from cableindex.services import LifecycleService


@pytest.fixture
async def test_engine(tmp_path):
    """Create a test database engine.

    Each test gets its own SQLite file so that concurrent sessions use
    separate connections and really contend for the write lock.
    """
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", busy_timeout=10.0)

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Get a test database session.

    The session holds the write lock from its first statement until it
    commits or rolls back, so tests that also go through the lifecycle
    service must commit before calling it.
    """
    async with session_factory() as session:
        yield session
        # Rollback any changes made during the test
        await session.rollback()


@pytest.fixture
def settings() -> Settings:
    """Default settings."""
    return Settings()


@pytest.fixture
def lifecycle(session_factory, settings) -> LifecycleService:
    """Lifecycle service owning its own transactions."""
    return LifecycleService(session_factory, settings)


@pytest.fixture
async def site(lifecycle):
    """A committed site with code LON1."""
    return await lifecycle.create_site(SiteCreate(name="London One", code="lon1"))


@pytest.fixture
async def other_site(lifecycle):
    """A second committed site."""
    return await lifecycle.create_site(SiteCreate(name="Paris One", code="PAR1"))


@pytest.fixture
def make_location(lifecycle):
    """Factory creating a committed datacentre location in a site."""
    counter = iter(range(1, 1000))

    async def _make(site_id: int, label: str | None = None) -> SiteLocation:
        rack = f"R{next(counter):02d}"
        data = DatacentreLocationCreate(floor="1", suite="A", row="01", rack=rack, label=label)
        return await lifecycle.create_location(site_id, data)

    return _make


@pytest.fixture
def make_cable_type(lifecycle):
    """Factory creating a committed cable type in a site."""

    async def _make(site_id: int, name: str = "CAT6") -> CableType:
        return await lifecycle.create_record(site_id, "cable_type", {"name": name})

    return _make


@pytest.fixture
async def client(test_engine, session_factory, tmp_path) -> AsyncGenerator[AsyncClient, None]:
    """Get an async test client for the FastAPI app, bound to the test database."""
    app = create_app(tmp_path)

    async def override_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
