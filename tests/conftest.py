# ruff: noqa: E402
# Environment must be prepared before any application module is imported:
# core.config reads DATABASE_URL at import time.

from collections.abc import AsyncGenerator
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["DB_CHECK_ON_START"] = "false"
os.environ["DB_CREATE_SCHEMA_ON_START"] = "false"
os.environ.setdefault("TESTING", "true")

from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient
import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# isort: off
from app import create_app
from core.cache import ModelCache
from core.hooks import HookRegistry
from db.database import Base, get_db
import db.models  # noqa: F401  register tables on Base.metadata

# isort: on

# One in-memory database per test; StaticPool keeps every session on the same connection
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Align anyio_backend scope with anyio plugin expectations."""
    return "asyncio"


@pytest.fixture(scope="session")
def app():
    """FastAPI application instance for tests, created by factory."""
    return create_app()


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Same session settings as the application factory
    return async_sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
async def db_session(session_maker: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession]:
    async with session_maker() as session:
        yield session


@pytest.fixture
def hooks() -> HookRegistry:
    return HookRegistry()


@pytest.fixture
def cache() -> ModelCache:
    return ModelCache(default_ttl=60, max_entries=100)


@pytest.fixture
async def override_get_db(app, session_maker: async_sessionmaker[AsyncSession]):
    """Serve every request from a fresh session bound to the test database."""

    async def _get_db_test() -> AsyncGenerator[AsyncSession]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db_test
    try:
        yield
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest.fixture
async def client(app, override_get_db: None) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client with app lifespan management (runtime init/teardown)."""
    async with LifespanManager(app):
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="https://testserver.local",
            follow_redirects=True,
        ) as ac:
            yield ac
