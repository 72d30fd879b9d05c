"""
Centralized Test Configuration.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from trippacks.app.main import app
from trippacks.app.core.dependencies import get_repository
from trippacks.app.db.schema import initialize_schema
from trippacks.app.services.change_notifier import ChangeNotifier
from trippacks.app.services.record_repository import RecordRepository

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def make_engine():
    return create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
async def bare_engine():
    """Fresh in-memory database with no schema applied."""
    engine = make_engine()
    yield engine
    await engine.dispose()


@pytest.fixture
async def engine(bare_engine):
    """Fresh in-memory database at the current schema version."""
    async with bare_engine.begin() as conn:
        await conn.run_sync(initialize_schema)
    return bare_engine


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def notifier():
    return ChangeNotifier()


@pytest.fixture
def repository(session_factory, notifier):
    return RecordRepository(session_factory, notifier)


@pytest.fixture
async def client(repository):
    """Async client for testing, wired to the test repository."""
    app.dependency_overrides[get_repository] = lambda: repository
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides = {}
