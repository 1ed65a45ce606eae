"""
EntrySync Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped, fresh for each test):
    db_engine      In-memory SQLite (aiosqlite + StaticPool) with the schema created
    ├── db_session     AsyncSession bound to that engine
    │   └── gateway        PersistenceGateway over the session
    └── test_client    HTTPX AsyncClient for the FastAPI app, get_db_session overridden
    make_entry     Factory for EntryPayload objects with realistic defaults

Tests run against a real SQL engine rather than a mocked session: the
behaviors under test (ON CONFLICT handling, ordering, pagination) live in SQL.
"""

import os

# Override settings BEFORE any entrysync import creates the settings singleton
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["AUTO_CREATE_SCHEMA"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from entrysync.database import get_db_session, init_schema  # noqa: E402
from entrysync.schemas.entry import EntryPayload  # noqa: E402
from entrysync.services.gateway import PersistenceGateway  # noqa: E402


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    A fresh in-memory database per test.

    StaticPool keeps a single connection, so every session created from this
    engine sees the same in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_schema(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def gateway(db_session) -> PersistenceGateway:
    return PersistenceGateway(db_session)


@pytest.fixture
def make_entry():
    """
    Factory for client-shaped entries.

    Usage:
        entry = make_entry("a1", content="hello", timestamp=1700000000000)
    """
    def _make(entry_id: str, **fields) -> EntryPayload:
        data = {
            "id": entry_id,
            "appId": "daily",
            "content": f"content of {entry_id}",
            "category": "note",
            "tags": ["journal"],
            "date": "Jan 15, 2024",
            "dateISO": "2024-01-15T08:30:00.000Z",
            "timestamp": 1705307400000,
        }
        data.update(fields)
        return EntryPayload.model_validate(data)

    return _make


@pytest_asyncio.fixture
async def test_client(db_engine) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient talking to the FastAPI app through ASGITransport.

    Each request gets its own session on the test engine, committed on
    success and rolled back on error, mirroring get_db_session.
    """
    from entrysync.main import app

    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def _test_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _test_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
