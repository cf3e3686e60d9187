"""
Pytest configuration and shared fixtures.

This file provides common fixtures for all tests.

Tests run against an in-memory SQLite database (aiosqlite) created from the
SQLModel metadata, one fresh database per test function. The SQLite engine
gets the same foreign key and SAVEPOINT behaviour the application configures
for its own SQLite engines (see app.core.database.configure_sqlite).
"""

import os
from collections.abc import AsyncGenerator

# Settings are read at import time; these must be in place before app imports
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("ENVIRONMENT", "development")

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

from app.config import UserRole  # noqa: E402
from app.core.database import configure_sqlite, dump_json, get_db  # noqa: E402
from app.main import app as main_app  # noqa: E402
from app.models import Categories, Posts, Users  # noqa: E402
from tests.factories import create_category, create_post, create_user  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    Create test database engine for each test function.

    StaticPool keeps the single in-memory connection alive for the whole
    test, so every session sees the same database.
    """
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        json_serializer=dump_json,
    )
    configure_sqlite(test_engine)

    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture(scope="function")
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """
    Create a new database session for each test.

    The same session is handed to the API (see the app fixture), so rows
    written by requests are visible to assertions without a commit.
    """
    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture(scope="function")
def app(db_session: AsyncSession) -> FastAPI:
    """
    Create FastAPI app with test database session.

    This overrides the database dependency to use the test session.
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    main_app.dependency_overrides[get_db] = override_get_db

    yield main_app

    main_app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Create async HTTP client for testing API endpoints.

    Usage:
        async def test_endpoint(client):
            response = await client.get("/api/v1/posts")
            assert response.status_code == 200
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# =============================================================================
# Test Data Fixtures
# =============================================================================


@pytest.fixture
async def alice(db_session: AsyncSession) -> Users:
    """Student who authors the posts in most tests."""
    return await create_user(db_session, "Alice", "alice@campus.edu")


@pytest.fixture
async def bob(db_session: AsyncSession) -> Users:
    return await create_user(db_session, "Bob", "bob@campus.edu")


@pytest.fixture
async def carol(db_session: AsyncSession) -> Users:
    return await create_user(db_session, "Carol", "carol@campus.edu")


@pytest.fixture
async def admin(db_session: AsyncSession) -> Users:
    return await create_user(db_session, "Admin", "admin@campus.edu", role=UserRole.ADMIN)


@pytest.fixture
async def category(db_session: AsyncSession) -> Categories:
    return await create_category(db_session)


@pytest.fixture
async def post(db_session: AsyncSession, alice: Users, category: Categories) -> Posts:
    """A post by Alice in the Academics category."""
    return await create_post(db_session, alice, category, tags=["exams", "study"])
