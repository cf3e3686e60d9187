"""
Database configuration and session management
"""

import json
from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.config import settings


def dump_json(value: Any) -> str:
    """
    Serializer for JSON columns.

    Non-ASCII text is written as-is rather than as \\u escapes, so a stored
    tag array can be matched against dump_json(tag) on every backend.
    """
    return json.dumps(value, ensure_ascii=False)


def _engine_kwargs(url: str) -> dict[str, Any]:
    """Engine options for the configured backend (SQLite has no connection pool to size)."""
    if url.startswith("sqlite"):
        return {"echo": settings.DB_ECHO, "json_serializer": dump_json}
    return {
        "echo": settings.DB_ECHO,
        "json_serializer": dump_json,
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_pre_ping": True,  # Verify connections before using
        "pool_recycle": 3600,  # Recycle connections every hour (MariaDB wait_timeout is 8 hours)
    }


def configure_sqlite(engine: AsyncEngine) -> None:
    """
    Make SQLite behave like the production database for our purposes.

    - Enforces foreign keys (off by default in SQLite)
    - Lets SQLAlchemy emit BEGIN itself so SAVEPOINTs work; the pysqlite
      driver otherwise manages transactions on its own and breaks
      begin_nested(), which notification dispatch relies on.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")


def build_engine(url: str) -> AsyncEngine:
    """Create an async engine for the given URL with backend-specific setup."""
    new_engine = create_async_engine(url, **_engine_kwargs(url))
    if url.startswith("sqlite"):
        configure_sqlite(new_engine)
    return new_engine


# Create async engine
engine = build_engine(settings.DATABASE_URL)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for getting async database sessions.

    One session (and one transaction) per request: multi-row operations such
    as cascade deletes commit together or not at all.

    Usage in FastAPI:
        @app.get("/items")
        async def read_items(db: AsyncSession = Depends(get_db)):
            result = await db.execute(select(Item))
            return result.scalars().all()
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
