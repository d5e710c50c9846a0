"""Database session management with the async SQLAlchemy engine.

PostgreSQL is reached through psycopg3; without a configured database the
engine falls back to a local SQLite file through aiosqlite.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from social_graph.core.settings import get_db_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, AsyncIterator

    from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)

db_settings = get_db_settings()

engine = create_async_engine(
    db_settings.get_sqlalchemy_url(),
    **db_settings.sqlalchemy_engine_kwargs(),
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
    autocommit=False,
)

_SESSION_LOCK_KEY = "social_graph.lock"


def enable_sqlite_foreign_keys(target: AsyncEngine) -> None:
    """Turn on foreign key enforcement for every new SQLite connection.

    SQLite ignores ON DELETE CASCADE unless the pragma is set per connection.
    """
    if target.dialect.name != "sqlite":
        return

    @event.listens_for(target.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, connection_record: Any) -> None:
        _ = connection_record
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


enable_sqlite_foreign_keys(engine)


@asynccontextmanager
async def session_lock(session: AsyncSession) -> AsyncIterator[None]:
    """Serialize statements issued on one session.

    The lock lives in ``session.info`` so it shares the session's lifetime.
    """
    lock = session.info.get(_SESSION_LOCK_KEY)
    if lock is None:
        lock = session.info[_SESSION_LOCK_KEY] = asyncio.Lock()
    async with lock:
        yield


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Get async database session.

    Yields:
        Database session that is automatically closed.

    Example:
        async with get_async_session() as session:
            users = await get_user_repository().find_many(session)
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def create_schema(bind: AsyncEngine | None = None) -> None:
    """Create all tables known to ``Base.metadata`` (no-op for existing ones)."""
    from social_graph.core.database import Base
    from social_graph.features.members import models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def init_database(*, create_tables: bool = True, seed: bool | None = None) -> None:
    """Check connectivity, create tables and seed reference data.

    Idempotent: safe to call on every startup.

    Args:
        create_tables: Run ``metadata.create_all`` (skip when Alembic manages the schema)
        seed: Seed member types; defaults to ``DB_SEED_MEMBER_TYPES``
    """
    from social_graph.features.members.seed import seed_member_types

    url = engine.url.render_as_string(hide_password=True)
    logger.info("Initializing database", extra={"url": url})

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("Failed to connect to database", extra={"url": url, "error": str(e)})
        raise

    if create_tables:
        await create_schema()

    if db_settings.seed_member_types if seed is None else seed:
        async with get_async_session() as session:
            await seed_member_types(session)
            await session.commit()

    logger.info("Database ready", extra={"url": url, "dialect": engine.dialect.name})


async def close_database() -> None:
    """Close database connection and cleanup resources.

    This should be called during application shutdown.
    """
    logger.info("Closing database connection")

    try:
        await engine.dispose()
        logger.info("Database connection closed successfully")
    except Exception as e:
        logger.exception("Error closing database connection", extra={"error": str(e)})


__all__ = [
    "AsyncSessionLocal",
    "close_database",
    "create_schema",
    "enable_sqlite_foreign_keys",
    "engine",
    "get_async_session",
    "init_database",
    "session_lock",
]
