"""Database dependencies for FastAPI route handlers.

Two session getters exist for different use cases:

1. ``get_db_session()`` (this module): FastAPI dependency, session lifecycle
   tied to the HTTP request. The GraphQL context getter depends on it, so
   tests can swap the session with ``app.dependency_overrides``.
2. ``get_async_session()`` (infra.database): framework-agnostic context
   manager for CLI commands and scripts.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from social_graph.infra.database import get_async_session


async def get_db_session() -> AsyncGenerator[AsyncSession]:
    """FastAPI dependency for database session.

    Yields:
        Database session that is automatically closed after request.
    """
    async with get_async_session() as session:
        yield session


__all__ = ["get_db_session"]
