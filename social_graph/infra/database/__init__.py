"""Database infrastructure: engine, session factory and lifecycle helpers."""

from social_graph.infra.database.session import (
    AsyncSessionLocal,
    close_database,
    create_schema,
    enable_sqlite_foreign_keys,
    engine,
    get_async_session,
    init_database,
    session_lock,
)

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
