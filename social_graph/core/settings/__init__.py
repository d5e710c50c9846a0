"""Modular Pydantic Settings v2 configuration.

Settings are split by domain (app/db/graphql/logging), read from environment
variables and an optional .env file, validated once and cached:

    from social_graph.core.settings import get_app_settings

    settings = get_app_settings()
    print(settings.environment)
"""

from __future__ import annotations

from .app import AppSettings
from .database import DatabaseSettings
from .graphql import GraphQLSettings
from .loader import (
    clear_settings_cache,
    get_app_settings,
    get_db_settings,
    get_graphql_settings,
    get_logging_settings,
)
from .logs import LoggingSettings

__all__ = [
    "AppSettings",
    "DatabaseSettings",
    "GraphQLSettings",
    "LoggingSettings",
    "clear_settings_cache",
    "get_app_settings",
    "get_db_settings",
    "get_graphql_settings",
    "get_logging_settings",
]
