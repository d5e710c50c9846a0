"""GraphQL server configuration settings.

Controls the GraphQL endpoint, IDE, query limits and the preload heuristic.
Environment variables use GRAPHQL_ prefix.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

GraphQLIDE = Literal["graphiql", "apollo-sandbox", "pathfinder", False]


class GraphQLSettings(BaseSettings):
    """GraphQL server configuration.

    Environment variables use GRAPHQL_ prefix.
    Example: GRAPHQL_ENABLED=true, GRAPHQL_PATH=/graphql
    """

    # Enable/disable GraphQL
    enabled: bool = Field(
        default=True,
        description="Enable GraphQL endpoint",
    )

    # Endpoint configuration
    path: str = Field(
        default="/graphql",
        min_length=1,
        max_length=255,
        pattern=r"^/.*$",
        description="GraphQL endpoint path",
    )

    graphql_ide: GraphQLIDE = Field(
        default="graphiql",
        description="GraphQL IDE to use: graphiql, apollo-sandbox, pathfinder, or false to disable",
    )

    # Query limits for security
    max_query_depth: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum query nesting depth",
    )

    # Whole-dataset preload for traversal-heavy queries
    preload_enabled: bool = Field(
        default=True,
        description="Preload every table when a query touches many top-level lists",
    )
    preload_min_list_fields: int = Field(
        default=3,
        ge=1,
        le=5,
        description="Distinct top-level list fields a query must select to trigger preload",
    )

    # Error masking
    mask_errors: bool | None = Field(
        default=None,
        description="Mask internal error messages (None = mask only in production)",
    )

    model_config = SettingsConfigDict(
        env_prefix="GRAPHQL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @property
    def is_configured(self) -> bool:
        """Check if GraphQL is enabled and configured."""
        return self.enabled
