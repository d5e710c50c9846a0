"""GraphQL schema assembly.

Combines the Query and Mutation root types into a single schema with the
configured extensions.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import strawberry

from social_graph.features.graphql.error_handler import log_graphql_error
from social_graph.features.graphql.extensions import get_extensions
from social_graph.features.graphql.resolvers import Mutation, Query

if TYPE_CHECKING:
    from graphql import GraphQLError
    from strawberry.types import ExecutionContext

logger = logging.getLogger(__name__)


class GatewaySchema(strawberry.Schema):
    """Schema that logs every error with its code instead of Strawberry's default traceback dump."""

    def process_errors(
        self,
        errors: list[GraphQLError],
        execution_context: ExecutionContext | None = None,
    ) -> None:
        for error in errors:
            log_graphql_error(error, execution_context)


def create_schema() -> GatewaySchema:
    """Build the schema with extensions taken from the current settings."""
    return GatewaySchema(
        query=Query,
        mutation=Mutation,
        extensions=get_extensions(),
    )


schema = create_schema()

logger.debug("GraphQL schema created")

__all__ = ["GatewaySchema", "create_schema", "schema"]
