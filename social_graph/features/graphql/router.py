"""GraphQL router for FastAPI integration.

Provides:
- GraphQL endpoint (mounted at GRAPHQL_PATH by app/router.py)
- Optional in-browser IDE (GraphiQL, Apollo Sandbox or Pathfinder)
- Per-request context with a fresh session and fresh DataLoaders
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated, Any, cast

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession
from strawberry.fastapi import GraphQLRouter

from social_graph.core.dependencies.database import get_db_session
from social_graph.core.settings import get_graphql_settings
from social_graph.features.graphql.context import GraphQLContext
from social_graph.features.graphql.dataloaders import create_dataloaders
from social_graph.features.graphql.schema import schema

if TYPE_CHECKING:
    import strawberry

logger = logging.getLogger(__name__)


async def get_graphql_context(
    request: Request,
    response: Response,
    background_tasks: BackgroundTasks,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> GraphQLContext:
    """Create GraphQL context from FastAPI dependencies.

    Following Strawberry's FastAPI integration pattern, this provides
    the standard context fields (request, response, background_tasks)
    plus the request-scoped session and loaders.

    Args:
        request: FastAPI request
        response: FastAPI response (for setting headers/cookies)
        background_tasks: FastAPI background tasks
        session: Database session from dependency

    Returns:
        GraphQLContext for use in resolvers
    """
    return GraphQLContext(
        request=request,
        response=response,
        background_tasks=background_tasks,
        session=session,
        loaders=create_dataloaders(session),
        correlation_id=getattr(request.state, "request_id", None),
    )


def create_graphql_router(graphql_schema: strawberry.Schema | None = None) -> APIRouter:
    """Create GraphQL router with settings-based configuration.

    The router serves the empty path, so it must be included with a prefix
    (``GRAPHQL_PATH``).
    """
    settings = get_graphql_settings()

    return GraphQLRouter(
        graphql_schema or schema,
        context_getter=cast("Any", get_graphql_context),
        graphql_ide=settings.graphql_ide or None,
        path="",
    )


__all__ = ["create_graphql_router", "get_graphql_context"]
