"""Router registration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter

from social_graph.core.settings import get_app_settings

if TYPE_CHECKING:
    from fastapi import FastAPI

    from social_graph.core.settings import GraphQLSettings

logger = logging.getLogger(__name__)

health_router = APIRouter(tags=["health"])


@health_router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe; does not touch the database."""
    settings = get_app_settings()
    return {"status": "ok", "service": settings.service_name, "version": settings.version}


def setup_routers(app: FastAPI, graphql_settings: GraphQLSettings) -> None:
    """Include the health and GraphQL routers."""
    app.include_router(health_router)

    if graphql_settings.enabled:
        from social_graph.features.graphql.router import create_graphql_router

        app.include_router(create_graphql_router(), prefix=graphql_settings.path)
        logger.info("GraphQL endpoint enabled", extra={"path": graphql_settings.path})
    else:
        logger.info("GraphQL endpoint disabled")
