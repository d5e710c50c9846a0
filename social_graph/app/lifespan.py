"""Application lifespan: logging, database startup and shutdown."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from social_graph.core.settings import get_app_settings
from social_graph.infra.database import close_database, init_database
from social_graph.infra.logging import setup_logging

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging, prepare the database, and dispose the engine on exit."""
    _ = app
    setup_logging()
    settings = get_app_settings()
    logger.info(
        "Starting application",
        extra={
            "service": settings.service_name,
            "version": settings.version,
            "environment": settings.environment,
        },
    )

    await init_database()

    try:
        yield
    finally:
        await close_database()
        logger.info("Application shutdown complete")
