"""Global exception handlers for FastAPI application.

Anything that escapes request handling (including failures while building
the GraphQL context, e.g. no database connection) is answered with a
GraphQL-shaped body instead of a bare 500 page.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from social_graph.features.graphql.error_handler import ErrorCategory

logger = logging.getLogger(__name__)


def _get_request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions.

    Logs the full traceback and returns ``{"data": null, "errors": [...]}``.

    Args:
        request: The FastAPI request object.
        exc: The exception that was raised.

    Returns:
        JSONResponse with status 500.
    """
    request_id = _get_request_id(request)

    logger.error(
        "Unexpected exception occurred",
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
            "exception_message": str(exc),
        },
        exc_info=True,
    )

    extensions: dict[str, str] = {"code": ErrorCategory.INTERNAL}
    if request_id:
        extensions["request_id"] = request_id

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "data": None,
            "errors": [
                {
                    "message": "An unexpected error occurred while processing your request",
                    "extensions": extensions,
                }
            ],
        },
    )


def configure_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers for the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(Exception, generic_exception_handler)
    logger.debug("Exception handlers configured")
