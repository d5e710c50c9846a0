"""GraphQL error classification, logging and masking.

Resolvers translate domain exceptions with ``to_graphql_error`` so every
error the client sees carries ``extensions.code``. ``log_graphql_error``
is called from ``GatewaySchema.process_errors`` for every error of a
response. In production ``MaskErrors`` replaces the message of every error
that is not user-facing.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from graphql import GraphQLError
from sqlalchemy.exc import SQLAlchemyError

from social_graph.core.database import ConflictError, NotFoundError, RepositoryError

if TYPE_CHECKING:
    from strawberry.types import ExecutionContext

logger = logging.getLogger(__name__)

MASKED_ERROR_MESSAGE = "An internal error occurred. Please try again later."


class ErrorCategory:
    """Error codes placed in ``extensions.code``."""

    VALIDATION = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL = "INTERNAL_ERROR"


USER_FACING_CODES = frozenset({
    ErrorCategory.VALIDATION,
    ErrorCategory.NOT_FOUND,
    ErrorCategory.CONFLICT,
})


def to_graphql_error(exc: Exception) -> GraphQLError:
    """Convert a domain or store exception into a coded ``GraphQLError``.

    Args:
        exc: Exception raised by a repository or the database driver

    Returns:
        GraphQLError with ``extensions.code`` set
    """
    if isinstance(exc, NotFoundError):
        return GraphQLError(
            exc.message,
            original_error=exc,
            extensions={"code": ErrorCategory.NOT_FOUND, "model": exc.model_name},
        )
    if isinstance(exc, ConflictError):
        return GraphQLError(
            exc.message,
            original_error=exc,
            extensions={"code": ErrorCategory.CONFLICT},
        )
    if isinstance(exc, (RepositoryError, SQLAlchemyError)):
        message = "Database operation failed"
    else:
        message = "Internal server error"
    return GraphQLError(
        message,
        original_error=exc,
        extensions={"code": ErrorCategory.INTERNAL},
    )


def error_code(error: GraphQLError) -> str:
    """Return the error code, treating request validation failures as VALIDATION_ERROR."""
    code = (error.extensions or {}).get("code")
    if code:
        return str(code)
    # Parse/validation errors (syntax, unknown enum values, depth limit) carry no path
    if error.original_error is None and error.path is None:
        return ErrorCategory.VALIDATION
    return ErrorCategory.INTERNAL


def is_user_facing_error(error: GraphQLError) -> bool:
    """Whether the error message is safe to show to clients as-is."""
    return error_code(error) in USER_FACING_CODES


def should_mask_error(error: GraphQLError) -> bool:
    return not is_user_facing_error(error)


def log_graphql_error(
    error: GraphQLError, execution_context: ExecutionContext | None = None
) -> None:
    """Log error with full details for server-side debugging.

    User-facing errors are expected and logged at INFO; everything else is
    logged at ERROR with the original traceback.
    """
    code = error_code(error)
    log_context: dict[str, object] = {
        "error_code": code,
        "error_message": error.message,
        "error_path": error.path,
    }
    if execution_context is not None:
        if execution_context.operation_name:
            log_context["operation_name"] = execution_context.operation_name
        correlation_id = getattr(execution_context.context, "correlation_id", None)
        if correlation_id:
            log_context["correlation_id"] = correlation_id

    original = error.original_error
    if original is not None and not isinstance(original, GraphQLError):
        log_context["exception_type"] = type(original).__name__

    if code in USER_FACING_CODES:
        logger.info("GraphQL user-facing error", extra=log_context)
    else:
        logger.error(
            "GraphQL internal error",
            extra=log_context,
            exc_info=(type(original), original, original.__traceback__) if original else None,
        )


__all__ = [
    "MASKED_ERROR_MESSAGE",
    "ErrorCategory",
    "error_code",
    "is_user_facing_error",
    "log_graphql_error",
    "should_mask_error",
    "to_graphql_error",
]
