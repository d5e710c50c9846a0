"""Strawberry extensions for the GraphQL schema.

Provides:
- Query depth limiting (QueryDepthLimiter, default depth 5)
- Preload trigger for queries that touch several top-level lists
- Error masking in production (MaskErrors)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from graphql import FieldNode, OperationType
from graphql.utilities import get_operation_ast
from sqlalchemy.exc import SQLAlchemyError
from strawberry.extensions import MaskErrors, QueryDepthLimiter, SchemaExtension

from social_graph.core.database import RepositoryError
from social_graph.core.settings import get_app_settings, get_graphql_settings
from social_graph.features.graphql.error_handler import MASKED_ERROR_MESSAGE, should_mask_error

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from graphql import OperationDefinitionNode

logger = logging.getLogger(__name__)

# Root query fields that return whole tables
TOP_LEVEL_LIST_FIELDS = frozenset({"users", "posts", "profiles", "memberTypes", "subscriptions"})


def count_top_level_lists(operation: OperationDefinitionNode) -> int:
    """Count distinct table-returning root fields selected by ``operation``.

    Only direct field selections are counted; fragments on the root type are
    not followed.
    """
    names = {
        selection.name.value
        for selection in operation.selection_set.selections
        if isinstance(selection, FieldNode)
    }
    return len(names & TOP_LEVEL_LIST_FIELDS)


class PreloadExtension(SchemaExtension):
    """Warm every loader cache before resolving relation-heavy queries.

    A query selecting at least ``min_list_fields`` of the table-returning
    root fields runs the preload controller once before execution; shallow
    queries rely on per-batch coalescing instead. The decision only changes
    how many store calls are issued, never the response.

    The class (not an instance) is registered on the schema so Strawberry
    creates one extension per operation.

    Example:
        schema = strawberry.Schema(
            query=Query,
            extensions=[PreloadExtension.configured(min_list_fields=3)],
        )
    """

    enabled: bool = True
    min_list_fields: int = 3

    @classmethod
    def configured(
        cls, *, enabled: bool = True, min_list_fields: int = 3
    ) -> type[PreloadExtension]:
        """Return a subclass bound to the given trigger settings."""
        return type(
            cls.__name__,
            (cls,),
            {"enabled": enabled, "min_list_fields": min_list_fields},
        )

    async def on_execute(self) -> AsyncIterator[None]:
        """Run the preload ahead of field resolution when the query qualifies."""
        if self.enabled:
            await self._maybe_preload()
        yield

    async def _maybe_preload(self) -> None:
        execution_context = self.execution_context
        document = execution_context.graphql_document
        if document is None:
            return
        operation = get_operation_ast(document, execution_context.operation_name)
        if operation is None or operation.operation != OperationType.QUERY:
            return

        list_fields = count_top_level_lists(operation)
        if list_fields < self.min_list_fields:
            return

        loaders = getattr(execution_context.context, "loaders", None)
        if loaders is None:
            return

        try:
            await loaders.preload.preload_all()
        except (SQLAlchemyError, RepositoryError):
            # Batched loading still produces the same result, just with more calls
            logger.warning(
                "Preload failed, continuing with batched loading",
                exc_info=True,
                extra={"list_fields": list_fields},
            )


def get_extensions() -> list[Any]:
    """Get list of Strawberry extensions for the schema.

    Returns:
        List of extension instances
    """
    settings = get_graphql_settings()
    app_settings = get_app_settings()

    extensions: list[Any] = [
        # Limit query depth to prevent abuse
        QueryDepthLimiter(max_depth=settings.max_query_depth),
        PreloadExtension.configured(
            enabled=settings.preload_enabled,
            min_list_fields=settings.preload_min_list_fields,
        ),
    ]

    mask_errors = settings.mask_errors
    if mask_errors is None:
        mask_errors = app_settings.is_production
    if mask_errors:
        extensions.append(
            MaskErrors(should_mask_error=should_mask_error, error_message=MASKED_ERROR_MESSAGE)
        )

    logger.debug(
        "GraphQL extensions configured",
        extra={
            "max_depth": settings.max_query_depth,
            "preload_enabled": settings.preload_enabled,
            "mask_errors": mask_errors,
        },
    )
    return extensions


__all__ = [
    "TOP_LEVEL_LIST_FIELDS",
    "PreloadExtension",
    "count_top_level_lists",
    "get_extensions",
]
