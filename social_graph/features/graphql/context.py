"""GraphQL context for request-scoped dependencies.

The context is created fresh for each GraphQL request and provides:
- Database session (for queries/mutations)
- DataLoaders (batching cache and preload controller)
- Correlation ID (for log correlation)

Nothing in it is shared between requests: loader caches are unbounded for
the lifetime of one request and must never serve another.

Following Strawberry's FastAPI integration pattern:
https://strawberry.rocks/docs/integrations/fastapi#context_getter
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from strawberry.fastapi import BaseContext

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from starlette.background import BackgroundTasks
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.websockets import WebSocket

    from social_graph.features.graphql.dataloaders import DataLoaders


@dataclass
class GraphQLContext(BaseContext):
    """Request context for GraphQL operations.

    Standard fields (per Strawberry docs):
    - request: The HTTP request (or None outside HTTP, e.g. in tests)
    - response: The HTTP response (for setting headers/cookies)
    - background_tasks: FastAPI BackgroundTasks for async operations

    Custom fields:
    - session: Database session (request-scoped)
    - loaders: DataLoaders (request-scoped, tied to session)
    - correlation_id: Request ID from RequestIDMiddleware

    Example usage in resolver:
        @strawberry.field
        async def user(self, info: Info[GraphQLContext, None], id: UUID) -> UserType | None:
            user = await info.context.loaders.users.load(id)
            return UserType.from_model(user) if user else None
    """

    # Standard Strawberry/FastAPI context fields
    request: Request | WebSocket | None = None
    response: Response | None = None
    background_tasks: BackgroundTasks | None = None

    # Custom application fields
    session: AsyncSession = field(default=None)  # type: ignore[assignment]
    loaders: DataLoaders = field(default=None)  # type: ignore[assignment]
    correlation_id: str | None = None


__all__ = ["GraphQLContext"]
