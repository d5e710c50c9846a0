"""Relationship loader for subscription edges (subscriber -> author).

Edges are loaded by either endpoint. Resolvers project them onto the
counterpart users through the user loader, so the subscription graph is
never materialized as nested objects.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from strawberry.dataloader import DataLoader

from social_graph.features.graphql.dataloaders.base import LoaderState, group_by
from social_graph.features.members.repository import get_subscription_repository
from social_graph.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

    from social_graph.features.members.models import SubscribersOnAuthors

_lazy = get_lazy_logger(__name__)


class SubscriptionEdgeLoader:
    """Batch-load subscription edges grouped by subscriber or by author.

    Usage:
        edges = await loaders.subscriptions.load_outgoing(user_id)  # user follows
        edges = await loaders.subscriptions.load_incoming(user_id)  # user's followers
    """

    def __init__(self, session: AsyncSession, state: LoaderState) -> None:
        """Initialize with a database session.

        Args:
            session: AsyncSession scoped to the current request
            state: Mode flag shared with the other loaders of the request
        """
        self._session = session
        self._state = state
        self._repository = get_subscription_repository()
        self._outgoing: DataLoader[UUID, list[SubscribersOnAuthors]] = DataLoader(
            load_fn=self._batch_load_outgoing
        )
        self._incoming: DataLoader[UUID, list[SubscribersOnAuthors]] = DataLoader(
            load_fn=self._batch_load_incoming
        )
        self._all: asyncio.Future[list[SubscribersOnAuthors]] | None = None

    async def load_outgoing(self, user_id: UUID) -> list[SubscribersOnAuthors]:
        """Edges where ``user_id`` is the subscriber."""
        return await self._outgoing.load(user_id)

    async def load_incoming(self, user_id: UUID) -> list[SubscribersOnAuthors]:
        """Edges where ``user_id`` is the author."""
        return await self._incoming.load(user_id)

    async def load_all(self) -> list[SubscribersOnAuthors]:
        """Every edge, read once per request and shared by all callers."""
        if self._all is None:
            self._all = asyncio.ensure_future(self._load_all())
        return await self._all

    def prime_outgoing(self, user_id: UUID, edges: list[SubscribersOnAuthors]) -> None:
        self._outgoing.prime(user_id, edges)

    def prime_incoming(self, user_id: UUID, edges: list[SubscribersOnAuthors]) -> None:
        self._incoming.prime(user_id, edges)

    def prime_all(
        self,
        edges: list[SubscribersOnAuthors],
        user_ids: list[UUID],
    ) -> None:
        """Cache the full edge list and distribute it to both endpoints.

        Users in ``user_ids`` without edges are primed with empty lists.
        """
        outgoing = group_by(edges, lambda edge: edge.subscriber_id)
        incoming = group_by(edges, lambda edge: edge.author_id)
        self._outgoing.prime_many(_complete(outgoing, user_ids))
        self._incoming.prime_many(_complete(incoming, user_ids))
        if self._all is None:
            self._all = _resolved(edges)

    def clear_all(self) -> None:
        self._outgoing.clear_all()
        self._incoming.clear_all()
        self._all = None

    async def _load_all(self) -> list[SubscribersOnAuthors]:
        try:
            return list(await self._repository.find_many(self._session))
        except BaseException:
            self._all = None
            raise

    async def _batch_load_outgoing(
        self, user_ids: list[UUID]
    ) -> list[list[SubscribersOnAuthors]]:
        return await self._batch_load(user_ids, "subscriber_id", lambda e: e.subscriber_id)

    async def _batch_load_incoming(
        self, user_ids: list[UUID]
    ) -> list[list[SubscribersOnAuthors]]:
        return await self._batch_load(user_ids, "author_id", lambda e: e.author_id)

    async def _batch_load(
        self,
        user_ids: list[UUID],
        column: str,
        key: Callable[[SubscribersOnAuthors], UUID],
    ) -> list[list[SubscribersOnAuthors]]:
        if self._state.preloaded:
            return [[] for _ in user_ids]

        rows = await self._repository.find_many(self._session, where={column: user_ids})
        grouped = group_by(rows, key)
        _lazy.debug(lambda: f"edges by {column}: {len(rows)} rows for {len(user_ids)} users")
        return [grouped.get(user_id, []) for user_id in user_ids]


def _complete(
    grouped: Mapping[UUID, list[SubscribersOnAuthors]], user_ids: list[UUID]
) -> dict[UUID, list[SubscribersOnAuthors]]:
    return {user_id: grouped.get(user_id, []) for user_id in user_ids}


def _resolved(
    edges: list[SubscribersOnAuthors],
) -> asyncio.Future[list[SubscribersOnAuthors]]:
    future: asyncio.Future[list[SubscribersOnAuthors]] = (
        asyncio.get_running_loop().create_future()
    )
    future.set_result(edges)
    return future


__all__ = ["SubscriptionEdgeLoader"]
