"""Shared machinery for the request-scoped entity loaders.

Every loader wraps one or more Strawberry ``DataLoader`` instances. A
``DataLoader`` queues every ``load()`` issued before the event loop's next
iteration and flushes the queue as one batch, so sibling resolvers that run
in the same tick share a single store read.

``LoaderState`` is shared by all loaders of one request. Once the preload
controller has primed every cache it sets ``preloaded``; from then on a batch
function only sees keys that were not primed, which means the rows do not
exist, and answers from memory without touching the store.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from strawberry.dataloader import DataLoader

from social_graph.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Iterable, Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

    from social_graph.core.database import BaseRepository


@dataclass
class LoaderState:
    """Mode flag shared by all loaders of one request."""

    preloaded: bool = False


def group_by[T](rows: Iterable[T], key: Callable[[T], Hashable]) -> dict[Any, list[T]]:
    """Group ``rows`` into lists keyed by ``key(row)``, keeping row order."""
    grouped: dict[Any, list[T]] = defaultdict(list)
    for row in rows:
        grouped[key(row)].append(row)
    return grouped


class EntityLoader[T]:
    """Batch-and-cache loader for one entity kind keyed by ``id``.

    Subclasses set ``include`` for relations fetched with every batch and
    override ``_prime_related`` to push those relations into sibling loaders.

    Usage:
        post = await loader.load(post_id)          # batched with same-tick loads
        posts = await loader.load_many([a, b])
        everything = await loader.load_all()       # one full-table read per request
    """

    include: tuple[str, ...] = ()

    def __init__(
        self,
        session: AsyncSession,
        repository: BaseRepository[T],
        state: LoaderState,
    ) -> None:
        """Initialize with the request session.

        Args:
            session: AsyncSession scoped to the current request
            repository: Store adapter for this entity kind
            state: Mode flag shared with the other loaders of the request
        """
        self._session = session
        self._repository = repository
        self._state = state
        self._by_id: DataLoader[Any, T | None] = DataLoader(load_fn=self._batch_load)
        self._all: asyncio.Future[list[T]] | None = None
        self._lazy = get_lazy_logger(f"{__name__}.{type(self).__name__}")

    @property
    def preloaded(self) -> bool:
        return self._state.preloaded

    async def load(self, id_: Any) -> T | None:
        """Load a single entity by ID.

        This call will be batched with other load() calls made
        in the same event loop tick.

        Returns:
            Entity if found, None otherwise
        """
        return await self._by_id.load(id_)

    async def load_many(self, ids: Sequence[Any]) -> list[T | None]:
        """Load multiple entities by IDs, in the same order (None for missing)."""
        return await self._by_id.load_many(ids)

    async def load_all(self) -> list[T]:
        """Load every row of the table.

        The first call starts one full-table read; concurrent and later callers
        share its result. The returned list is shared, callers must not mutate it.
        """
        if self._all is None:
            self._all = asyncio.ensure_future(self._load_all())
        return await self._all

    def prime(self, entity: T) -> None:
        """Cache ``entity`` under its id unless the id is already cached."""
        self._by_id.prime(entity.id, entity)  # type: ignore[attr-defined]

    def prime_many(self, entities: Iterable[T]) -> None:
        self._by_id.prime_many({entity.id: entity for entity in entities})  # type: ignore[attr-defined]

    def prime_all(self, entities: list[T]) -> None:
        """Cache ``entities`` as the full table and under each id."""
        self.prime_many(entities)
        if self._all is None:
            future: asyncio.Future[list[T]] = asyncio.get_running_loop().create_future()
            future.set_result(entities)
            self._all = future

    def clear_all(self) -> None:
        """Forget every cached entity."""
        self._by_id.clear_all()
        self._all = None

    async def _load_all(self) -> list[T]:
        try:
            rows = list(
                await self._repository.find_many(self._session, include=self._include_for_all())
            )
        except BaseException:
            self._all = None
            raise
        self.prime_many(rows)
        self._prime_related(rows)
        return rows

    async def _batch_load(self, ids: list[Any]) -> list[T | None]:
        """Batch load entities by IDs.

        Returns results in the same order as input IDs, None for missing IDs.
        """
        if self._state.preloaded:
            self._lazy.debug(lambda: f"preloaded miss for {len(ids)} keys")
            return [None] * len(ids)

        rows = await self._repository.find_many(
            self._session,
            where={"id": ids},
            include=self._include_for(ids),
        )
        self._prime_related(rows)
        by_id = {row.id: row for row in rows}  # type: ignore[attr-defined]
        return [by_id.get(id_) for id_ in ids]

    def _include_for(self, ids: Sequence[Any]) -> tuple[str, ...]:
        _ = ids
        return self.include

    def _include_for_all(self) -> tuple[str, ...]:
        return self.include

    def _prime_related(self, rows: Sequence[T]) -> None:
        """Push relations embedded by ``include`` into sibling loaders."""


__all__ = ["EntityLoader", "LoaderState", "group_by"]
