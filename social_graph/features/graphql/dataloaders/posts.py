"""DataLoader for posts, by post id and grouped by author."""

from __future__ import annotations

from typing import TYPE_CHECKING

from strawberry.dataloader import DataLoader

from social_graph.features.graphql.dataloaders.base import EntityLoader, LoaderState, group_by
from social_graph.features.members.models import Post
from social_graph.features.members.repository import get_post_repository

if TYPE_CHECKING:
    from collections.abc import Mapping
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession


class PostLoader(EntityLoader[Post]):
    """Batch-load posts.

    ``load_by_author`` is a one-to-many loader: the batch issues one
    ``author_id IN (...)`` read and groups the rows per author, with an
    empty list for authors without posts.

    Usage:
        post = await loaders.posts.load(post_id)
        posts = await loaders.posts.load_by_author(user_id)
    """

    def __init__(self, session: AsyncSession, state: LoaderState) -> None:
        super().__init__(session, get_post_repository(), state)
        self._by_author: DataLoader[UUID, list[Post]] = DataLoader(
            load_fn=self._batch_load_by_author
        )

    async def load_by_author(self, author_id: UUID) -> list[Post]:
        """Load every post written by ``author_id``."""
        return await self._by_author.load(author_id)

    def prime_author(self, author_id: UUID, posts: list[Post]) -> None:
        """Cache the complete post list of ``author_id``."""
        self._by_author.prime(author_id, posts)
        self.prime_many(posts)

    def prime_authors(self, posts_by_author: Mapping[UUID, list[Post]]) -> None:
        self._by_author.prime_many(posts_by_author)

    def clear_all(self) -> None:
        super().clear_all()
        self._by_author.clear_all()

    async def _batch_load_by_author(self, author_ids: list[UUID]) -> list[list[Post]]:
        if self.preloaded:
            return [[] for _ in author_ids]

        rows = await self._repository.find_many(
            self._session, where={"author_id": author_ids}
        )
        self.prime_many(rows)
        grouped = group_by(rows, lambda post: post.author_id)
        return [grouped.get(author_id, []) for author_id in author_ids]


__all__ = ["PostLoader"]
