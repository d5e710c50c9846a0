"""DataLoader for users, with an optional relation hint.

Callers pass ``with_relations=True`` when the selection under the user
touches profile, posts or subscriptions. The hint is not part of the cache
key: a batch embeds the relations when any of its keys asked for them, and
the embedded rows are primed into the sibling loaders so the nested field
resolvers hit the cache instead of the store.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from social_graph.core.database import is_loaded
from social_graph.features.graphql.dataloaders.base import EntityLoader, LoaderState
from social_graph.features.members.models import User
from social_graph.features.members.repository import get_user_repository

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

    from social_graph.features.graphql.dataloaders.member_types import MemberTypeLoader
    from social_graph.features.graphql.dataloaders.posts import PostLoader
    from social_graph.features.graphql.dataloaders.profiles import ProfileLoader
    from social_graph.features.graphql.dataloaders.subscriptions import (
        SubscriptionEdgeLoader,
    )

USER_RELATIONS = ("posts", "profile.member_type", "subscriptions_out", "subscriptions_in")


class UserLoader(EntityLoader[User]):
    """Batch-load users by ID.

    Usage:
        user = await loaders.users.load(user_id)
        user = await loaders.users.load(user_id, with_relations=True)
        users = await loaders.users.load_all(with_relations=True)
    """

    def __init__(
        self,
        session: AsyncSession,
        state: LoaderState,
        *,
        posts: PostLoader,
        profiles: ProfileLoader,
        member_types: MemberTypeLoader,
        subscriptions: SubscriptionEdgeLoader,
    ) -> None:
        super().__init__(session, get_user_repository(), state)
        self._posts = posts
        self._profiles = profiles
        self._member_types = member_types
        self._subscriptions = subscriptions
        self._relation_keys: set[Any] = set()
        self._all_with_relations = False

    async def load(self, id_: Any, *, with_relations: bool = False) -> User | None:
        """Load a single user by ID.

        Batched with other load() calls made in the same event loop tick.

        Args:
            id_: User UUID
            with_relations: Embed posts, profile and subscription edges in the
                batch that fetches this user

        Returns:
            User if found, None otherwise
        """
        if with_relations and self._by_id.cache_map.get(id_) is None:
            self._relation_keys.add(id_)
        return await self._by_id.load(id_)

    async def load_many(
        self, ids: Sequence[Any], *, with_relations: bool = False
    ) -> list[User | None]:
        """Load multiple users by IDs, in the same order (None for missing)."""
        if with_relations:
            cache = self._by_id.cache_map
            self._relation_keys.update(id_ for id_ in ids if cache.get(id_) is None)
        return await self._by_id.load_many(ids)

    async def load_all(self, *, with_relations: bool = False) -> list[User]:
        """Load every user, embedding relations if the first caller asks for them."""
        if self._all is None:
            self._all_with_relations = with_relations
        return await super().load_all()

    def clear_all(self) -> None:
        super().clear_all()
        self._relation_keys.clear()

    def _include_for(self, ids: Sequence[Any]) -> tuple[str, ...]:
        wanted = not self._relation_keys.isdisjoint(ids)
        self._relation_keys.difference_update(ids)
        return USER_RELATIONS if wanted else ()

    def _include_for_all(self) -> tuple[str, ...]:
        return USER_RELATIONS if self._all_with_relations else ()

    def _prime_related(self, rows: Sequence[User]) -> None:
        for user in rows:
            if is_loaded(user, "posts"):
                self._posts.prime_author(user.id, list(user.posts))
            if is_loaded(user, "profile"):
                profile = user.profile
                self._profiles.prime_user(user.id, profile)
                if profile is not None and is_loaded(profile, "member_type"):
                    self._member_types.prime(profile.member_type)
            if is_loaded(user, "subscriptions_out"):
                self._subscriptions.prime_outgoing(user.id, list(user.subscriptions_out))
            if is_loaded(user, "subscriptions_in"):
                self._subscriptions.prime_incoming(user.id, list(user.subscriptions_in))


__all__ = ["USER_RELATIONS", "UserLoader"]
