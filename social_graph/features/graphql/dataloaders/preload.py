"""Whole-dataset warm-up for relation-heavy queries.

``PreloadController.preload_all()`` reads the five tables once each, groups
posts, profiles and subscription edges by their owning user in memory, and
primes every loader cache, including empty lists and ``None`` for users
without posts, profile or edges. It then flips ``LoaderState.preloaded`` so
batch functions answer cache misses from memory.

Whether to preload is decided per operation by ``PreloadExtension``; the
outcome of a query is the same either way, only the number of store calls
changes.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from social_graph.features.graphql.dataloaders.base import LoaderState, group_by
from social_graph.features.members.repository import (
    get_member_type_repository,
    get_post_repository,
    get_profile_repository,
    get_subscription_repository,
    get_user_repository,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from social_graph.features.graphql.dataloaders.member_types import MemberTypeLoader
    from social_graph.features.graphql.dataloaders.posts import PostLoader
    from social_graph.features.graphql.dataloaders.profiles import ProfileLoader
    from social_graph.features.graphql.dataloaders.subscriptions import (
        SubscriptionEdgeLoader,
    )
    from social_graph.features.graphql.dataloaders.users import UserLoader

logger = logging.getLogger(__name__)


class PreloadController:
    """Run the preload at most once per request.

    The first caller starts a single task; concurrent callers await the same
    task and later callers return immediately.
    """

    def __init__(
        self,
        session: AsyncSession,
        state: LoaderState,
        *,
        users: UserLoader,
        posts: PostLoader,
        profiles: ProfileLoader,
        member_types: MemberTypeLoader,
        subscriptions: SubscriptionEdgeLoader,
    ) -> None:
        self._session = session
        self._state = state
        self._users = users
        self._posts = posts
        self._profiles = profiles
        self._member_types = member_types
        self._subscriptions = subscriptions
        self._task: asyncio.Task[int] | None = None

    @property
    def done(self) -> bool:
        return self._state.preloaded

    def reset(self) -> None:
        """Allow a later preload after the caches were cleared."""
        self._task = None

    async def preload_all(self) -> int:
        """Preload every table and prime all loaders.

        Returns:
            Number of users loaded
        """
        if self._task is None:
            self._task = asyncio.ensure_future(self._preload())
        return await self._task

    async def _preload(self) -> int:
        started = time.perf_counter()
        try:
            users = list(await get_user_repository().find_many(self._session))
            posts = list(await get_post_repository().find_many(self._session))
            profiles = list(await get_profile_repository().find_many(self._session))
            member_types = list(await get_member_type_repository().find_many(self._session))
            edges = list(await get_subscription_repository().find_many(self._session))
        except BaseException:
            self._task = None
            raise

        user_ids = [user.id for user in users]
        posts_by_author = group_by(posts, lambda post: post.author_id)
        profile_by_user = {profile.user_id: profile for profile in profiles}

        self._member_types.prime_all(member_types)
        self._posts.prime_all(posts)
        self._posts.prime_authors({uid: posts_by_author.get(uid, []) for uid in user_ids})
        self._profiles.prime_all(profiles)
        self._profiles.prime_users({uid: profile_by_user.get(uid) for uid in user_ids})
        self._subscriptions.prime_all(edges, user_ids)
        self._users.prime_all(users)
        self._state.preloaded = True

        duration_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "Preloaded data in %.1fms. Users total: %d",
            duration_ms,
            len(users),
            extra={
                "duration_ms": round(duration_ms, 2),
                "users": len(users),
                "posts": len(posts),
                "profiles": len(profiles),
                "member_types": len(member_types),
                "subscriptions": len(edges),
            },
        )
        return len(users)


__all__ = ["PreloadController"]
