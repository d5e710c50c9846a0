"""DataLoader container and factory.

DataLoaders batch and cache database lookups within a single request,
preventing N+1 query problems common in GraphQL resolvers.

Each GraphQL request gets its own DataLoader instances to ensure proper
batching boundaries and cache isolation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from social_graph.features.graphql.dataloaders.base import EntityLoader, LoaderState
from social_graph.features.graphql.dataloaders.member_types import MemberTypeLoader
from social_graph.features.graphql.dataloaders.posts import PostLoader
from social_graph.features.graphql.dataloaders.preload import PreloadController
from social_graph.features.graphql.dataloaders.profiles import ProfileLoader
from social_graph.features.graphql.dataloaders.subscriptions import SubscriptionEdgeLoader
from social_graph.features.graphql.dataloaders.users import USER_RELATIONS, UserLoader

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


@dataclass
class DataLoaders:
    """Container for all DataLoader instances.

    One instance created per GraphQL request.
    Provides typed access to loaders.

    Usage in resolver:
        ctx = info.context
        user = await ctx.loaders.users.load(user_id)
    """

    state: LoaderState
    users: UserLoader
    posts: PostLoader
    profiles: ProfileLoader
    member_types: MemberTypeLoader
    subscriptions: SubscriptionEdgeLoader
    preload: PreloadController

    def clear_all(self) -> None:
        """Drop every cached value, e.g. after a mutation changed the store."""
        for loader in (
            self.users,
            self.posts,
            self.profiles,
            self.member_types,
            self.subscriptions,
        ):
            loader.clear_all()
        self.state.preloaded = False
        self.preload.reset()


def create_dataloaders(session: AsyncSession) -> DataLoaders:
    """Factory for creating request-scoped DataLoaders.

    Args:
        session: Database session for the current request

    Returns:
        DataLoaders container with all loaders initialized
    """
    state = LoaderState()
    member_types = MemberTypeLoader(session, state)
    profiles = ProfileLoader(session, state, member_types=member_types)
    posts = PostLoader(session, state)
    subscriptions = SubscriptionEdgeLoader(session, state)
    users = UserLoader(
        session,
        state,
        posts=posts,
        profiles=profiles,
        member_types=member_types,
        subscriptions=subscriptions,
    )
    preload = PreloadController(
        session,
        state,
        users=users,
        posts=posts,
        profiles=profiles,
        member_types=member_types,
        subscriptions=subscriptions,
    )
    return DataLoaders(
        state=state,
        users=users,
        posts=posts,
        profiles=profiles,
        member_types=member_types,
        subscriptions=subscriptions,
        preload=preload,
    )


__all__ = [
    "USER_RELATIONS",
    "DataLoaders",
    "EntityLoader",
    "LoaderState",
    "MemberTypeLoader",
    "PostLoader",
    "PreloadController",
    "ProfileLoader",
    "SubscriptionEdgeLoader",
    "UserLoader",
    "create_dataloaders",
]
