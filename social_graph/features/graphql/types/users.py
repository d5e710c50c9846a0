"""GraphQL types for users.

Provides:
- UserType: GraphQL representation of a User
- Input types: CreateUserInput, ChangeUserInput

Subscription lists are projections: the edge loader returns the edges of a
user, and the counterpart ids are resolved through the user loader, so the
counterparts are regular ``UserType`` objects whose own nested fields resolve
through loaders again. A self-subscription shows the user in both of their
own lists.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry
from strawberry.types import Info

from social_graph.features.graphql.context import GraphQLContext
from social_graph.features.graphql.types.posts import PostType
from social_graph.features.graphql.types.profiles import ProfileType
from social_graph.features.graphql.utils import wants_user_relations

if TYPE_CHECKING:
    from collections.abc import Iterable

    from social_graph.features.members.models import User


@strawberry.type(name="User", description="A member of the social graph")
class UserType:
    """GraphQL type for User entity.

    Maps from SQLAlchemy User model to GraphQL type; every relation field
    resolves through the request's data loaders.
    """

    id: UUID
    name: str
    balance: float

    @strawberry.field(description="Profile of the user, if any")
    async def profile(self, info: Info[GraphQLContext, None]) -> ProfileType | None:
        profile = await info.context.loaders.profiles.load_by_user(self.id)
        return ProfileType.from_model(profile) if profile else None

    @strawberry.field(description="Posts written by the user")
    async def posts(self, info: Info[GraphQLContext, None]) -> list[PostType]:
        posts = await info.context.loaders.posts.load_by_author(self.id)
        return [PostType.from_model(post) for post in posts]

    @strawberry.field(description="Authors this user is subscribed to")
    async def user_subscribed_to(self, info: Info[GraphQLContext, None]) -> list[UserType]:
        loaders = info.context.loaders
        edges = await loaders.subscriptions.load_outgoing(self.id)
        return await _project(info, (edge.author_id for edge in edges))

    @strawberry.field(description="Users subscribed to this user")
    async def subscribed_to_user(self, info: Info[GraphQLContext, None]) -> list[UserType]:
        loaders = info.context.loaders
        edges = await loaders.subscriptions.load_incoming(self.id)
        return await _project(info, (edge.subscriber_id for edge in edges))

    @classmethod
    def from_model(cls, user: User) -> UserType:
        """Convert SQLAlchemy model to GraphQL type.

        Args:
            user: SQLAlchemy User model instance

        Returns:
            UserType instance
        """
        return cls(id=user.id, name=user.name, balance=user.balance)


async def _project(info: Info[GraphQLContext, None], user_ids: Iterable[UUID]) -> list[UserType]:
    users = await info.context.loaders.users.load_many(
        list(user_ids), with_relations=wants_user_relations(info)
    )
    return [UserType.from_model(user) for user in users if user is not None]


# --- Input Types ---


@strawberry.input(description="Input for creating a user")
class CreateUserInput:
    name: str
    balance: float


@strawberry.input(description="Input for changing a user; omitted fields stay unchanged")
class ChangeUserInput:
    name: str | None = strawberry.UNSET
    balance: float | None = strawberry.UNSET


__all__ = ["ChangeUserInput", "CreateUserInput", "UserType"]
