"""GraphQL type for subscription edges (subscriber -> author)."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

import strawberry
from strawberry.types import Info

from social_graph.features.graphql.context import GraphQLContext
from social_graph.features.graphql.types.users import UserType
from social_graph.features.graphql.utils import wants_user_relations

if TYPE_CHECKING:
    from social_graph.features.members.models import SubscribersOnAuthors


@strawberry.type(name="SubscribersOnAuthors", description="A subscriber following an author")
class SubscriptionType:
    subscriber_id: UUID
    author_id: UUID
    created_at: datetime | None

    @strawberry.field(description="The following user")
    async def subscriber(self, info: Info[GraphQLContext, None]) -> UserType | None:
        user = await info.context.loaders.users.load(
            self.subscriber_id, with_relations=wants_user_relations(info)
        )
        return UserType.from_model(user) if user else None

    @strawberry.field(description="The followed user")
    async def author(self, info: Info[GraphQLContext, None]) -> UserType | None:
        user = await info.context.loaders.users.load(
            self.author_id, with_relations=wants_user_relations(info)
        )
        return UserType.from_model(user) if user else None

    @classmethod
    def from_model(cls, edge: SubscribersOnAuthors) -> SubscriptionType:
        return cls(
            subscriber_id=edge.subscriber_id,
            author_id=edge.author_id,
            created_at=edge.created_at,
        )


__all__ = ["SubscriptionType"]
