"""Query resolvers for the GraphQL API.

Single-entity queries go through the loaders and return ``null`` when the
entity does not exist. The table-returning list queries are the only place
where a store failure is downgraded: they log it and return an empty list so
the other root fields of the response still resolve.
"""

from __future__ import annotations

import logging
from uuid import UUID

import strawberry
from sqlalchemy.exc import SQLAlchemyError
from strawberry.types import Info

from social_graph.core.database import RepositoryError
from social_graph.features.graphql.context import GraphQLContext
from social_graph.features.graphql.types import (
    MemberTypeId,
    MemberTypeType,
    PostType,
    ProfileType,
    SubscriptionType,
    UserType,
)
from social_graph.features.graphql.utils import wants_user_relations

logger = logging.getLogger(__name__)

STORE_ERRORS = (SQLAlchemyError, RepositoryError)


@strawberry.type(description="Root query type")
class Query:
    """Root query type for the members API."""

    @strawberry.field(description="All member types")
    async def member_types(self, info: Info[GraphQLContext, None]) -> list[MemberTypeType]:
        try:
            member_types = await info.context.loaders.member_types.load_all()
        except STORE_ERRORS:
            logger.exception("Failed to list member types")
            return []
        return [MemberTypeType.from_model(member_type) for member_type in member_types]

    @strawberry.field(description="Get a member type by id")
    async def member_type(
        self,
        info: Info[GraphQLContext, None],
        id: MemberTypeId,  # noqa: A002
    ) -> MemberTypeType | None:
        member_type = await info.context.loaders.member_types.load(id.value)
        return MemberTypeType.from_model(member_type) if member_type else None

    @strawberry.field(description="All users")
    async def users(self, info: Info[GraphQLContext, None]) -> list[UserType]:
        """List every user.

        When the selection touches profile, posts or subscriptions the single
        full-table read embeds those relations and primes the sibling loaders.
        """
        try:
            users = await info.context.loaders.users.load_all(
                with_relations=wants_user_relations(info)
            )
        except STORE_ERRORS:
            logger.exception("Failed to list users")
            return []
        return [UserType.from_model(user) for user in users]

    @strawberry.field(description="Get a user by id")
    async def user(
        self,
        info: Info[GraphQLContext, None],
        id: UUID,  # noqa: A002
    ) -> UserType | None:
        user = await info.context.loaders.users.load(
            id, with_relations=wants_user_relations(info)
        )
        return UserType.from_model(user) if user else None

    @strawberry.field(description="All posts")
    async def posts(self, info: Info[GraphQLContext, None]) -> list[PostType]:
        try:
            posts = await info.context.loaders.posts.load_all()
        except STORE_ERRORS:
            logger.exception("Failed to list posts")
            return []
        return [PostType.from_model(post) for post in posts]

    @strawberry.field(description="Get a post by id")
    async def post(
        self,
        info: Info[GraphQLContext, None],
        id: UUID,  # noqa: A002
    ) -> PostType | None:
        post = await info.context.loaders.posts.load(id)
        return PostType.from_model(post) if post else None

    @strawberry.field(description="All profiles")
    async def profiles(self, info: Info[GraphQLContext, None]) -> list[ProfileType]:
        try:
            profiles = await info.context.loaders.profiles.load_all()
        except STORE_ERRORS:
            logger.exception("Failed to list profiles")
            return []
        return [ProfileType.from_model(profile) for profile in profiles]

    @strawberry.field(description="Get a profile by id")
    async def profile(
        self,
        info: Info[GraphQLContext, None],
        id: UUID,  # noqa: A002
    ) -> ProfileType | None:
        profile = await info.context.loaders.profiles.load(id)
        return ProfileType.from_model(profile) if profile else None

    @strawberry.field(description="All subscriber -> author edges")
    async def subscriptions(self, info: Info[GraphQLContext, None]) -> list[SubscriptionType]:
        try:
            edges = await info.context.loaders.subscriptions.load_all()
        except STORE_ERRORS:
            logger.exception("Failed to list subscriptions")
            return []
        return [SubscriptionType.from_model(edge) for edge in edges]


__all__ = ["Query"]
