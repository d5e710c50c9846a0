"""Mutation resolvers for the GraphQL API.

Every mutation runs one repository write and commits. On failure the
session is rolled back and the error is re-raised as a ``GraphQLError``
whose ``extensions.code`` is CONFLICT, NOT_FOUND or INTERNAL_ERROR.
After a successful write the request's loader caches are dropped so later
fields of the same operation read fresh data.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID

import strawberry
from sqlalchemy.exc import SQLAlchemyError
from strawberry.types import Info

from social_graph.core.database import ConflictError, NotFoundError, RepositoryError
from social_graph.features.graphql.context import GraphQLContext
from social_graph.features.graphql.error_handler import to_graphql_error
from social_graph.features.graphql.types import (
    ChangePostInput,
    ChangeProfileInput,
    ChangeUserInput,
    CreatePostInput,
    CreateProfileInput,
    CreateUserInput,
    PostType,
    ProfileType,
    UserType,
)
from social_graph.features.graphql.utils import provided_fields
from social_graph.features.members.repository import (
    get_post_repository,
    get_profile_repository,
    get_subscription_repository,
    get_user_repository,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable

logger = logging.getLogger(__name__)

USER_DELETED = "User deleted successfully"
POST_DELETED = "Post deleted successfully"
PROFILE_DELETED = "Profile deleted successfully"
SUBSCRIBED = "Subscribed successfully"
UNSUBSCRIBED = "Unsubscribed successfully"


async def _write[T](ctx: GraphQLContext, operation: str, action: Awaitable[T]) -> T:
    """Run ``action``, commit, and reset the loader caches.

    Raises:
        GraphQLError: With a CONFLICT, NOT_FOUND or INTERNAL_ERROR code
    """
    try:
        result = await action
        await ctx.session.commit()
    except (ConflictError, NotFoundError) as e:
        await ctx.session.rollback()
        logger.info("%s rejected: %s", operation, e, extra={"operation": operation})
        raise to_graphql_error(e) from e
    except (SQLAlchemyError, RepositoryError) as e:
        await ctx.session.rollback()
        logger.exception("%s failed", operation, extra={"operation": operation})
        raise to_graphql_error(e) from e

    ctx.loaders.clear_all()
    return result


@strawberry.type(description="Root mutation type")
class Mutation:
    """Root mutation type for the members API."""

    @strawberry.mutation(description="Create a user")
    async def create_user(
        self, info: Info[GraphQLContext, None], dto: CreateUserInput
    ) -> UserType:
        ctx = info.context
        user = await _write(
            ctx, "createUser", get_user_repository().create(ctx.session, provided_fields(dto))
        )
        ctx.loaders.users.prime(user)
        logger.info("Created user: %s", user.id)
        return UserType.from_model(user)

    @strawberry.mutation(description="Create the profile of a user")
    async def create_profile(
        self, info: Info[GraphQLContext, None], dto: CreateProfileInput
    ) -> ProfileType:
        """Create a profile.

        A second profile for the same user, or a user that does not exist,
        is rejected with a CONFLICT error.
        """
        ctx = info.context
        profile = await _write(
            ctx, "createProfile", get_profile_repository().create(ctx.session, provided_fields(dto))
        )
        ctx.loaders.profiles.prime_user(profile.user_id, profile)
        logger.info("Created profile: %s", profile.id)
        return ProfileType.from_model(profile)

    @strawberry.mutation(description="Create a post")
    async def create_post(
        self, info: Info[GraphQLContext, None], dto: CreatePostInput
    ) -> PostType:
        ctx = info.context
        post = await _write(
            ctx, "createPost", get_post_repository().create(ctx.session, provided_fields(dto))
        )
        ctx.loaders.posts.prime(post)
        logger.info("Created post: %s", post.id)
        return PostType.from_model(post)

    @strawberry.mutation(description="Change the supplied fields of a user")
    async def change_user(
        self,
        info: Info[GraphQLContext, None],
        id: UUID,  # noqa: A002
        dto: ChangeUserInput,
    ) -> UserType:
        ctx = info.context
        user = await _write(
            ctx, "changeUser", get_user_repository().update(ctx.session, id, provided_fields(dto))
        )
        ctx.loaders.users.prime(user)
        return UserType.from_model(user)

    @strawberry.mutation(description="Change the supplied fields of a profile")
    async def change_profile(
        self,
        info: Info[GraphQLContext, None],
        id: UUID,  # noqa: A002
        dto: ChangeProfileInput,
    ) -> ProfileType:
        ctx = info.context
        profile = await _write(
            ctx,
            "changeProfile",
            get_profile_repository().update(ctx.session, id, provided_fields(dto)),
        )
        ctx.loaders.profiles.prime(profile)
        return ProfileType.from_model(profile)

    @strawberry.mutation(description="Change the supplied fields of a post")
    async def change_post(
        self,
        info: Info[GraphQLContext, None],
        id: UUID,  # noqa: A002
        dto: ChangePostInput,
    ) -> PostType:
        ctx = info.context
        post = await _write(
            ctx, "changePost", get_post_repository().update(ctx.session, id, provided_fields(dto))
        )
        ctx.loaders.posts.prime(post)
        return PostType.from_model(post)

    @strawberry.mutation(description="Delete a user with its profile, posts and subscriptions")
    async def delete_user(
        self,
        info: Info[GraphQLContext, None],
        id: UUID,  # noqa: A002
    ) -> str:
        ctx = info.context
        await _write(ctx, "deleteUser", get_user_repository().delete(ctx.session, id))
        return USER_DELETED

    @strawberry.mutation(description="Delete a post")
    async def delete_post(
        self,
        info: Info[GraphQLContext, None],
        id: UUID,  # noqa: A002
    ) -> str:
        ctx = info.context
        await _write(ctx, "deletePost", get_post_repository().delete(ctx.session, id))
        return POST_DELETED

    @strawberry.mutation(description="Delete a profile")
    async def delete_profile(
        self,
        info: Info[GraphQLContext, None],
        id: UUID,  # noqa: A002
    ) -> str:
        ctx = info.context
        await _write(ctx, "deleteProfile", get_profile_repository().delete(ctx.session, id))
        return PROFILE_DELETED

    @strawberry.mutation(description="Subscribe a user to an author")
    async def subscribe_to(
        self,
        info: Info[GraphQLContext, None],
        user_id: UUID,
        author_id: UUID,
    ) -> str:
        """Create the edge ``userId -> authorId``.

        Subscribing twice to the same author fails with a CONFLICT error.
        """
        ctx = info.context
        await _write(
            ctx,
            "subscribeTo",
            get_subscription_repository().subscribe(ctx.session, user_id, author_id),
        )
        return SUBSCRIBED

    @strawberry.mutation(description="Unsubscribe a user from an author")
    async def unsubscribe_from(
        self,
        info: Info[GraphQLContext, None],
        user_id: UUID,
        author_id: UUID,
    ) -> str:
        """Remove the edge ``userId -> authorId``; a missing edge is NOT_FOUND."""
        ctx = info.context
        await _write(
            ctx,
            "unsubscribeFrom",
            get_subscription_repository().unsubscribe(ctx.session, user_id, author_id),
        )
        return UNSUBSCRIBED


__all__ = ["Mutation"]
