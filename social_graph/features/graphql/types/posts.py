"""GraphQL types for posts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated
from uuid import UUID

import strawberry
from strawberry.types import Info

from social_graph.features.graphql.context import GraphQLContext
from social_graph.features.graphql.utils import wants_user_relations

if TYPE_CHECKING:
    from social_graph.features.members.models import Post

UserRef = Annotated["UserType", strawberry.lazy("social_graph.features.graphql.types.users")]


@strawberry.type(name="Post", description="A post written by a user")
class PostType:
    id: UUID
    title: str
    content: str
    author_id: UUID

    @strawberry.field(description="Author of the post")
    async def author(self, info: Info[GraphQLContext, None]) -> UserRef | None:
        from social_graph.features.graphql.types.users import UserType

        user = await info.context.loaders.users.load(
            self.author_id, with_relations=wants_user_relations(info)
        )
        return UserType.from_model(user) if user else None

    @classmethod
    def from_model(cls, post: Post) -> PostType:
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            author_id=post.author_id,
        )


@strawberry.input(description="Input for creating a post")
class CreatePostInput:
    title: str
    content: str
    author_id: UUID


@strawberry.input(description="Input for changing a post; omitted fields stay unchanged")
class ChangePostInput:
    title: str | None = strawberry.UNSET
    content: str | None = strawberry.UNSET


__all__ = ["ChangePostInput", "CreatePostInput", "PostType"]
