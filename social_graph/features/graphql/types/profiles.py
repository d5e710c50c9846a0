"""GraphQL types for profiles.

Provides:
- ProfileType: GraphQL representation of a Profile
- Input types: CreateProfileInput, ChangeProfileInput
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated
from uuid import UUID

import strawberry
from strawberry.types import Info

from social_graph.features.graphql.context import GraphQLContext
from social_graph.features.graphql.types.member_types import MemberTypeId, MemberTypeType
from social_graph.features.graphql.utils import wants_user_relations

if TYPE_CHECKING:
    from social_graph.features.members.models import Profile

UserRef = Annotated["UserType", strawberry.lazy("social_graph.features.graphql.types.users")]


@strawberry.type(name="Profile", description="Per-user profile linked to a member type")
class ProfileType:
    """GraphQL type for Profile entity.

    ``memberType`` and ``user`` resolve through the request's data loaders.
    """

    id: UUID
    is_male: bool
    year_of_birth: int
    user_id: UUID
    member_type_id: MemberTypeId | None

    @strawberry.field(description="Member type of this profile")
    async def member_type(self, info: Info[GraphQLContext, None]) -> MemberTypeType | None:
        if self.member_type_id is None:
            return None
        member_type = await info.context.loaders.member_types.load(self.member_type_id.value)
        return MemberTypeType.from_model(member_type) if member_type else None

    @strawberry.field(description="Owner of this profile")
    async def user(self, info: Info[GraphQLContext, None]) -> UserRef | None:
        from social_graph.features.graphql.types.users import UserType

        user = await info.context.loaders.users.load(
            self.user_id, with_relations=wants_user_relations(info)
        )
        return UserType.from_model(user) if user else None

    @classmethod
    def from_model(cls, profile: Profile) -> ProfileType:
        """Convert SQLAlchemy model to GraphQL type."""
        return cls(
            id=profile.id,
            is_male=profile.is_male,
            year_of_birth=profile.year_of_birth,
            user_id=profile.user_id,
            member_type_id=MemberTypeId(profile.member_type_id) if profile.member_type_id else None,
        )


# --- Input Types ---


@strawberry.input(description="Input for creating a profile")
class CreateProfileInput:
    is_male: bool
    year_of_birth: int
    user_id: UUID
    member_type_id: MemberTypeId


@strawberry.input(description="Input for changing a profile; omitted fields stay unchanged")
class ChangeProfileInput:
    is_male: bool | None = strawberry.UNSET
    year_of_birth: int | None = strawberry.UNSET
    member_type_id: MemberTypeId | None = strawberry.UNSET


__all__ = ["ChangeProfileInput", "CreateProfileInput", "ProfileType"]
