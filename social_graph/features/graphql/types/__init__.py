"""GraphQL types for the members API."""

from social_graph.features.graphql.types.member_types import MemberTypeId, MemberTypeType
from social_graph.features.graphql.types.posts import ChangePostInput, CreatePostInput, PostType
from social_graph.features.graphql.types.profiles import (
    ChangeProfileInput,
    CreateProfileInput,
    ProfileType,
)
from social_graph.features.graphql.types.subscriptions import SubscriptionType
from social_graph.features.graphql.types.users import ChangeUserInput, CreateUserInput, UserType

__all__ = [
    "ChangePostInput",
    "ChangeProfileInput",
    "ChangeUserInput",
    "CreatePostInput",
    "CreateProfileInput",
    "CreateUserInput",
    "MemberTypeId",
    "MemberTypeType",
    "PostType",
    "ProfileType",
    "SubscriptionType",
    "UserType",
]
