"""GraphQL test fixtures.

Provides:
- GraphQL context with fresh request-scoped loaders
- Query documents shared by the GraphQL tests

The sample social graph and the store call spies live in ``tests/conftest.py``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from social_graph.features.graphql.context import GraphQLContext
from social_graph.features.graphql.dataloaders import create_dataloaders

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


@pytest.fixture
def graphql_context(db_session: AsyncSession) -> GraphQLContext:
    """Create a GraphQL context for testing.

    Note: This is a synchronous fixture because GraphQLContext is a dataclass.
    """
    return GraphQLContext(
        session=db_session,
        loaders=create_dataloaders(db_session),
        correlation_id="test-correlation-id",
    )


def by_id(items: list[dict]) -> list[dict]:
    """Sort a list of GraphQL objects by id, recursing into nested lists."""
    normalized = []
    for item in items:
        normalized.append({
            key: by_id(value) if isinstance(value, list) else value
            for key, value in item.items()
        })
    return sorted(normalized, key=lambda item: str(item.get("id", "")))


# ============================================================================
# Query documents
# ============================================================================

MEMBER_TYPES_QUERY = """
    query {
        memberTypes {
            id
            discount
            postsLimitPerMonth
        }
    }
"""

MEMBER_TYPE_QUERY = """
    query GetMemberType($id: MemberTypeId!) {
        memberType(id: $id) {
            id
            discount
            postsLimitPerMonth
        }
    }
"""

USER_QUERY = """
    query GetUser($id: UUID!) {
        user(id: $id) {
            id
            name
            balance
            profile {
                id
                isMale
                yearOfBirth
                memberType {
                    id
                    discount
                }
            }
            posts {
                id
                title
            }
        }
    }
"""

USERS_WITH_RELATIONS_QUERY = """
    query {
        users {
            id
            name
            profile {
                id
                memberType {
                    id
                    discount
                }
            }
            posts {
                id
                title
            }
            userSubscribedTo {
                id
                name
            }
            subscribedToUser {
                id
                name
            }
        }
    }
"""

DEEP_GRAPH_QUERY = """
    query {
        users {
            id
            name
            posts {
                id
            }
            profile {
                id
            }
            userSubscribedTo {
                id
                subscribedToUser {
                    id
                }
            }
        }
        posts {
            id
            title
            author {
                id
                name
            }
        }
        profiles {
            id
            memberType {
                id
            }
            user {
                id
            }
        }
        memberTypes {
            id
            postsLimitPerMonth
        }
    }
"""

POSTS_QUERY = """
    query {
        posts {
            id
            title
            content
            authorId
            author {
                id
                name
            }
        }
    }
"""

POST_QUERY = """
    query GetPost($id: UUID!) {
        post(id: $id) {
            id
            title
            author {
                name
            }
        }
    }
"""

PROFILES_QUERY = """
    query {
        profiles {
            id
            userId
            memberTypeId
            memberType {
                id
            }
            user {
                name
            }
        }
    }
"""

PROFILE_QUERY = """
    query GetProfile($id: UUID!) {
        profile(id: $id) {
            id
            isMale
            yearOfBirth
            memberType {
                id
            }
        }
    }
"""

SUBSCRIPTIONS_QUERY = """
    query {
        subscriptions {
            subscriberId
            authorId
            createdAt
            subscriber {
                name
            }
            author {
                name
            }
        }
    }
"""

CREATE_USER_MUTATION = """
    mutation CreateUser($dto: CreateUserInput!) {
        createUser(dto: $dto) {
            id
            name
            balance
        }
    }
"""

CHANGE_USER_MUTATION = """
    mutation ChangeUser($id: UUID!, $dto: ChangeUserInput!) {
        changeUser(id: $id, dto: $dto) {
            id
            name
            balance
        }
    }
"""

DELETE_USER_MUTATION = """
    mutation DeleteUser($id: UUID!) {
        deleteUser(id: $id)
    }
"""

CREATE_PROFILE_MUTATION = """
    mutation CreateProfile($dto: CreateProfileInput!) {
        createProfile(dto: $dto) {
            id
            isMale
            yearOfBirth
            userId
            memberType {
                id
            }
        }
    }
"""

CHANGE_PROFILE_MUTATION = """
    mutation ChangeProfile($id: UUID!, $dto: ChangeProfileInput!) {
        changeProfile(id: $id, dto: $dto) {
            id
            yearOfBirth
            memberTypeId
        }
    }
"""

DELETE_PROFILE_MUTATION = """
    mutation DeleteProfile($id: UUID!) {
        deleteProfile(id: $id)
    }
"""

CREATE_POST_MUTATION = """
    mutation CreatePost($dto: CreatePostInput!) {
        createPost(dto: $dto) {
            id
            title
            content
            authorId
        }
    }
"""

CHANGE_POST_MUTATION = """
    mutation ChangePost($id: UUID!, $dto: ChangePostInput!) {
        changePost(id: $id, dto: $dto) {
            id
            title
            content
        }
    }
"""

DELETE_POST_MUTATION = """
    mutation DeletePost($id: UUID!) {
        deletePost(id: $id)
    }
"""

SUBSCRIBE_MUTATION = """
    mutation Subscribe($userId: UUID!, $authorId: UUID!) {
        subscribeTo(userId: $userId, authorId: $authorId)
    }
"""

UNSUBSCRIBE_MUTATION = """
    mutation Unsubscribe($userId: UUID!, $authorId: UUID!) {
        unsubscribeFrom(userId: $userId, authorId: $authorId)
    }
"""

POSTS_AND_USERS_QUERY = """
    query PostsAndUsers {
        posts {
            id
        }
        users {
            id
            name
        }
    }
"""
