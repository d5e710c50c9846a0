"""Tests for GraphQL mutation resolvers."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import uuid4

import pytest
from sqlalchemy import func, select

from social_graph.features.graphql.dataloaders import create_dataloaders
from social_graph.features.graphql.schema import schema
from social_graph.features.members.models import Post, Profile, SubscribersOnAuthors, User
from social_graph.features.members.repository import ALREADY_SUBSCRIBED
from tests.graphql.conftest import (
    CHANGE_POST_MUTATION,
    CHANGE_PROFILE_MUTATION,
    CHANGE_USER_MUTATION,
    CREATE_POST_MUTATION,
    CREATE_PROFILE_MUTATION,
    CREATE_USER_MUTATION,
    DELETE_POST_MUTATION,
    DELETE_PROFILE_MUTATION,
    DELETE_USER_MUTATION,
    PROFILE_QUERY,
    SUBSCRIBE_MUTATION,
    UNSUBSCRIBE_MUTATION,
    USER_QUERY,
    USERS_WITH_RELATIONS_QUERY,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from social_graph.features.graphql.context import GraphQLContext
    from tests.conftest import SocialGraph


async def _count(session: AsyncSession, model: type) -> int:
    return (await session.execute(select(func.count()).select_from(model))).scalar_one()


@pytest.mark.asyncio
async def test_create_user_success(graphql_context: GraphQLContext) -> None:
    result = await schema.execute(
        CREATE_USER_MUTATION,
        variable_values={"dto": {"name": "Dave", "balance": 12.5}},
        context_value=graphql_context,
    )

    assert result.errors is None
    created = result.data["createUser"]
    assert created["name"] == "Dave"
    assert created["balance"] == 12.5
    assert await _count(graphql_context.session, User) == 1


@pytest.mark.asyncio
async def test_created_user_is_visible_to_later_queries(graphql_context: GraphQLContext) -> None:
    created = await schema.execute(
        CREATE_USER_MUTATION,
        variable_values={"dto": {"name": "Eve", "balance": 1.0}},
        context_value=graphql_context,
    )

    result = await schema.execute(
        USER_QUERY,
        variable_values={"id": created.data["createUser"]["id"]},
        context_value=graphql_context,
    )

    assert result.errors is None
    assert result.data["user"]["name"] == "Eve"
    assert result.data["user"]["profile"] is None


@pytest.mark.asyncio
async def test_create_profile_success(
    graphql_context: GraphQLContext, social_graph: SocialGraph
) -> None:
    result = await schema.execute(
        CREATE_PROFILE_MUTATION,
        variable_values={
            "dto": {
                "isMale": False,
                "yearOfBirth": 2000,
                "userId": str(social_graph.carol.id),
                "memberTypeId": "BUSINESS",
            }
        },
        context_value=graphql_context,
    )

    assert result.errors is None
    profile = result.data["createProfile"]
    assert profile["userId"] == str(social_graph.carol.id)
    assert profile["memberType"] == {"id": "BUSINESS"}


@pytest.mark.asyncio
async def test_second_profile_for_user_is_conflict(
    graphql_context: GraphQLContext, social_graph: SocialGraph
) -> None:
    result = await schema.execute(
        CREATE_PROFILE_MUTATION,
        variable_values={
            "dto": {
                "isMale": True,
                "yearOfBirth": 1970,
                "userId": str(social_graph.alice.id),
                "memberTypeId": "BASIC",
            }
        },
        context_value=graphql_context,
    )

    assert result.errors is not None
    assert result.errors[0].extensions["code"] == "CONFLICT"
    assert await _count(graphql_context.session, Profile) == 2


@pytest.mark.asyncio
async def test_create_post_success(
    graphql_context: GraphQLContext, social_graph: SocialGraph
) -> None:
    result = await schema.execute(
        CREATE_POST_MUTATION,
        variable_values={
            "dto": {
                "title": "Carol writes",
                "content": "Finally",
                "authorId": str(social_graph.carol.id),
            }
        },
        context_value=graphql_context,
    )

    assert result.errors is None
    assert result.data["createPost"]["authorId"] == str(social_graph.carol.id)
    assert await _count(graphql_context.session, Post) == 4


@pytest.mark.asyncio
async def test_create_post_for_missing_author_is_conflict(
    graphql_context: GraphQLContext,
) -> None:
    result = await schema.execute(
        CREATE_POST_MUTATION,
        variable_values={"dto": {"title": "Orphan", "content": "x", "authorId": str(uuid4())}},
        context_value=graphql_context,
    )

    assert result.errors is not None
    assert result.errors[0].extensions["code"] == "CONFLICT"


@pytest.mark.asyncio
async def test_change_user_updates_only_supplied_fields(
    graphql_context: GraphQLContext, social_graph: SocialGraph
) -> None:
    result = await schema.execute(
        CHANGE_USER_MUTATION,
        variable_values={"id": str(social_graph.bob.id), "dto": {"name": "Robert"}},
        context_value=graphql_context,
    )

    assert result.errors is None
    assert result.data["changeUser"] == {
        "id": str(social_graph.bob.id),
        "name": "Robert",
        "balance": 250.5,
    }


@pytest.mark.asyncio
async def test_change_missing_user_is_not_found(graphql_context: GraphQLContext) -> None:
    result = await schema.execute(
        CHANGE_USER_MUTATION,
        variable_values={"id": str(uuid4()), "dto": {"name": "Nobody"}},
        context_value=graphql_context,
    )

    assert result.errors is not None
    assert result.errors[0].extensions["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_change_profile_member_type(
    graphql_context: GraphQLContext, social_graph: SocialGraph
) -> None:
    result = await schema.execute(
        CHANGE_PROFILE_MUTATION,
        variable_values={
            "id": str(social_graph.alice_profile.id),
            "dto": {"memberTypeId": "BUSINESS"},
        },
        context_value=graphql_context,
    )

    assert result.errors is None
    assert result.data["changeProfile"]["memberTypeId"] == "BUSINESS"
    assert result.data["changeProfile"]["yearOfBirth"] == 1990


@pytest.mark.asyncio
async def test_change_post(graphql_context: GraphQLContext, social_graph: SocialGraph) -> None:
    result = await schema.execute(
        CHANGE_POST_MUTATION,
        variable_values={"id": str(social_graph.bob_post.id), "dto": {"content": "Edited"}},
        context_value=graphql_context,
    )

    assert result.errors is None
    assert result.data["changePost"]["title"] == "Bob here"
    assert result.data["changePost"]["content"] == "Edited"


@pytest.mark.asyncio
async def test_delete_user_cascades(
    graphql_context: GraphQLContext, social_graph: SocialGraph
) -> None:
    """Deleting a user removes its profile, posts and edges in both directions."""
    result = await schema.execute(
        DELETE_USER_MUTATION,
        variable_values={"id": str(social_graph.alice.id)},
        context_value=graphql_context,
    )

    assert result.errors is None
    assert result.data["deleteUser"] == "User deleted successfully"

    session = graphql_context.session
    assert await _count(session, User) == 2
    assert await _count(session, Profile) == 1
    assert await _count(session, Post) == 1
    assert await _count(session, SubscribersOnAuthors) == 0


@pytest.mark.asyncio
async def test_change_profile_removed_with_its_user_is_not_found(
    graphql_context: GraphQLContext, social_graph: SocialGraph
) -> None:
    profile_id = str(social_graph.alice_profile.id)
    seen = await schema.execute(
        PROFILE_QUERY, variable_values={"id": profile_id}, context_value=graphql_context
    )
    assert seen.data["profile"]["id"] == profile_id

    await schema.execute(
        DELETE_USER_MUTATION,
        variable_values={"id": str(social_graph.alice.id)},
        context_value=graphql_context,
    )
    result = await schema.execute(
        CHANGE_PROFILE_MUTATION,
        variable_values={"id": profile_id, "dto": {"yearOfBirth": 1990}},
        context_value=graphql_context,
    )

    assert result.errors is not None
    assert result.errors[0].extensions["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_delete_missing_user_is_not_found(graphql_context: GraphQLContext) -> None:
    result = await schema.execute(
        DELETE_USER_MUTATION,
        variable_values={"id": str(uuid4())},
        context_value=graphql_context,
    )

    assert result.errors is not None
    assert result.errors[0].extensions["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_delete_post(graphql_context: GraphQLContext, social_graph: SocialGraph) -> None:
    result = await schema.execute(
        DELETE_POST_MUTATION,
        variable_values={"id": str(social_graph.bob_post.id)},
        context_value=graphql_context,
    )

    assert result.errors is None
    assert result.data["deletePost"] == "Post deleted successfully"
    assert await _count(graphql_context.session, Post) == 2


@pytest.mark.asyncio
async def test_delete_profile(
    graphql_context: GraphQLContext, social_graph: SocialGraph
) -> None:
    result = await schema.execute(
        DELETE_PROFILE_MUTATION,
        variable_values={"id": str(social_graph.bob_profile.id)},
        context_value=graphql_context,
    )

    assert result.errors is None
    assert result.data["deleteProfile"] == "Profile deleted successfully"
    assert await _count(graphql_context.session, Profile) == 1


@pytest.mark.asyncio
async def test_subscribe_then_query_sees_edge(
    graphql_context: GraphQLContext, social_graph: SocialGraph
) -> None:
    result = await schema.execute(
        SUBSCRIBE_MUTATION,
        variable_values={
            "userId": str(social_graph.alice.id),
            "authorId": str(social_graph.carol.id),
        },
        context_value=graphql_context,
    )

    assert result.errors is None
    assert result.data["subscribeTo"] == "Subscribed successfully"

    graphql_context.loaders = create_dataloaders(graphql_context.session)
    result = await schema.execute(USERS_WITH_RELATIONS_QUERY, context_value=graphql_context)
    users = {user["name"]: user for user in result.data["users"]}
    assert sorted(u["name"] for u in users["Alice"]["userSubscribedTo"]) == ["Bob", "Carol"]
    assert [u["name"] for u in users["Carol"]["subscribedToUser"]] == ["Alice"]


@pytest.mark.asyncio
async def test_duplicate_subscribe_is_conflict(
    graphql_context: GraphQLContext, social_graph: SocialGraph
) -> None:
    """alice -> bob already exists."""
    result = await schema.execute(
        SUBSCRIBE_MUTATION,
        variable_values={
            "userId": str(social_graph.alice.id),
            "authorId": str(social_graph.bob.id),
        },
        context_value=graphql_context,
    )

    assert result.errors is not None
    assert result.errors[0].extensions["code"] == "CONFLICT"
    assert result.errors[0].message == ALREADY_SUBSCRIBED
    assert await _count(graphql_context.session, SubscribersOnAuthors) == 3


@pytest.mark.asyncio
async def test_self_subscription_is_allowed(
    graphql_context: GraphQLContext, social_graph: SocialGraph
) -> None:
    user_id = str(social_graph.carol.id)
    result = await schema.execute(
        SUBSCRIBE_MUTATION,
        variable_values={"userId": user_id, "authorId": user_id},
        context_value=graphql_context,
    )

    assert result.errors is None

    graphql_context.loaders = create_dataloaders(graphql_context.session)
    result = await schema.execute(USERS_WITH_RELATIONS_QUERY, context_value=graphql_context)
    carol = next(user for user in result.data["users"] if user["name"] == "Carol")
    assert "Carol" in {u["name"] for u in carol["userSubscribedTo"]}
    assert "Carol" in {u["name"] for u in carol["subscribedToUser"]}


@pytest.mark.asyncio
async def test_unsubscribe_success(
    graphql_context: GraphQLContext, social_graph: SocialGraph
) -> None:
    result = await schema.execute(
        UNSUBSCRIBE_MUTATION,
        variable_values={
            "userId": str(social_graph.carol.id),
            "authorId": str(social_graph.alice.id),
        },
        context_value=graphql_context,
    )

    assert result.errors is None
    assert result.data["unsubscribeFrom"] == "Unsubscribed successfully"
    assert await _count(graphql_context.session, SubscribersOnAuthors) == 2


@pytest.mark.asyncio
async def test_unsubscribe_missing_edge_is_not_found(
    graphql_context: GraphQLContext, social_graph: SocialGraph
) -> None:
    """bob never subscribed to carol."""
    result = await schema.execute(
        UNSUBSCRIBE_MUTATION,
        variable_values={
            "userId": str(social_graph.bob.id),
            "authorId": str(social_graph.carol.id),
        },
        context_value=graphql_context,
    )

    assert result.errors is not None
    assert result.errors[0].extensions["code"] == "NOT_FOUND"
    assert await _count(graphql_context.session, SubscribersOnAuthors) == 3
