"""Unit tests for the preload controller."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from social_graph.features.graphql.dataloaders import create_dataloaders
from social_graph.features.members.repository import get_post_repository

if TYPE_CHECKING:
    from unittest.mock import MagicMock

    from sqlalchemy.ext.asyncio import AsyncSession

    from tests.conftest import SocialGraph


@pytest.mark.asyncio
async def test_preload_reads_each_table_once(
    db_session: AsyncSession,
    social_graph: SocialGraph,
    store_calls: dict[str, MagicMock],
) -> None:
    loaders = create_dataloaders(db_session)

    users_total = await loaders.preload.preload_all()

    assert users_total == 3
    assert loaders.preload.done is True
    assert all(spy.call_count == 1 for spy in store_calls.values())


@pytest.mark.asyncio
async def test_concurrent_preloads_share_one_run(
    db_session: AsyncSession,
    social_graph: SocialGraph,
    store_calls: dict[str, MagicMock],
) -> None:
    loaders = create_dataloaders(db_session)

    await asyncio.gather(loaders.preload.preload_all(), loaders.preload.preload_all())
    await loaders.preload.preload_all()

    assert store_calls["users"].call_count == 1


@pytest.mark.asyncio
async def test_preloaded_lookups_return_the_same_objects(
    db_session: AsyncSession,
    social_graph: SocialGraph,
    store_calls: dict[str, MagicMock],
) -> None:
    """After preload every lookup hits memory, including empty relations."""
    loaders = create_dataloaders(db_session)
    await loaders.preload.preload_all()
    calls_after_preload = sum(spy.call_count for spy in store_calls.values())

    users = await loaders.users.load_all()
    alice = await loaders.users.load(social_graph.alice.id)
    carol_profile = await loaders.profiles.load_by_user(social_graph.carol.id)
    carol_posts = await loaders.posts.load_by_author(social_graph.carol.id)
    carol_followers = await loaders.subscriptions.load_incoming(social_graph.carol.id)
    basic = await loaders.member_types.load("BASIC")
    alice_profile = await loaders.profiles.load_by_user(social_graph.alice.id)

    assert alice in users
    assert carol_profile is None
    assert carol_posts == []
    assert carol_followers == []
    assert await loaders.member_types.load(alice_profile.member_type_id) is basic
    assert sum(spy.call_count for spy in store_calls.values()) == calls_after_preload


@pytest.mark.asyncio
async def test_failed_preload_can_be_retried(
    db_session: AsyncSession,
    social_graph: SocialGraph,
) -> None:
    loaders = create_dataloaders(db_session)
    repository = get_post_repository()
    error = OperationalError("SELECT", {}, Exception("connection lost"))

    with (
        patch.object(repository, "find_many", side_effect=error),
        pytest.raises(OperationalError),
    ):
        await loaders.preload.preload_all()

    assert loaders.preload.done is False
    assert await loaders.preload.preload_all() == 3
    assert loaders.preload.done is True


@pytest.mark.asyncio
async def test_clear_all_leaves_preloaded_mode(
    db_session: AsyncSession,
    social_graph: SocialGraph,
    store_calls: dict[str, MagicMock],
) -> None:
    loaders = create_dataloaders(db_session)
    await loaders.preload.preload_all()

    loaders.clear_all()
    user = await loaders.users.load(social_graph.bob.id)

    assert loaders.state.preloaded is False
    assert user is not None
    assert store_calls["users"].call_count == 2
