"""Pytest configuration and shared fixtures.

Organization:
    - Database Fixtures: in-memory SQLite engine, seeded session
    - Data Fixtures: a small social graph and spies counting store reads
    - Application Fixtures: FastAPI app and HTTP client bound to the test database

Every test gets a fresh in-memory database; the ``StaticPool`` keeps the
single connection alive so all sessions of one test see the same data.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Iterator
from contextlib import ExitStack
from dataclasses import dataclass
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

if TYPE_CHECKING:
    from unittest.mock import MagicMock

    from fastapi import FastAPI
    from sqlalchemy.ext.asyncio import AsyncEngine

    from social_graph.features.members.models import Post, Profile, User

# Ensure tests run without external infrastructure
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("LOG_JSON", "false")

TEST_DATABASE_URL = "sqlite+aiosqlite://"


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Create an in-memory SQLite engine with the full schema.

    Foreign keys are enforced so ON DELETE CASCADE behaves as on PostgreSQL.
    """
    from social_graph.infra.database import create_schema, enable_sqlite_foreign_keys

    engine = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    enable_sqlite_foreign_keys(engine)
    await create_schema(engine)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory configured like ``AsyncSessionLocal``."""
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Session on a database seeded with the BASIC and BUSINESS member types."""
    from social_graph.features.members.seed import seed_member_types

    async with session_factory() as session:
        await seed_member_types(session)
        await session.commit()
        yield session


# ============================================================================
# Data Fixtures
# ============================================================================


@dataclass
class SocialGraph:
    """Rows created by the ``social_graph`` fixture.

    alice (BASIC, 2 posts)  <->  bob (BUSINESS, 1 post)
    carol (no profile, no posts)  ->  alice
    """

    alice: User
    bob: User
    carol: User
    alice_profile: Profile
    bob_profile: Profile
    alice_posts: list[Post]
    bob_post: Post


@pytest.fixture
async def social_graph(db_session: AsyncSession) -> SocialGraph:
    """Create three users with profiles, posts and subscription edges."""
    from social_graph.features.members.models import (
        Post,
        Profile,
        SubscribersOnAuthors,
        User,
    )

    alice = User(name="Alice", balance=100.0)
    bob = User(name="Bob", balance=250.5)
    carol = User(name="Carol", balance=0.0)
    db_session.add_all([alice, bob, carol])
    await db_session.flush()

    alice_profile = Profile(
        is_male=False, year_of_birth=1990, user_id=alice.id, member_type_id="BASIC"
    )
    bob_profile = Profile(
        is_male=True, year_of_birth=1985, user_id=bob.id, member_type_id="BUSINESS"
    )
    alice_posts = [
        Post(title="Hello", content="First post", author_id=alice.id),
        Post(title="Again", content="Second post", author_id=alice.id),
    ]
    bob_post = Post(title="Bob here", content="Only post", author_id=bob.id)
    db_session.add_all([alice_profile, bob_profile, *alice_posts, bob_post])
    db_session.add_all([
        SubscribersOnAuthors(subscriber_id=alice.id, author_id=bob.id),
        SubscribersOnAuthors(subscriber_id=bob.id, author_id=alice.id),
        SubscribersOnAuthors(subscriber_id=carol.id, author_id=alice.id),
    ])
    await db_session.commit()
    # Start every test with an empty identity map, like a new request would
    db_session.expunge_all()

    return SocialGraph(
        alice=alice,
        bob=bob,
        carol=carol,
        alice_profile=alice_profile,
        bob_profile=bob_profile,
        alice_posts=alice_posts,
        bob_post=bob_post,
    )


@pytest.fixture
def store_calls() -> Iterator[dict[str, MagicMock]]:
    """Spy on ``find_many`` of every repository.

    Yields:
        Mapping of entity kind to the spy; ``call_count`` is the number of
        store reads issued for that kind.
    """
    from social_graph.features.members.repository import (
        get_member_type_repository,
        get_post_repository,
        get_profile_repository,
        get_subscription_repository,
        get_user_repository,
    )

    repositories = {
        "users": get_user_repository(),
        "posts": get_post_repository(),
        "profiles": get_profile_repository(),
        "member_types": get_member_type_repository(),
        "subscriptions": get_subscription_repository(),
    }
    with ExitStack() as stack:
        yield {
            kind: stack.enter_context(
                patch.object(repository, "find_many", wraps=repository.find_many)
            )
            for kind, repository in repositories.items()
        }


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def app(
    db_session: AsyncSession,
    session_factory: async_sessionmaker[AsyncSession],
) -> FastAPI:
    """FastAPI application whose requests use the seeded test database.

    ``db_session`` is requested only so seeding happens before the first request.
    """
    _ = db_session
    from social_graph.app.main import create_app
    from social_graph.core.dependencies.database import get_db_session

    async def override_get_db_session() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            yield session

    application = create_app()
    application.dependency_overrides[get_db_session] = override_get_db_session
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client talking to the app in-process (lifespan not run)."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
