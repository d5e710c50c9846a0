"""Repositories for the members feature.

Each repository is a stateless process-wide singleton; the session is passed
to every call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from social_graph.core.database import BaseRepository, ConflictError
from social_graph.features.members.models import (
    MemberType,
    Post,
    Profile,
    SubscribersOnAuthors,
    User,
)
from social_graph.infra.database import session_lock

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

ALREADY_SUBSCRIBED = "User is already subscribed to this author"


class UserRepository(BaseRepository[User]):
    """Repository for User model."""

    def __init__(self) -> None:
        """Initialize with User model."""
        super().__init__(User)


class ProfileRepository(BaseRepository[Profile]):
    """Repository for Profile model."""

    def __init__(self) -> None:
        """Initialize with Profile model."""
        super().__init__(Profile)


class PostRepository(BaseRepository[Post]):
    """Repository for Post model."""

    def __init__(self) -> None:
        """Initialize with Post model."""
        super().__init__(Post)


class MemberTypeRepository(BaseRepository[MemberType]):
    """Repository for MemberType reference data."""

    def __init__(self) -> None:
        """Initialize with MemberType model."""
        super().__init__(MemberType)


class SubscriptionRepository(BaseRepository[SubscribersOnAuthors]):
    """Repository for subscriber -> author edges.

    Edges are keyed by ``(subscriber_id, author_id)``.
    """

    def __init__(self) -> None:
        """Initialize with SubscribersOnAuthors model."""
        super().__init__(SubscribersOnAuthors)

    async def exists(
        self, session: AsyncSession, subscriber_id: UUID, author_id: UUID
    ) -> bool:
        stmt = select(SubscribersOnAuthors.subscriber_id).where(
            SubscribersOnAuthors.subscriber_id == subscriber_id,
            SubscribersOnAuthors.author_id == author_id,
        )
        async with session_lock(session):
            result = await session.execute(stmt)
            return result.first() is not None

    async def subscribe(
        self, session: AsyncSession, subscriber_id: UUID, author_id: UUID
    ) -> SubscribersOnAuthors:
        """Create the edge ``subscriber_id -> author_id``.

        Raises:
            ConflictError: If the edge already exists or either user is missing
        """
        if await self.exists(session, subscriber_id, author_id):
            raise ConflictError(
                ALREADY_SUBSCRIBED,
                details={"subscriber_id": str(subscriber_id), "author_id": str(author_id)},
            )
        return await self.create(
            session, {"subscriber_id": subscriber_id, "author_id": author_id}
        )

    async def unsubscribe(
        self, session: AsyncSession, subscriber_id: UUID, author_id: UUID
    ) -> None:
        """Remove the edge ``subscriber_id -> author_id``.

        Raises:
            NotFoundError: If the edge does not exist
        """
        await self.delete(session, (subscriber_id, author_id))


_user_repository: UserRepository | None = None
_profile_repository: ProfileRepository | None = None
_post_repository: PostRepository | None = None
_member_type_repository: MemberTypeRepository | None = None
_subscription_repository: SubscriptionRepository | None = None


def get_user_repository() -> UserRepository:
    """Get UserRepository instance."""
    global _user_repository
    if _user_repository is None:
        _user_repository = UserRepository()
    return _user_repository


def get_profile_repository() -> ProfileRepository:
    """Get ProfileRepository instance."""
    global _profile_repository
    if _profile_repository is None:
        _profile_repository = ProfileRepository()
    return _profile_repository


def get_post_repository() -> PostRepository:
    """Get PostRepository instance."""
    global _post_repository
    if _post_repository is None:
        _post_repository = PostRepository()
    return _post_repository


def get_member_type_repository() -> MemberTypeRepository:
    """Get MemberTypeRepository instance."""
    global _member_type_repository
    if _member_type_repository is None:
        _member_type_repository = MemberTypeRepository()
    return _member_type_repository


def get_subscription_repository() -> SubscriptionRepository:
    """Get SubscriptionRepository instance."""
    global _subscription_repository
    if _subscription_repository is None:
        _subscription_repository = SubscriptionRepository()
    return _subscription_repository


__all__ = [
    "ALREADY_SUBSCRIBED",
    "MemberTypeRepository",
    "PostRepository",
    "ProfileRepository",
    "SubscriptionRepository",
    "UserRepository",
    "get_member_type_repository",
    "get_post_repository",
    "get_profile_repository",
    "get_subscription_repository",
    "get_user_repository",
]
