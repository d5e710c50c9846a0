"""SQLAlchemy models for the members feature.

Relationships default to ``lazy="raise"``: every related row is fetched
explicitly through ``include`` paths or the GraphQL data loaders, never by
implicit lazy loading on attribute access.
"""
from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from social_graph.core.database import Base, UUIDPKMixin


class MemberType(Base):
    """Reference data describing a membership tier (BASIC or BUSINESS)."""

    __tablename__ = "member_types"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    discount: Mapped[float] = mapped_column(Float(), nullable=False)
    posts_limit_per_month: Mapped[int] = mapped_column(Integer(), nullable=False)

    profiles: Mapped[list[Profile]] = relationship(back_populates="member_type", lazy="raise")

    def __repr__(self) -> str:
        return f"<MemberType(id={self.id!r})>"


class User(Base, UUIDPKMixin):
    """A member of the social graph."""

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    balance: Mapped[float] = mapped_column(Float(), nullable=False, default=0.0)

    profile: Mapped[Profile | None] = relationship(
        back_populates="user",
        uselist=False,
        lazy="raise",
        passive_deletes=True,
    )
    posts: Mapped[list[Post]] = relationship(
        back_populates="author",
        lazy="raise",
        passive_deletes=True,
    )
    # Edges where this user is the subscriber
    subscriptions_out: Mapped[list[SubscribersOnAuthors]] = relationship(
        back_populates="subscriber",
        foreign_keys="SubscribersOnAuthors.subscriber_id",
        lazy="raise",
        passive_deletes=True,
    )
    # Edges where this user is the author
    subscriptions_in: Mapped[list[SubscribersOnAuthors]] = relationship(
        back_populates="author",
        foreign_keys="SubscribersOnAuthors.author_id",
        lazy="raise",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name={self.name!r})>"


class Profile(Base, UUIDPKMixin):
    """Optional one-per-user profile pointing at a member type."""

    __tablename__ = "profiles"

    is_male: Mapped[bool] = mapped_column(Boolean(), nullable=False)
    year_of_birth: Mapped[int] = mapped_column(Integer(), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    member_type_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("member_types.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user: Mapped[User] = relationship(back_populates="profile", lazy="raise")
    member_type: Mapped[MemberType] = relationship(back_populates="profiles", lazy="raise")

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, user_id={self.user_id})>"


class Post(Base, UUIDPKMixin):
    """A post written by a user."""

    __tablename__ = "posts"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text(), nullable=False)
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    author: Mapped[User] = relationship(back_populates="posts", lazy="raise")

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, author_id={self.author_id})>"


class SubscribersOnAuthors(Base):
    """Directed edge: ``subscriber_id`` follows ``author_id``."""

    __tablename__ = "subscribers_on_authors"

    subscriber_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    created_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=lambda: datetime.now(UTC),
    )

    subscriber: Mapped[User] = relationship(
        back_populates="subscriptions_out",
        foreign_keys=[subscriber_id],
        lazy="raise",
    )
    author: Mapped[User] = relationship(
        back_populates="subscriptions_in",
        foreign_keys=[author_id],
        lazy="raise",
    )

    def __repr__(self) -> str:
        return (
            f"<SubscribersOnAuthors(subscriber_id={self.subscriber_id}, "
            f"author_id={self.author_id})>"
        )


__all__ = ["MemberType", "Post", "Profile", "SubscribersOnAuthors", "User"]
