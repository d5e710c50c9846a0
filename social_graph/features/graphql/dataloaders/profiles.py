"""DataLoader for profiles, by profile id and by owning user id."""

from __future__ import annotations

from typing import TYPE_CHECKING

from strawberry.dataloader import DataLoader

from social_graph.core.database import is_loaded
from social_graph.features.graphql.dataloaders.base import EntityLoader, LoaderState
from social_graph.features.members.models import Profile
from social_graph.features.members.repository import get_profile_repository

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

    from social_graph.features.graphql.dataloaders.member_types import MemberTypeLoader


class ProfileLoader(EntityLoader[Profile]):
    """Batch-load profiles.

    Every batch embeds the member type, which is primed into the member type
    loader so ``Profile.memberType`` never needs its own store call.

    Usage:
        profile = await loaders.profiles.load(profile_id)
        profile = await loaders.profiles.load_by_user(user_id)  # None if the user has none
    """

    include = ("member_type",)

    def __init__(
        self,
        session: AsyncSession,
        state: LoaderState,
        *,
        member_types: MemberTypeLoader,
    ) -> None:
        super().__init__(session, get_profile_repository(), state)
        self._member_types = member_types
        self._by_user: DataLoader[UUID, Profile | None] = DataLoader(
            load_fn=self._batch_load_by_user
        )

    async def load_by_user(self, user_id: UUID) -> Profile | None:
        """Load the profile owned by ``user_id`` (one-to-one)."""
        return await self._by_user.load(user_id)

    def prime_user(self, user_id: UUID, profile: Profile | None) -> None:
        """Cache the profile (or its absence) for ``user_id``."""
        self._by_user.prime(user_id, profile)
        if profile is not None:
            self.prime(profile)

    def prime_users(self, profiles_by_user: Mapping[UUID, Profile | None]) -> None:
        self._by_user.prime_many(profiles_by_user)

    def clear_all(self) -> None:
        super().clear_all()
        self._by_user.clear_all()

    def prime_many(self, entities: Iterable[Profile]) -> None:
        entities = list(entities)
        super().prime_many(entities)
        # user_id is unique, so every loaded profile also answers load_by_user
        self._by_user.prime_many({profile.user_id: profile for profile in entities})

    async def _batch_load_by_user(self, user_ids: list[UUID]) -> list[Profile | None]:
        if self.preloaded:
            return [None] * len(user_ids)

        rows = await self._repository.find_many(
            self._session,
            where={"user_id": user_ids},
            include=self.include,
        )
        super().prime_many(rows)
        self._prime_related(rows)
        by_user = {row.user_id: row for row in rows}
        return [by_user.get(user_id) for user_id in user_ids]

    def _prime_related(self, rows: Sequence[Profile]) -> None:
        self._member_types.prime_many(
            row.member_type for row in rows if is_loaded(row, "member_type")
        )


__all__ = ["ProfileLoader"]
