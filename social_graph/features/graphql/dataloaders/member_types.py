"""DataLoader for member types (BASIC / BUSINESS reference data)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from social_graph.features.graphql.dataloaders.base import EntityLoader, LoaderState
from social_graph.features.members.models import MemberType
from social_graph.features.members.repository import get_member_type_repository

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


class MemberTypeLoader(EntityLoader[MemberType]):
    """Batch-load member types by their string id.

    Usage:
        basic = await loaders.member_types.load("BASIC")
    """

    def __init__(self, session: AsyncSession, state: LoaderState) -> None:
        super().__init__(session, get_member_type_repository(), state)


__all__ = ["MemberTypeLoader"]
