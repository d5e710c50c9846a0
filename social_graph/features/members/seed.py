"""Member type reference data."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from social_graph.features.members.models import MemberType
from social_graph.features.members.repository import get_member_type_repository

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

MEMBER_TYPES: tuple[dict[str, object], ...] = (
    {"id": "BASIC", "discount": 2.3, "posts_limit_per_month": 20},
    {"id": "BUSINESS", "discount": 7.7, "posts_limit_per_month": 100},
)


async def seed_member_types(session: AsyncSession) -> list[MemberType]:
    """Insert the member types that are not present yet.

    Existing rows are left untouched. The caller commits.

    Returns:
        The member types that were created
    """
    repo = get_member_type_repository()
    existing = {member_type.id for member_type in await repo.find_many(session)}
    created = [
        await repo.create(session, row) for row in MEMBER_TYPES if row["id"] not in existing
    ]
    if created:
        logger.info(
            "Seeded member types",
            extra={"member_types": [member_type.id for member_type in created]},
        )
    return created
