"""GraphQL types for member types."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

import strawberry

if TYPE_CHECKING:
    from social_graph.features.members.models import MemberType


@strawberry.enum(name="MemberTypeId", description="Membership tier identifier")
class MemberTypeId(Enum):
    BASIC = "BASIC"
    BUSINESS = "BUSINESS"


@strawberry.type(name="MemberType", description="Membership tier with its discount and posting quota")
class MemberTypeType:
    """GraphQL type for the MemberType reference table."""

    id: MemberTypeId
    discount: float
    posts_limit_per_month: int

    @classmethod
    def from_model(cls, member_type: MemberType) -> MemberTypeType:
        return cls(
            id=MemberTypeId(member_type.id),
            discount=member_type.discount,
            posts_limit_per_month=member_type.posts_limit_per_month,
        )


__all__ = ["MemberTypeId", "MemberTypeType"]
