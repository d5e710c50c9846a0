"""Helpers shared by GraphQL types and resolvers."""

from __future__ import annotations

import dataclasses
from enum import Enum
from typing import TYPE_CHECKING, Any

import strawberry
from strawberry.types.nodes import SelectedField

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable

    from strawberry.types import Info
    from strawberry.types.nodes import Selection

# Fields of User that resolve through sibling loaders
USER_RELATION_FIELDS = frozenset({"profile", "posts", "userSubscribedTo", "subscribedToUser"})


def selects_any(info: Info, names: Collection[str]) -> bool:
    """Whether the selection under the current field requests any of ``names``.

    Fragment spreads and inline fragments are followed; only the direct
    children of the current field are inspected.
    """
    return any(_contains(field.selections, names) for field in info.selected_fields)


def _contains(selections: Iterable[Selection], names: Collection[str]) -> bool:
    for selection in selections:
        if isinstance(selection, SelectedField):
            if selection.name in names:
                return True
        elif _contains(selection.selections, names):
            return True
    return False


def wants_user_relations(info: Info) -> bool:
    return selects_any(info, USER_RELATION_FIELDS)


def provided_fields(data: Any) -> dict[str, Any]:
    """Collect the input fields the client actually supplied.

    Fields left ``UNSET`` or sent as ``null`` are dropped so partial updates
    only touch supplied columns. Enum members are replaced by their values.
    """
    changes: dict[str, Any] = {}
    for field in dataclasses.fields(data):
        value = getattr(data, field.name)
        if value is strawberry.UNSET or value is None:
            continue
        if isinstance(value, Enum):
            value = value.value
        changes[field.name] = value
    return changes


__all__ = ["USER_RELATION_FIELDS", "provided_fields", "selects_any", "wants_user_relations"]
