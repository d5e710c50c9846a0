"""SQLAlchemy instance inspection helpers.

Relationships are declared ``lazy="raise"``, so code that may receive
entities with or without eager-loaded relations checks first.

Example:
    >>> user = await repo.find_unique(session, user_id)
    >>> is_loaded(user, "posts")
    False
    >>> user = await repo.find_unique(session, user_id, include=("posts",))
    >>> is_loaded(user, "posts")
    True
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import inspect as sa_inspect

if TYPE_CHECKING:
    from sqlalchemy.orm import InstanceState


def is_loaded(instance: Any, attr: str) -> bool:
    """Check if relationship/attribute is loaded without triggering a load.

    Args:
        instance: SQLAlchemy ORM model instance
        attr: Attribute name to check

    Returns:
        True if attribute is loaded, False if access would hit the database.
    """
    state: InstanceState[Any] = sa_inspect(instance)
    return attr in state.dict and attr not in state.unloaded


__all__ = ["is_loaded"]
