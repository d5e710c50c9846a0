"""Core database package: declarative base, repository and exceptions.

Base Classes and Mixins:
    - Base: Declarative base with constraint naming convention
    - UUIDPKMixin: UUID v4 primary key

Repository:
    - BaseRepository[T]: find_many / find_unique / create / update / delete
      with explicit session passing

Exceptions:
    - RepositoryError, NotFoundError, ConflictError, InvalidFilterError

Inspection:
    - is_loaded: Check if a relationship is loaded without triggering a load
"""

from social_graph.core.database.base import NAMING_CONVENTION, Base, UUIDPKMixin
from social_graph.core.database.exceptions import (
    ConflictError,
    InvalidFilterError,
    NotFoundError,
    RepositoryError,
)
from social_graph.core.database.inspection import is_loaded
from social_graph.core.database.repository import BaseRepository

__all__ = [
    "NAMING_CONVENTION",
    "Base",
    "BaseRepository",
    "ConflictError",
    "InvalidFilterError",
    "NotFoundError",
    "RepositoryError",
    "UUIDPKMixin",
    "is_loaded",
]
