"""Generic store adapter for SQLAlchemy models.

Provides the five operations the GraphQL layer needs, with explicit
session passing:

    find_many(session, *, where=None, include=())
    find_unique(session, key, *, include=())
    create(session, data)
    update(session, key, data)
    delete(session, key)

``where`` maps column names to a value (equality) or a collection (IN).
``include`` is a tuple of dotted relationship paths such as
``("posts", "profile.member_type")`` turned into ``selectinload`` chains.

An ``AsyncSession`` does not allow concurrent statements, while data loaders
for different entity kinds dispatch their batches in the same event loop
tick. Every operation therefore runs under the per-session lock from
``session_lock``.

Example:
    class PostRepository(BaseRepository[Post]):
        def __init__(self) -> None:
            super().__init__(Post)

    posts = await repo.find_many(session, where={"author_id": [u1, u2]})
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Mapping
from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, inspect, select
from sqlalchemy import delete as sql_delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from social_graph.core.database.exceptions import (
    ConflictError,
    InvalidFilterError,
    NotFoundError,
)
from social_graph.infra.database.session import session_lock
from social_graph.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm.strategy_options import _AbstractLoad


class BaseRepository[T]:
    """Minimal generic repository for CRUD operations.

    Session is always explicit, no hidden state. Subclasses add
    entity-specific operations (see ``features/members/repository.py``).
    """

    __slots__ = ("model", "_logger", "_lazy")

    def __init__(self, model: type[T]) -> None:
        """Initialize repository with model class.

        Args:
            model: SQLAlchemy model class (e.g., User, Post)
        """
        self.model = model
        # Standard logger for INFO/WARNING/ERROR
        self._logger = logging.getLogger(f"repository.{model.__name__}")
        # Lazy logger for DEBUG (zero overhead when DEBUG disabled)
        self._lazy = get_lazy_logger(f"repository.{model.__name__}")

    async def find_many(
        self,
        session: AsyncSession,
        *,
        where: Mapping[str, Any] | None = None,
        include: Iterable[str] = (),
    ) -> Sequence[T]:
        """Return every row matching ``where`` with ``include`` relations loaded.

        Args:
            session: Database session
            where: Column name to value, or to a collection for ``IN``
            include: Dotted relationship paths to eager load

        Returns:
            Matching entities (order unspecified)

        Example:
            users = await repo.find_many(
                session, where={"id": [a, b]}, include=("profile.member_type",)
            )
        """
        stmt = select(self.model)
        if where:
            stmt = stmt.where(*self._conditions(where))
        options = self._load_options(include)
        if options:
            # refresh relations of rows already in the identity map
            stmt = stmt.options(*options).execution_options(populate_existing=True)

        async with session_lock(session):
            result = await session.execute(stmt)
            items = result.scalars().unique().all()

        self._lazy.debug(
            lambda: f"db.find_many: {self.model.__name__} where={_describe(where)} "
            f"include={list(include)} -> {len(items)} rows"
        )
        return items

    async def find_unique(
        self,
        session: AsyncSession,
        key: Any,
        *,
        include: Iterable[str] = (),
    ) -> T | None:
        """Get entity by primary key.

        Args:
            session: Database session
            key: Primary key value (tuple for composite keys)
            include: Dotted relationship paths to eager load

        Returns:
            Entity if found, None otherwise
        """
        options = self._load_options(include)
        async with session_lock(session):
            if options:
                stmt = select(self.model).where(self._pk_clause(key)).options(*options)
                result = await session.execute(stmt)
                instance = result.scalar_one_or_none()
            else:
                instance = await session.get(self.model, key)

        self._lazy.debug(
            lambda: f"db.find_unique: {self.model.__name__}({key}) -> "
            f"{'found' if instance else 'not found'}"
        )
        return instance

    async def create(self, session: AsyncSession, data: Mapping[str, Any]) -> T:
        """Insert a new entity built from ``data``.

        The entity is flushed and refreshed so generated values are available.

        Raises:
            ConflictError: If the insert violates a constraint
        """
        instance = self.model(**data)
        async with session_lock(session):
            session.add(instance)
            await self._flush(session, "create", data)
            await session.refresh(instance)

        self._lazy.debug(lambda: f"db.create: {self.model.__name__}({_identity(instance)})")
        return instance

    async def update(
        self,
        session: AsyncSession,
        key: Any,
        data: Mapping[str, Any],
    ) -> T:
        """Apply ``data`` to the entity identified by ``key``.

        Only the given attributes change; callers drop omitted fields.

        Raises:
            NotFoundError: If no entity has this key
            ConflictError: If the change violates a constraint
        """
        async with session_lock(session):
            # the row may have been removed by a cascade since it was loaded
            instance = await session.get(self.model, key, populate_existing=True)
            if instance is None:
                raise NotFoundError(self.model.__name__, self._identifier(key))
            for attr, value in data.items():
                if attr not in self._columns():
                    raise InvalidFilterError(
                        f"{self.model.__name__} has no column {attr!r}", filter_name=attr
                    )
                setattr(instance, attr, value)
            await self._flush(session, "update", data)
            await session.refresh(instance)

        self._lazy.debug(
            lambda: f"db.update: {self.model.__name__}({key}) fields={sorted(data)}"
        )
        return instance

    async def delete(self, session: AsyncSession, key: Any) -> None:
        """Delete the entity identified by ``key``.

        Issued as a DELETE statement so relationships never have to be loaded;
        dependent rows are removed by the foreign keys' ON DELETE CASCADE.

        Raises:
            NotFoundError: If no entity has this key
        """
        stmt = sql_delete(self.model).where(self._pk_clause(key))
        async with session_lock(session):
            result = await session.execute(stmt)

        if result.rowcount == 0:
            raise NotFoundError(self.model.__name__, self._identifier(key))

        self._logger.info(
            "Entity deleted",
            extra={
                "entity": self.model.__name__,
                "key": str(key),
                "operation": "db.delete",
            },
        )

    async def _flush(
        self, session: AsyncSession, operation: str, data: Mapping[str, Any]
    ) -> None:
        try:
            await session.flush()
        except IntegrityError as exc:
            self._logger.info(
                "Write rejected by constraint",
                extra={"entity": self.model.__name__, "operation": f"db.{operation}"},
            )
            raise ConflictError(
                f"{self.model.__name__} {operation} violates a constraint",
                details={key: str(value) for key, value in data.items()},
            ) from exc

    def _pk_columns(self) -> tuple[Any, ...]:
        return tuple(inspect(self.model).primary_key)

    def _pk_clause(self, key: Any) -> Any:
        columns = self._pk_columns()
        values = key if isinstance(key, tuple) else (key,)
        if len(values) != len(columns):
            raise InvalidFilterError(
                f"{self.model.__name__} key needs {len(columns)} values", filter_name="key"
            )
        return and_(*(column == value for column, value in zip(columns, values, strict=True)))

    def _identifier(self, key: Any) -> dict[str, Any]:
        columns = self._pk_columns()
        values = key if isinstance(key, tuple) else (key,)
        return {column.key: value for column, value in zip(columns, values, strict=False)}

    def _columns(self) -> Mapping[str, Any]:
        return inspect(self.model).columns

    def _conditions(self, where: Mapping[str, Any]) -> list[Any]:
        columns = self._columns()
        conditions = []
        for name, value in where.items():
            column = columns.get(name)
            if column is None:
                raise InvalidFilterError(
                    f"{self.model.__name__} has no column {name!r}", filter_name=name
                )
            if isinstance(value, Collection) and not isinstance(value, (str, bytes)):
                conditions.append(column.in_(list(value)))
            else:
                conditions.append(column == value)
        return conditions

    def _load_options(self, include: Iterable[str]) -> list[_AbstractLoad]:
        options = []
        for path in include:
            mapper = inspect(self.model)
            option = None
            for name in path.split("."):
                relationship = mapper.relationships.get(name)
                if relationship is None:
                    raise InvalidFilterError(
                        f"{mapper.class_.__name__} has no relationship {name!r}",
                        filter_name=path,
                    )
                attr = relationship.class_attribute
                option = selectinload(attr) if option is None else option.selectinload(attr)
                mapper = relationship.mapper
            if option is not None:
                options.append(option)
        return options


def _describe(where: Mapping[str, Any] | None) -> str:
    if not where:
        return "{}"
    parts = []
    for name, value in where.items():
        if isinstance(value, Collection) and not isinstance(value, (str, bytes)):
            parts.append(f"{name} IN [{len(value)} keys]")
        else:
            parts.append(f"{name}={value!r}")
    return ", ".join(parts)


def _identity(instance: Any) -> str:
    return ", ".join(str(value) for value in inspect(instance).identity or ())


__all__ = ["BaseRepository"]
