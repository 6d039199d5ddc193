"""Generic Table Repository — parameterized CRUD over any declarative model.

Invariants:
    - Statements are built with SQLAlchemy Core against model.__table__, so the
      only identifiers that reach SQL are columns the model itself declares
    - Unknown column keys raise ValueError before any SQL is built
    - The primary key is store-assigned: create/update refuse to set it
    - Every value is a bound parameter, including in raw_query
    - Each write commits on success and rolls back on failure

Design Decisions:
    - Core statements over ORM unit-of-work: callers pass partial column maps,
      and rowcount answers "did a row match" without loading the object first
    - find_all orders by primary key so offset paging is stable across calls
    - IntegrityError/DataError surface as ConstraintViolationError; deciding what
      the violation means (e.g. a duplicate) is the service's job
"""

import logging
from typing import Any, Generic, Mapping, TypeVar

from sqlalchemy import delete, insert, select, text, update
from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from userhub.core.errors import ConstraintViolationError, ValidationFailedError
from userhub.db.base import Base

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """CRUD for one table, returning rows as dicts."""

    def __init__(self, session: AsyncSession, model: type[ModelT]):
        self._session = session
        self.model = model
        self.table = model.__table__
        self.table_name: str = self.table.name
        (self._pk,) = self.table.primary_key.columns

    async def find_by_id(self, entity_id: int) -> dict | None:
        return await self.find_one_by(self._pk.key, entity_id)

    async def find_one_by(self, column: str, value: Any) -> dict | None:
        """Single-column equality lookup; None when nothing matches."""
        col = self._column(column)
        result = await self._session.execute(
            select(self.table).where(col == value).limit(1),
        )
        row = result.mappings().first()
        return dict(row) if row is not None else None

    async def find_all(self, limit: int = 100, offset: int = 0) -> list[dict]:
        result = await self._session.execute(
            select(self.table)
            .order_by(self._pk)
            .limit(limit)
            .offset(offset),
        )
        return [dict(row) for row in result.mappings().all()]

    async def create(self, fields: Mapping[str, Any]) -> int:
        """Insert exactly the supplied columns; returns the new primary key."""
        values = self._checked_values(fields)
        try:
            result = await self._session.execute(
                insert(self.table).values(values),
            )
            new_id = result.inserted_primary_key[0]
            await self._session.commit()
        except (IntegrityError, DataError) as e:
            await self._session.rollback()
            logger.warning(f"Insert into {self.table_name} rejected: {e.orig}")
            raise ConstraintViolationError(self.table_name, "insert") from e
        return new_id

    async def update(self, entity_id: int, fields: Mapping[str, Any]) -> bool:
        """Update exactly the supplied columns; True when a row matched."""
        values = self._checked_values(fields)
        if not values:
            raise ValidationFailedError("No fields to update")
        try:
            result = await self._session.execute(
                update(self.table)
                .where(self._pk == entity_id)
                .values(values),
            )
            matched = result.rowcount
            await self._session.commit()
        except (IntegrityError, DataError) as e:
            await self._session.rollback()
            logger.warning(f"Update of {self.table_name} rejected: {e.orig}")
            raise ConstraintViolationError(self.table_name, "update") from e
        return matched > 0

    async def delete_by_id(self, entity_id: int) -> bool:
        result = await self._session.execute(
            delete(self.table).where(self._pk == entity_id),
        )
        deleted = result.rowcount
        await self._session.commit()
        return deleted > 0

    async def raw_query(
        self, statement: str, params: Mapping[str, Any] | None = None,
    ) -> list[dict]:
        """Escape hatch for SQL beyond single-row CRUD.

        Values must be passed through ``params`` and referenced as ``:name``
        placeholders; never format them into ``statement``.
        """
        result = await self._session.execute(text(statement), dict(params or {}))
        if not result.returns_rows:
            await self._session.commit()
            return []
        return [dict(row) for row in result.mappings().all()]

    def _column(self, name: str):
        try:
            return self.table.c[name]
        except KeyError:
            raise ValueError(
                f"Unknown column '{name}' for table {self.table_name}",
            ) from None

    def _checked_values(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        unknown = sorted(set(fields) - set(self.table.c.keys()))
        if unknown:
            raise ValueError(
                f"Unknown column(s) for table {self.table_name}: {', '.join(unknown)}",
            )
        if self._pk.key in fields:
            raise ValueError(f"{self.table_name}.{self._pk.key} is store-assigned")
        return dict(fields)
