from __future__ import annotations
from typing import Any, Generic, Iterable, Mapping, Sequence, TypeVar
from sqlalchemy import select, delete as sa_delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.inspection import inspect as sa_inspect

T = TypeVar("T")  # SQLAlchemy model class (Declarative)


class BaseRepository(Generic[T]):
    """
    Shared async repository for one model.
    - Writes only flush; commit/rollback belongs to the caller (service unit of work).
    - Filters are equality only (filter_by).
    """

    def __init__(self, model: type[T]) -> None:
        self.model = model

    # ------------------------ Read ------------------------

    async def get(self, session: AsyncSession, pk: Any) -> T | None:
        """Fetch one row by primary key."""
        return await session.get(self.model, pk)

    async def find_one(self, session: AsyncSession, **filters: Any) -> T | None:
        """First row matching the filters, or None."""
        stmt = select(self.model).filter_by(**filters).limit(1)
        res = await session.execute(stmt)
        return res.scalars().first()

    async def list(
        self,
        session: AsyncSession,
        *,
        where: dict[str, Any] | None = None,
        order_by: Sequence[Any] | None = None,
        limit: int | None = None,
        offset: int | None = 0,
    ) -> list[T]:
        stmt = select(self.model)
        if where:
            stmt = stmt.filter_by(**where)
        if order_by:
            stmt = stmt.order_by(*order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset:
            stmt = stmt.offset(offset)
        res = await session.execute(stmt)
        return list(res.scalars().all())

    # ------------------------ Write ------------------------

    async def create(self, session: AsyncSession, obj: T) -> T:
        """
        Insert a new model instance.
        - only transient (new) instances are accepted
        - id and timestamps are populated after the flush
        """
        state = sa_inspect(obj)
        if not state.transient:
            raise ValueError("create(): expected a transient (new) SQLAlchemy model instance")
        session.add(obj)
        await session.flush()
        return obj

    async def bulk_create(self, session: AsyncSession, models: Iterable[T]) -> int:
        """Insert several new instances in one flush; returns the number inserted."""
        items = list(models)
        if not items:
            return 0
        for m in items:
            if not sa_inspect(m).transient:
                raise ValueError("bulk_create(): all models must be transient (new)")
        session.add_all(items)
        await session.flush()
        return len(items)

    async def update_fields(self, session: AsyncSession, obj: T, values: Mapping[str, Any]) -> T:
        """
        Partial update of a loaded instance.
        Primary key columns are never overwritten.
        """
        mapper = sa_inspect(self.model)
        pk_names = {c.key for c in mapper.primary_key}
        columns = {c.key for c in mapper.columns}
        for name, value in values.items():
            if name in pk_names:
                continue
            if name not in columns:
                raise ValueError(f"update_fields(): unknown column '{name}'")
            setattr(obj, name, value)
        await session.flush()
        return obj

    async def delete(self, session: AsyncSession, obj: T) -> None:
        await session.delete(obj)
        await session.flush()

    async def delete_where(self, session: AsyncSession, **filters: Any) -> int:
        """Delete every row matching the filters (returns the row count)."""
        if not filters:
            raise ValueError("delete_where(): refusing to delete without filters")
        stmt = sa_delete(self.model).filter_by(**filters)
        res = await session.execute(stmt)
        return res.rowcount or 0
