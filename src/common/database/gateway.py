# src/common/database/gateway.py
"""Table-scoped database operations shared by every service."""

import math
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.common.utils.exceptions import StorageError
from src.models.models import Base

ModelT = TypeVar("ModelT", bound=Base)


@dataclass
class PageResult:
    """One page of rows plus the numbers the list envelope needs."""
    items: List[Any]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


class TableGateway(Generic[ModelT]):
    """Read/write operations for one table over a request-scoped session.

    Missing rows come back as ``None``; every SQLAlchemy failure is re-raised
    as ``StorageError`` with the original exception chained.
    """

    def __init__(self, session: AsyncSession, model: Type[ModelT]):
        self.session = session
        self.model = model

    @property
    def table(self) -> str:
        return self.model.__tablename__

    async def _execute(self, statement):
        try:
            return await self.session.execute(statement)
        except SQLAlchemyError as e:
            raise StorageError(f"Query on '{self.table}' failed") from e

    @staticmethod
    def _rows(result, statement: Select) -> List[Any]:
        # Single-entity selects yield model instances, joins yield row tuples
        if len(statement.column_descriptions) == 1:
            return list(result.scalars().all())
        return list(result.all())

    async def paginate(
        self,
        statement: Select,
        conditions: Sequence[Any],
        page: int,
        limit: int,
    ) -> PageResult:
        """Run ``statement`` restricted to rows ``[offset, offset + limit - 1]``."""
        count_query = select(func.count()).select_from(self.model).where(*conditions)
        total = (await self._execute(count_query)).scalar() or 0

        offset = (page - 1) * limit
        paged = statement.where(*conditions).offset(offset).limit(limit)
        result = await self._execute(paged)
        return PageResult(items=self._rows(result, paged), total=total, page=page, limit=limit)

    async def fetch_all(self, statement: Select) -> List[Any]:
        result = await self._execute(statement)
        return self._rows(result, statement)

    async def fetch_one(self, statement: Select) -> Optional[Any]:
        rows = await self.fetch_all(statement.limit(1))
        return rows[0] if rows else None

    async def get(self, row_id: int) -> Optional[ModelT]:
        try:
            return await self.session.get(self.model, row_id)
        except SQLAlchemyError as e:
            raise StorageError(f"Lookup on '{self.table}' failed") from e

    async def count(self, *conditions) -> int:
        query = select(func.count()).select_from(self.model).where(*conditions)
        return (await self._execute(query)).scalar() or 0

    async def exists(self, *conditions) -> bool:
        return await self.count(*conditions) > 0

    async def insert(self, values: Dict[str, Any]) -> ModelT:
        row = self.model(**values)
        self.session.add(row)
        await self._flush(row)
        return row

    async def update(self, row: ModelT, values: Dict[str, Any]) -> ModelT:
        for field, value in values.items():
            setattr(row, field, value)
        await self._flush(row)
        return row

    async def delete(self, row: ModelT) -> ModelT:
        try:
            await self.session.delete(row)
            await self.session.flush()
        except SQLAlchemyError as e:
            raise StorageError(f"Delete on '{self.table}' failed") from e
        return row

    async def commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StorageError(f"Commit on '{self.table}' failed") from e

    async def _flush(self, row: ModelT) -> None:
        try:
            await self.session.flush()
            await self.session.refresh(row)
        except SQLAlchemyError as e:
            raise StorageError(f"Write on '{self.table}' failed") from e
