"""
Direct SQLAlchemy store over the same schema as the hosted one.

Every call runs in its own session so concurrent callers (assembler reads,
rename propagation) never share one. The hosted store's row cap is enforced
here as well, which keeps PagedReader's completion signal identical on both
backends.
"""
import logging
from collections.abc import Sequence

from sqlalchemy import Table, delete as sa_delete, func, insert as sa_insert, select, update as sa_update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from hyenescores.database import Base
import hyenescores.models  # noqa: F401  (registers the tables on Base.metadata)
from hyenescores.store.base import (
    MAX_ROWS,
    Filters,
    Row,
    StoreError,
    TableStore,
    normalize_order,
)

logger = logging.getLogger(__name__)

_DIALECT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def _store_error(exc: SQLAlchemyError) -> StoreError:
    orig = getattr(exc, "orig", None)
    return StoreError(str(orig) if orig is not None else str(exc), code=type(exc).__name__)


class SqlStore(TableStore):
    def __init__(self, engine: AsyncEngine, *, max_rows: int = MAX_ROWS):
        self.engine = engine
        self.max_rows = max_rows
        self._session_factory = async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

    def _table(self, name: str) -> Table:
        table = Base.metadata.tables.get(name)
        if table is None:
            raise StoreError(f"Unknown table: {name}", code="unknown_table")
        return table

    def _where(self, table: Table, filters: Filters | None) -> list:
        clauses = []
        for column, value in (filters or {}).items():
            if column not in table.c:
                raise StoreError(f"Unknown column {table.name}.{column}", code="unknown_column")
            col = table.c[column]
            clauses.append(col.is_(None) if value is None else col == value)
        return clauses

    def _cap(self, limit: int | None) -> int:
        if limit is None:
            return self.max_rows
        return min(limit, self.max_rows)

    async def select(
        self,
        table: str,
        *,
        filters: Filters | None = None,
        order_by: str | Sequence[str] | None = None,
        descending: bool = False,
        offset: int | None = None,
        limit: int | None = None,
    ) -> list[Row]:
        tbl = self._table(table)
        stmt = select(tbl).where(*self._where(tbl, filters))
        for column in normalize_order(order_by):
            if column not in tbl.c:
                raise StoreError(f"Unknown column {tbl.name}.{column}", code="unknown_column")
            col = tbl.c[column]
            stmt = stmt.order_by(col.desc() if descending else col.asc())
        if offset:
            stmt = stmt.offset(offset)
        stmt = stmt.limit(self._cap(limit))

        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return [dict(row._mapping) for row in result]
        except SQLAlchemyError as e:
            raise _store_error(e) from e

    async def insert(self, table: str, rows: Sequence[Row]) -> list[Row]:
        if not rows:
            return []
        tbl = self._table(table)
        stmt = sa_insert(tbl).values(list(rows)).returning(*tbl.c)
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                inserted = [dict(row._mapping) for row in result]
                await session.commit()
                return inserted
        except SQLAlchemyError as e:
            raise _store_error(e) from e

    async def upsert(
        self, table: str, rows: Sequence[Row], *, on_conflict: Sequence[str]
    ) -> list[Row]:
        if not rows:
            return []
        tbl = self._table(table)
        dialect_insert = _DIALECT_INSERTS.get(self.engine.dialect.name)
        if dialect_insert is None:
            raise StoreError(
                f"Upsert is not supported on {self.engine.dialect.name}", code="unsupported"
            )

        stmt = dialect_insert(tbl).values(list(rows))
        update_columns = {
            column: stmt.excluded[column]
            for column in rows[0]
            if column not in on_conflict
        }
        if update_columns and "updated_at" in tbl.c and "updated_at" not in update_columns:
            update_columns["updated_at"] = func.now()
        if update_columns:
            stmt = stmt.on_conflict_do_update(index_elements=list(on_conflict), set_=update_columns)
        else:
            stmt = stmt.on_conflict_do_nothing(index_elements=list(on_conflict))
        stmt = stmt.returning(*tbl.c)

        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                stored = [dict(row._mapping) for row in result]
                await session.commit()
                return stored
        except SQLAlchemyError as e:
            raise _store_error(e) from e

    async def update(self, table: str, values: Row, *, filters: Filters) -> list[Row]:
        tbl = self._table(table)
        stmt = (
            sa_update(tbl)
            .where(*self._where(tbl, filters))
            .values(**values)
            .returning(*tbl.c)
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                updated = [dict(row._mapping) for row in result]
                await session.commit()
                return updated
        except SQLAlchemyError as e:
            raise _store_error(e) from e

    async def delete(self, table: str, *, filters: Filters) -> None:
        tbl = self._table(table)
        stmt = sa_delete(tbl).where(*self._where(tbl, filters))
        try:
            async with self._session_factory() as session:
                await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as e:
            raise _store_error(e) from e

    async def replace_rows(
        self, table: str, *, filters: Filters, rows: Sequence[Row]
    ) -> list[Row]:
        """Delete and insert inside a single transaction."""
        tbl = self._table(table)
        try:
            async with self._session_factory() as session:
                await session.execute(sa_delete(tbl).where(*self._where(tbl, filters)))
                inserted: list[Row] = []
                if rows:
                    result = await session.execute(
                        sa_insert(tbl).values(list(rows)).returning(*tbl.c)
                    )
                    inserted = [dict(row._mapping) for row in result]
                await session.commit()
                return inserted
        except SQLAlchemyError as e:
            raise _store_error(e) from e

    async def aclose(self) -> None:
        await self.engine.dispose()
