"""
Store boundary.

The relational store is reached through a small table-oriented contract:
exact-match filters, ordered/ranged selects, insert, upsert by a declared
conflict key, filtered update and filtered delete. Two implementations exist,
a PostgREST client (the hosted store) and a direct SQLAlchemy one.

Every select is silently capped to ``max_rows`` rows by the store; callers
that need a whole collection go through PagedReader.
"""
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

# Fixed per-request row cap of the hosted store.
MAX_ROWS = 1000

TABLES = ("managers", "seasons", "matches", "champions", "pantheon", "penalties")

Row = dict[str, Any]
Filters = Mapping[str, Any]


class StoreError(Exception):
    """A store request failed. Carries the remote store's message."""

    def __init__(self, message: str, *, code: str | None = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details


class StoreNotConfiguredError(StoreError):
    """No store handle is available (credentials missing)."""

    def __init__(self, message: str = "Store is not configured"):
        super().__init__(message, code="not_configured")


def normalize_order(order_by: str | Sequence[str] | None) -> list[str]:
    if order_by is None:
        return []
    if isinstance(order_by, str):
        return [order_by]
    return list(order_by)


class TableStore(ABC):
    """Async table store with a hard per-request row cap."""

    max_rows: int = MAX_ROWS

    @abstractmethod
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
        """Return at most ``max_rows`` rows matching ``filters``."""

    @abstractmethod
    async def insert(self, table: str, rows: Sequence[Row]) -> list[Row]:
        """Insert rows and return them as stored."""

    @abstractmethod
    async def upsert(
        self, table: str, rows: Sequence[Row], *, on_conflict: Sequence[str]
    ) -> list[Row]:
        """Insert rows, replacing any row that collides on ``on_conflict``."""

    @abstractmethod
    async def update(self, table: str, values: Row, *, filters: Filters) -> list[Row]:
        """Set ``values`` on every row matching ``filters``; return updated rows."""

    @abstractmethod
    async def delete(self, table: str, *, filters: Filters) -> None:
        """Delete every row matching ``filters``."""

    async def replace_rows(
        self, table: str, *, filters: Filters, rows: Sequence[Row]
    ) -> list[Row]:
        """
        Delete every row matching ``filters`` then insert ``rows``.

        The base version issues two independent requests, so a failure
        between them leaves the filtered set empty. Stores able to run both
        statements in one transaction override it.
        """
        await self.delete(table, filters=filters)
        if not rows:
            return []
        return await self.insert(table, rows)

    async def aclose(self) -> None:
        """Release resources held by the store."""
        return None
