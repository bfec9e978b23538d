import asyncio
import itertools
from collections.abc import Sequence
from typing import Any, AsyncGenerator

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine

from hyenescores.main import app
from hyenescores.database import Base
from hyenescores.api.deps import get_store
from hyenescores.services import RecordPersister
from hyenescores.store import MAX_ROWS, TABLES, StoreError, TableStore
from hyenescores.store.base import normalize_order
from hyenescores.store.sql import SqlStore


TEST_DATABASE_NAME = "hyenescores_test.db"


# Note: Using pytest-asyncio's built-in event_loop fixture (asyncio_mode = auto)


class FakeStore(TableStore):
    """
    In-memory store with the hosted store's behaviour: silent row cap,
    exact-match filters, upsert on a conflict key. Failures can be forced
    per (operation, table) or per (operation, table, column).
    """

    def __init__(self, max_rows: int = MAX_ROWS):
        self.max_rows = max_rows
        self.tables: dict[str, list[dict[str, Any]]] = {name: [] for name in TABLES}
        self.failures: dict[tuple, str] = {}
        self.calls: list[tuple[str, str]] = []
        self._ids = itertools.count(1)

    def fail(self, operation: str, table: str, column: str | None = None, message: str = "forced failure"):
        key = (operation, table, column) if column else (operation, table)
        self.failures[key] = message

    def seed(self, table: str, rows: Sequence[dict[str, Any]]) -> None:
        for row in rows:
            stored = dict(row)
            if table != "managers" and stored.get("id") is None:
                stored["id"] = next(self._ids)
            self.tables[table].append(stored)

    async def _enter(self, operation: str, table: str, columns: Sequence[str] = ()) -> None:
        self.calls.append((operation, table))
        # suspend like a real request so concurrent callers interleave
        await asyncio.sleep(0)
        if (operation, table) in self.failures:
            raise StoreError(self.failures[(operation, table)], code="forced")
        for column in columns:
            if (operation, table, column) in self.failures:
                raise StoreError(self.failures[(operation, table, column)], code="forced")

    @staticmethod
    def _matches(row: dict[str, Any], filters) -> bool:
        return all(row.get(column) == value for column, value in (filters or {}).items())

    async def select(
        self,
        table: str,
        *,
        filters=None,
        order_by=None,
        descending: bool = False,
        offset: int | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        await self._enter("select", table)
        rows = [dict(r) for r in self.tables[table] if self._matches(r, filters)]
        columns = normalize_order(order_by)
        if columns:
            rows.sort(
                key=lambda r: tuple((r.get(c) is None, r.get(c)) for c in columns),
                reverse=descending,
            )
        start = offset or 0
        count = min(limit or self.max_rows, self.max_rows)
        return rows[start:start + count]

    async def insert(self, table: str, rows) -> list[dict[str, Any]]:
        await self._enter("insert", table)
        inserted = []
        for row in rows:
            stored = dict(row)
            if table != "managers":
                stored["id"] = next(self._ids)
            self.tables[table].append(stored)
            inserted.append(dict(stored))
        return inserted

    async def upsert(self, table: str, rows, *, on_conflict) -> list[dict[str, Any]]:
        await self._enter("upsert", table)
        stored_rows = []
        for row in rows:
            key = {column: row[column] for column in on_conflict}
            existing = next((r for r in self.tables[table] if self._matches(r, key)), None)
            if existing is None:
                existing = dict(row)
                if table != "managers":
                    existing["id"] = next(self._ids)
                self.tables[table].append(existing)
            else:
                existing.update(row)
            stored_rows.append(dict(existing))
        return stored_rows

    async def update(self, table: str, values, *, filters) -> list[dict[str, Any]]:
        await self._enter("update", table, columns=list(filters))
        updated = []
        for row in self.tables[table]:
            if self._matches(row, filters):
                row.update(values)
                updated.append(dict(row))
        return updated

    async def delete(self, table: str, *, filters) -> None:
        await self._enter("delete", table)
        self.tables[table] = [r for r in self.tables[table] if not self._matches(r, filters)]


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture(scope="function")
async def test_engine(tmp_path):
    """
    Create test database engine.

    File-backed so that concurrent store calls each get their own connection.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / TEST_DATABASE_NAME}",
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
async def sql_store(test_engine) -> SqlStore:
    return SqlStore(test_engine)


@pytest.fixture
def persister(sql_store) -> RecordPersister:
    return RecordPersister(sql_store)


@pytest.fixture(scope="function")
async def client(fake_store) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with the store dependency pointed at the fake store."""

    app.dependency_overrides[get_store] = lambda: fake_store

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# --- Data Fixtures ---

@pytest.fixture
def sample_document() -> dict[str, Any]:
    """A small exported league document (JSON form)."""
    return {
        "version": "2.0",
        "entities": {
            "managers": {
                "m1": {"id": "m1", "name": "Alice"},
                "m2": {"id": "m2", "name": "Bob"},
                "m3": {"id": "m3", "name": "Chloe"},
            },
            "seasons": {
                "france_s1": {
                    "championship": "france",
                    "season": 1,
                    "standings": [{"team": "Alice", "points": 6}, {"team": "Bob", "points": 0}],
                },
            },
            "matches": [
                {
                    "championship": "france",
                    "season": 1,
                    "matchday": 1,
                    "exempt": "Chloe",
                    "games": [
                        {"id": 1, "homeTeam": "Alice", "awayTeam": "Bob", "homeScore": 2, "awayScore": 0},
                    ],
                },
                {
                    "championship": "france",
                    "season": 1,
                    "matchday": 2,
                    "exempt": "Chloe",
                    "games": [
                        {"id": 2, "homeTeam": "Bob", "awayTeam": "Alice", "homeScore": 1, "awayScore": 3},
                    ],
                },
            ],
        },
        "palmares": {
            "france": [{"season": 1, "champion": "Alice", "runnerUp": "Bob"}],
        },
        "pantheon": [
            {"name": "Alice", "totalPoints": 6, "titles": 1, "runnerUps": 0},
            {"name": "Bob", "totalPoints": 0, "titles": 0, "runnerUps": 1},
        ],
        "penalties": [
            {"championship": "france", "season": 1, "teamName": "Bob", "points": -2},
        ],
    }
