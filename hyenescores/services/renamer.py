"""
Manager rename propagation.

Matches, champions, pantheon and penalties refer to managers by name. A rename
first updates the manager row by id, then rewrites the old name in every
referencing column. The seven column updates are independent requests issued
concurrently; there is no transaction and no rollback. If some of them fail,
the store is left partially renamed and the rename has to be run again:
every step filters on the old name, so repeating it only touches rows that
were missed.
"""
import asyncio
import logging
from dataclasses import dataclass, field

from hyenescores.store.base import StoreError, StoreNotConfiguredError, TableStore
from hyenescores.services.errors import PartialRenameError, PersistenceError

logger = logging.getLogger(__name__)

# (table, column) pairs holding a manager name
RENAME_TARGETS = (
    ("matches", "home_team"),
    ("matches", "away_team"),
    ("matches", "exempt_team"),
    ("champions", "champion_name"),
    ("champions", "runner_up_name"),
    ("pantheon", "manager_name"),
    ("penalties", "team_name"),
)


@dataclass
class RenameResult:
    manager_id: str
    old_name: str
    new_name: str
    updated_rows: dict[str, int] = field(default_factory=dict)


class IdentityRenamer:
    def __init__(self, store: TableStore | None):
        self.store = store

    async def _propagate(self, table: str, column: str, old_name: str, new_name: str) -> int:
        rows = await self.store.update(table, {column: new_name}, filters={column: old_name})
        return len(rows)

    async def rename(self, manager_id: str, old_name: str, new_name: str) -> RenameResult:
        """
        Rename a manager everywhere.

        Raises PersistenceError if the manager row itself cannot be updated
        (nothing else is attempted), and PartialRenameError if some of the
        propagation targets failed.
        """
        if self.store is None:
            raise StoreNotConfiguredError()

        try:
            await self.store.update("managers", {"name": new_name}, filters={"id": manager_id})
        except StoreError as e:
            raise PersistenceError.from_store_error(f"Renaming manager {manager_id}", e) from e

        result = RenameResult(manager_id=manager_id, old_name=old_name, new_name=new_name)
        if old_name == new_name:
            return result

        outcomes = await asyncio.gather(
            *(
                self._propagate(table, column, old_name, new_name)
                for table, column in RENAME_TARGETS
            ),
            return_exceptions=True,
        )

        failed: dict[str, str] = {}
        for (table, column), outcome in zip(RENAME_TARGETS, outcomes):
            target = f"{table}.{column}"
            if isinstance(outcome, StoreError):
                failed[target] = outcome.message
            elif isinstance(outcome, Exception):
                failed[target] = f"{type(outcome).__name__}: {outcome}"
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                result.updated_rows[target] = outcome

        if failed:
            logger.error(f"Cascade rename errors ({old_name!r} -> {new_name!r}): {failed}")
            raise PartialRenameError(failed, succeeded=list(result.updated_rows))

        logger.info(
            f"Renamed manager {manager_id}: {old_name!r} -> {new_name!r}, "
            f"{sum(result.updated_rows.values())} rows updated"
        )
        return result
