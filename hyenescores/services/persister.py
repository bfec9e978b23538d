"""
Per-entity writes.

Every write replaces the whole identified row (upsert on the entity's
natural key) and either succeeds or raises PersistenceError with the store's
message. Matchdays are the exception: their game list has no stable per-row
identity, so ``replace_matchday`` deletes the matchday and inserts the new
list.
"""
import logging
from collections.abc import Iterable, Sequence
from typing import Any

from hyenescores.schemas.document import GameEntry
from hyenescores.store.base import Row, StoreError, StoreNotConfiguredError, TableStore
from hyenescores.services.errors import PersistenceError

logger = logging.getLogger(__name__)

# Upsert conflict keys per table
CONFLICT_KEYS = {
    "managers": ("id",),
    "seasons": ("championship", "season_number"),
    "champions": ("championship", "season"),
    "pantheon": ("manager_name",),
    "penalties": ("championship", "season", "team_name"),
}


def _as_game(game: GameEntry | dict[str, Any]) -> GameEntry:
    if isinstance(game, GameEntry):
        return game
    return GameEntry.model_validate(game)


class RecordPersister:
    def __init__(self, store: TableStore | None):
        self.store = store

    def require_store(self) -> TableStore:
        if self.store is None:
            raise StoreNotConfiguredError()
        return self.store

    async def _upsert(self, table: str, rows: Sequence[Row]) -> list[Row]:
        store = self.require_store()
        try:
            return await store.upsert(table, rows, on_conflict=CONFLICT_KEYS[table])
        except StoreError as e:
            raise PersistenceError.from_store_error(f"Saving {table}", e) from e

    async def _delete(self, table: str, filters: dict[str, Any]) -> None:
        store = self.require_store()
        try:
            await store.delete(table, filters=filters)
        except StoreError as e:
            raise PersistenceError.from_store_error(f"Deleting from {table}", e) from e

    # ==================== Managers ====================

    async def save_manager(self, manager_id: str, name: str) -> list[Row]:
        return await self._upsert("managers", [{"id": manager_id, "name": name}])

    async def save_managers(self, managers: Iterable[tuple[str, str]]) -> list[Row]:
        """Upsert several managers in a single request."""
        rows = [{"id": manager_id, "name": name} for manager_id, name in managers]
        if not rows:
            return []
        return await self._upsert("managers", rows)

    async def delete_manager(self, manager_id: str) -> None:
        await self._delete("managers", {"id": manager_id})

    # ==================== Seasons ====================

    async def save_season(
        self, championship: str, season_number: int, standings: Any = None
    ) -> list[Row]:
        return await self._upsert(
            "seasons",
            [{
                "championship": championship,
                "season_number": season_number,
                "standings": standings if standings is not None else [],
            }],
        )

    # ==================== Matches ====================

    async def replace_matchday(
        self,
        championship: str,
        season: int,
        matchday: int,
        games: Iterable[GameEntry | dict[str, Any]],
        exempt_team: str | None = None,
    ) -> list[Row]:
        """
        Replace every match of a matchday with ``games``.

        Games missing either team name are dropped. The delete always runs,
        so an empty list clears the matchday. On stores that cannot run both
        statements in one transaction, a failure after the delete leaves the
        matchday empty until it is saved again.
        """
        store = self.require_store()
        valid_games = [g for g in map(_as_game, games) if g.is_complete]
        rows = [
            {
                "championship": championship,
                "season": season,
                "matchday": matchday,
                "home_team": game.home_team,
                "away_team": game.away_team,
                "home_score": game.home_score,
                "away_score": game.away_score,
                "exempt_team": exempt_team or None,
            }
            for game in valid_games
        ]

        try:
            saved = await store.replace_rows(
                "matches",
                filters={"championship": championship, "season": season, "matchday": matchday},
                rows=rows,
            )
        except StoreError as e:
            raise PersistenceError.from_store_error(
                f"Saving matches {championship} S{season} J{matchday}", e
            ) from e

        logger.debug(f"Replaced {championship} S{season} J{matchday}: {len(saved)} matches")
        return saved

    async def update_season_exempt(
        self, season: int, exempt_team: str | None, championship: str | None = None
    ) -> list[Row]:
        """Set the exempt team on every match of a season (all championships unless given)."""
        store = self.require_store()
        filters: dict[str, Any] = {"season": season}
        if championship is not None:
            filters["championship"] = championship
        try:
            return await store.update(
                "matches", {"exempt_team": exempt_team or None}, filters=filters
            )
        except StoreError as e:
            raise PersistenceError.from_store_error(f"Updating exempt team S{season}", e) from e

    # ==================== Palmares / pantheon ====================

    async def save_champion(
        self,
        championship: str,
        season: int,
        champion_name: str,
        runner_up_name: str | None = None,
    ) -> list[Row]:
        return await self._upsert(
            "champions",
            [{
                "championship": championship,
                "season": season,
                "champion_name": champion_name,
                "runner_up_name": runner_up_name or None,
            }],
        )

    async def save_pantheon_entry(
        self, manager_name: str, total_points: int, titles: int, runner_ups: int
    ) -> list[Row]:
        return await self._upsert(
            "pantheon",
            [{
                "manager_name": manager_name,
                "total_points": total_points,
                "titles": titles,
                "runner_ups": runner_ups,
            }],
        )

    # ==================== Penalties ====================

    async def save_penalty(
        self, championship: str, season: int, team_name: str, points: int
    ) -> list[Row]:
        return await self._upsert(
            "penalties",
            [{
                "championship": championship,
                "season": season,
                "team_name": team_name,
                "points": points,
            }],
        )

    async def delete_penalty(self, championship: str, season: int, team_name: str) -> None:
        await self._delete(
            "penalties",
            {"championship": championship, "season": season, "team_name": team_name},
        )
