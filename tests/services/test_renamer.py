import json

import httpx
import pytest

from hyenescores.services import IdentityRenamer, PartialRenameError, PersistenceError
from hyenescores.services.renamer import RENAME_TARGETS
from hyenescores.store import PostgrestStore, StoreNotConfiguredError


@pytest.fixture
def league_store(fake_store):
    fake_store.seed("managers", [{"id": "m1", "name": "Alice"}, {"id": "m2", "name": "Bob"}])
    fake_store.seed(
        "matches",
        [
            {"championship": "france", "season": 1, "matchday": 1, "home_team": "Alice",
             "away_team": "Bob", "home_score": 1, "away_score": 0, "exempt_team": None},
            {"championship": "france", "season": 1, "matchday": 2, "home_team": "Bob",
             "away_team": "Alice", "home_score": 2, "away_score": 2, "exempt_team": "Alice"},
        ],
    )
    fake_store.seed(
        "champions",
        [{"championship": "france", "season": 1, "champion_name": "Alice", "runner_up_name": "Bob"}],
    )
    fake_store.seed(
        "pantheon",
        [{"manager_name": "Alice", "total_points": 4, "titles": 1, "runner_ups": 0}],
    )
    fake_store.seed(
        "penalties",
        [{"championship": "france", "season": 1, "team_name": "Alice", "points": -1}],
    )
    return fake_store


def _names(store):
    names = set()
    for table, column in RENAME_TARGETS:
        names.update(row[column] for row in store.tables[table] if row.get(column))
    return names


@pytest.mark.asyncio
class TestIdentityRenamer:
    async def test_rename_updates_every_reference(self, league_store):
        result = await IdentityRenamer(league_store).rename("m1", "Alice", "Alicia")

        assert "Alice" not in _names(league_store)
        assert "Alicia" in _names(league_store)
        assert league_store.tables["managers"][0]["name"] == "Alicia"
        assert result.updated_rows["matches.home_team"] == 1
        assert result.updated_rows["matches.away_team"] == 1
        assert result.updated_rows["matches.exempt_team"] == 1
        assert result.updated_rows["champions.runner_up_name"] == 0

    async def test_same_name_only_touches_manager_row(self, league_store):
        await IdentityRenamer(league_store).rename("m1", "Alice", "Alice")

        assert [c for c in league_store.calls if c[0] == "update"] == [("update", "managers")]

    async def test_partial_failure_reports_targets_and_keeps_other_updates(self, league_store):
        league_store.fail("update", "champions", column="champion_name", message="statement timeout")

        with pytest.raises(PartialRenameError) as exc_info:
            await IdentityRenamer(league_store).rename("m1", "Alice", "Alicia")

        error = exc_info.value
        assert error.failed == {"champions.champion_name": "statement timeout"}
        assert error.failed_count == 1
        assert "matches.home_team" in error.succeeded
        assert league_store.tables["champions"][0]["champion_name"] == "Alice"
        assert league_store.tables["matches"][0]["home_team"] == "Alicia"
        assert league_store.tables["pantheon"][0]["manager_name"] == "Alicia"

    async def test_retry_completes_partial_rename(self, league_store):
        league_store.fail("update", "champions", column="champion_name")
        with pytest.raises(PartialRenameError):
            await IdentityRenamer(league_store).rename("m1", "Alice", "Alicia")

        league_store.failures.clear()
        result = await IdentityRenamer(league_store).rename("m1", "Alice", "Alicia")

        assert "Alice" not in _names(league_store)
        assert result.updated_rows["champions.champion_name"] == 1
        assert result.updated_rows["matches.home_team"] == 0

    async def test_issues_one_update_per_target(self, league_store):
        await IdentityRenamer(league_store).rename("m1", "Alice", "Alicia")

        updates = [table for op, table in league_store.calls if op == "update"]
        assert updates[0] == "managers"
        assert len(updates) == 1 + len(RENAME_TARGETS)

    async def test_manager_update_failure_stops_rename(self, league_store):
        league_store.fail("update", "managers", message="row level security")

        with pytest.raises(PersistenceError) as exc_info:
            await IdentityRenamer(league_store).rename("m1", "Alice", "Alicia")

        assert not isinstance(exc_info.value, PartialRenameError)
        assert "row level security" in exc_info.value.message
        assert league_store.tables["matches"][0]["home_team"] == "Alice"

    async def test_rename_without_store_is_refused(self):
        with pytest.raises(StoreNotConfiguredError):
            await IdentityRenamer(None).rename("m1", "Alice", "Alicia")

    async def test_unexpected_error_counts_as_failed_target(self, league_store):
        update = league_store.update

        async def update_or_break(table, values, *, filters):
            if table == "pantheon":
                raise RuntimeError("unexpected payload")
            return await update(table, values, filters=filters)

        league_store.update = update_or_break

        with pytest.raises(PartialRenameError) as exc_info:
            await IdentityRenamer(league_store).rename("m1", "Alice", "Alicia")

        assert exc_info.value.failed == {"pantheon.manager_name": "RuntimeError: unexpected payload"}
        assert len(exc_info.value.succeeded) == len(RENAME_TARGETS) - 1
        assert league_store.tables["penalties"][0]["team_name"] == "Alicia"

    async def test_undecodable_response_reports_partial_rename(self):
        def handler(request: httpx.Request) -> httpx.Response:
            table = request.url.path.rsplit("/", 1)[-1]
            if table == "penalties":
                return httpx.Response(200, text="<html>Service unavailable</html>")
            return httpx.Response(200, json=[json.loads(request.content)])

        store = PostgrestStore(
            "https://league.example.com", "key", transport=httpx.MockTransport(handler)
        )

        with pytest.raises(PartialRenameError) as exc_info:
            await IdentityRenamer(store).rename("m1", "Alice", "Alicia")

        error = exc_info.value
        assert list(error.failed) == ["penalties.team_name"]
        assert "Invalid response from penalties" in error.failed["penalties.team_name"]
        assert error.failed_count == 1
        assert len(error.succeeded) == len(RENAME_TARGETS) - 1
