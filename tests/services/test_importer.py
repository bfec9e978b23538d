import logging

import pytest

from hyenescores.schemas.document import LeagueDocument
from hyenescores.services import BulkImporter, InvalidDocumentError, RecordPersister
from hyenescores.store import StoreNotConfiguredError


def _block(matchday, games=None, championship="france", season=1, exempt=""):
    return {
        "championship": championship,
        "season": season,
        "matchday": matchday,
        "exempt": exempt,
        "games": games if games is not None else [
            {"homeTeam": "Alice", "awayTeam": "Bob", "homeScore": 1, "awayScore": 0},
        ],
    }


def _document(blocks, **sections):
    return {
        "version": "2.0",
        "entities": {"managers": {}, "seasons": {}, "matches": blocks},
        **sections,
    }


@pytest.mark.asyncio
class TestBulkImporter:
    async def test_imports_every_section(self, persister, sql_store, sample_document):
        result = await BulkImporter(persister).import_document(sample_document)

        assert result.success is True
        assert result.imported_count == 2
        assert result.error_count == 0
        assert result.total_blocks == 2
        assert len(await sql_store.select("managers")) == 3
        assert len(await sql_store.select("seasons")) == 1
        assert len(await sql_store.select("matches")) == 2
        assert len(await sql_store.select("champions")) == 1
        assert len(await sql_store.select("pantheon")) == 2
        penalties = await sql_store.select("penalties")
        assert [(p["team_name"], p["points"]) for p in penalties] == [("Bob", -2)]

    async def test_malformed_block_is_counted_and_skipped(self, fake_store):
        blocks = [_block(i) for i in range(1, 11)]
        blocks[4] = {"championship": "france", "season": 1, "games": "not a list"}

        result = await BulkImporter(RecordPersister(fake_store)).import_document(_document(blocks))

        assert result.imported_count == 9
        assert result.error_count == 1
        assert result.total_blocks == 10
        assert result.errors[0].startswith("france S1 JNone")
        assert len(fake_store.tables["matches"]) == 9

    async def test_store_failure_on_block_is_counted(self, fake_store):
        fake_store.fail("insert", "matches", message="timeout")
        blocks = [_block(1), _block(2, games=[])]

        result = await BulkImporter(RecordPersister(fake_store)).import_document(_document(blocks))

        # the empty block needs no insert
        assert result.imported_count == 1
        assert result.error_count == 1
        assert "timeout" in result.errors[0]

    async def test_legacy_fields_and_penalty_keys(self, fake_store):
        document = _document(
            [_block(1, games=[{"h": "Alice", "a": "Bob", "hs": 3, "as": 2}])],
            penalties={"france_1_Bob": -2, "france_2_Team_With_Underscores": -1},
        )

        result = await BulkImporter(RecordPersister(fake_store)).import_document(document)

        assert result.imported_count == 1
        match = fake_store.tables["matches"][0]
        assert (match["home_team"], match["away_team"]) == ("Alice", "Bob")
        assert (match["home_score"], match["away_score"]) == (3, 2)
        penalties = {
            (p["championship"], p["season"], p["team_name"]): p["points"]
            for p in fake_store.tables["penalties"]
        }
        assert penalties == {
            ("france", 1, "Bob"): -2,
            ("france", 2, "Team_With_Underscores"): -1,
        }

    async def test_full_field_names_win_over_legacy_ones(self, fake_store):
        game = {"homeTeam": "Alice", "h": "Ignored", "awayTeam": "", "a": "Bob", "homeScore": 0, "hs": 5}

        await BulkImporter(RecordPersister(fake_store)).import_document(
            _document([_block(1, games=[game])])
        )

        match = fake_store.tables["matches"][0]
        assert match["home_team"] == "Alice"
        assert match["away_team"] == "Bob"
        assert match["home_score"] == 0

    async def test_accepts_assembled_document(self, fake_store, sample_document):
        document = LeagueDocument.model_validate(sample_document)

        result = await BulkImporter(RecordPersister(fake_store)).import_document(document)

        assert result.imported_count == 2
        assert len(fake_store.tables["penalties"]) == 1

    async def test_missing_entities_is_rejected(self, fake_store):
        with pytest.raises(InvalidDocumentError):
            await BulkImporter(RecordPersister(fake_store)).import_document({"version": "2.0"})

        assert fake_store.calls == []

    async def test_malformed_penalty_key_is_rejected(self, fake_store):
        document = _document([], penalties={"nounderscore": -1})

        with pytest.raises(InvalidDocumentError):
            await BulkImporter(RecordPersister(fake_store)).import_document(document)

    async def test_import_without_store_is_refused(self):
        with pytest.raises(StoreNotConfiguredError):
            await BulkImporter(RecordPersister(None)).import_document(_document([_block(1)]))

    async def test_logs_progress(self, fake_store, caplog):
        blocks = [_block(i) for i in range(1, 6)]

        with caplog.at_level(logging.INFO, logger="hyenescores.services.importer"):
            await BulkImporter(RecordPersister(fake_store), progress_interval=2).import_document(
                _document(blocks)
            )

        progress = [r.message for r in caplog.records if r.message.startswith("Progress")]
        assert progress == [
            "Progress: 2/5 blocks imported",
            "Progress: 4/5 blocks imported",
        ]
