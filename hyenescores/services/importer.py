"""
Bulk import of a league document into the store.

Sections are written in dependency order: managers first (every other table
refers to them by name), then seasons, matchday blocks, champions, pantheon
and penalties. Matchday blocks are imported one at a time; a failing block is
logged with its coordinates and counted, and the import moves on. The import
is not atomic: a partial import is reported through the counts.
"""
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ValidationError
from pydantic.alias_generators import to_camel

from hyenescores.config import get_settings
from hyenescores.schemas.document import (
    LeagueDocument,
    ManagerEntry,
    MatchdayBlock,
    PalmaresEntry,
    PantheonItem,
    SeasonEntry,
    coerce_penalties,
)
from hyenescores.services.errors import InvalidDocumentError
from hyenescores.services.persister import RecordPersister
from hyenescores.store.base import StoreNotConfiguredError

logger = logging.getLogger(__name__)


class ImportResult(BaseModel):
    model_config = {"populate_by_name": True, "alias_generator": to_camel}

    success: bool = True
    imported_count: int = 0
    error_count: int = 0
    total_blocks: int = 0
    errors: list[str] = []


def _validate(model: type[BaseModel], raw: Any, section: str) -> Any:
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise InvalidDocumentError(f"Invalid {section} entry: {e}") from e


def _block_label(raw: Any) -> str:
    if isinstance(raw, Mapping):
        return f"{raw.get('championship')} S{raw.get('season')} J{raw.get('matchday')}"
    return repr(raw)


class BulkImporter:
    def __init__(self, persister: RecordPersister, progress_interval: int | None = None):
        self.persister = persister
        self.progress_interval = progress_interval or get_settings().import_progress_interval

    async def import_document(self, document: LeagueDocument | Mapping[str, Any]) -> ImportResult:
        """
        Recreate ``document`` in the store.

        Accepts an assembled LeagueDocument or the raw JSON mapping of an
        export, including the abbreviated ``h/a/hs/as`` game fields and the
        legacy string-keyed penalties.
        """
        if isinstance(document, LeagueDocument):
            raw: Any = document.to_json_dict()
        else:
            raw = document

        if not isinstance(raw, Mapping) or not isinstance(raw.get("entities"), Mapping):
            raise InvalidDocumentError("Invalid document format: missing entities")

        self.persister.require_store()

        entities = raw["entities"]
        await self._import_managers(entities.get("managers") or {})
        await self._import_seasons(entities.get("seasons") or {})
        result = await self._import_matches(entities.get("matches") or [])
        await self._import_palmares(raw.get("palmares") or {})
        await self._import_pantheon(raw.get("pantheon") or [])
        await self._import_penalties(raw.get("penalties"))
        return result

    async def _import_managers(self, managers: Mapping[str, Any]) -> None:
        entries = [_validate(ManagerEntry, m, "manager") for m in managers.values()]
        await self.persister.save_managers((m.id, m.name) for m in entries)
        logger.info(f"Imported {len(entries)} managers")

    async def _import_seasons(self, seasons: Mapping[str, Any]) -> None:
        for value in seasons.values():
            season = _validate(SeasonEntry, value, "season")
            await self.persister.save_season(season.championship, season.season, season.standings)
        logger.info(f"Imported {len(seasons)} seasons")

    async def _import_matches(self, blocks: list[Any]) -> ImportResult:
        if not isinstance(blocks, list):
            raise InvalidDocumentError("Invalid document format: matches must be a list")

        result = ImportResult(total_blocks=len(blocks))
        logger.info(f"Importing {result.total_blocks} matchday blocks...")

        for raw_block in blocks:
            try:
                block = MatchdayBlock.model_validate(raw_block)
                await self.persister.replace_matchday(
                    block.championship,
                    block.season,
                    block.matchday,
                    block.games,
                    block.exempt,
                )
            except StoreNotConfiguredError:
                raise
            except Exception as e:
                result.error_count += 1
                label = _block_label(raw_block)
                result.errors.append(f"{label}: {e}")
                logger.error(f"Error importing {label}: {e}")
                continue

            result.imported_count += 1
            if result.imported_count % self.progress_interval == 0:
                logger.info(
                    f"Progress: {result.imported_count}/{result.total_blocks} blocks imported"
                )

        logger.info(
            f"Import finished: {result.imported_count}/{result.total_blocks} blocks, "
            f"{result.error_count} errors"
        )
        return result

    async def _import_palmares(self, palmares: Mapping[str, Any]) -> None:
        count = 0
        for championship, entries in palmares.items():
            for raw_entry in entries:
                entry = _validate(PalmaresEntry, raw_entry, "palmares")
                await self.persister.save_champion(
                    championship, entry.season, entry.champion, entry.runner_up or None
                )
                count += 1
        logger.info(f"Imported {count} champions")

    async def _import_pantheon(self, pantheon: list[Any]) -> None:
        for raw_item in pantheon:
            item = _validate(PantheonItem, raw_item, "pantheon")
            await self.persister.save_pantheon_entry(
                item.name, item.total_points, item.titles, item.runner_ups
            )
        logger.info(f"Imported {len(pantheon)} pantheon entries")

    async def _import_penalties(self, penalties: Any) -> None:
        try:
            parsed = coerce_penalties(penalties)
        except (ValueError, TypeError) as e:
            raise InvalidDocumentError(f"Invalid penalties: {e}") from e

        for key, points in parsed.items():
            await self.persister.save_penalty(key.championship, key.season, key.team_name, points)
        logger.info(f"Imported {len(parsed)} penalties")
