"""
Flat store rows -> nested league document.

``assemble`` is a pure single pass over the six row sets. ``fetch_document``
reads the six collections concurrently and never fails as a whole: a failed
read is logged and its collection is left empty, and a missing store yields
the empty document.
"""
import asyncio
import copy
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from hyenescores.schemas.document import (
    GameEntry,
    LeagueDocument,
    LeagueEntities,
    ManagerEntry,
    MatchdayBlock,
    PalmaresEntry,
    PantheonItem,
    PenaltyKey,
    SeasonEntry,
    season_key,
)
from hyenescores.services.paged_reader import PagedReader
from hyenescores.store.base import Row, TableStore

logger = logging.getLogger(__name__)

# Matches are grouped in first-seen order, so the read order decides block order.
# ``id`` breaks ties within a matchday and keeps page boundaries stable.
MATCHES_ORDER = ("matchday", "id")


@dataclass(frozen=True)
class CollectionRows:
    managers: Sequence[Row] = field(default_factory=tuple)
    seasons: Sequence[Row] = field(default_factory=tuple)
    matches: Sequence[Row] = field(default_factory=tuple)
    champions: Sequence[Row] = field(default_factory=tuple)
    pantheon: Sequence[Row] = field(default_factory=tuple)
    penalties: Sequence[Row] = field(default_factory=tuple)


def _group_matches(rows: Sequence[Row]) -> list[MatchdayBlock]:
    groups: dict[tuple[str, int, int], MatchdayBlock] = {}
    for row in rows:
        key = (row["championship"], row["season"], row["matchday"])
        block = groups.get(key)
        if block is None:
            block = MatchdayBlock(
                championship=row["championship"],
                season=row["season"],
                matchday=row["matchday"],
                exempt=row.get("exempt_team") or "",
                games=[],
            )
            groups[key] = block
        block.games.append(
            GameEntry(
                id=row.get("id"),
                home_team=row["home_team"],
                away_team=row["away_team"],
                home_score=row.get("home_score"),
                away_score=row.get("away_score"),
            )
        )
    return list(groups.values())


def assemble(rows: CollectionRows) -> LeagueDocument:
    """Build the nested document. Inputs are left untouched."""
    managers = {
        m["id"]: ManagerEntry(id=m["id"], name=m["name"])
        for m in rows.managers
    }

    seasons = {}
    for s in rows.seasons:
        seasons[season_key(s["championship"], s["season_number"])] = SeasonEntry(
            championship=s["championship"],
            season=s["season_number"],
            standings=copy.deepcopy(s.get("standings")) or [],
        )

    palmares: dict[str, list[PalmaresEntry]] = {}
    for c in rows.champions:
        palmares.setdefault(c["championship"], []).append(
            PalmaresEntry(
                season=c["season"],
                champion=c["champion_name"],
                runner_up=c.get("runner_up_name") or "",
            )
        )

    pantheon = [
        PantheonItem(
            name=p["manager_name"],
            total_points=p.get("total_points") or 0,
            titles=p.get("titles") or 0,
            runner_ups=p.get("runner_ups") or 0,
        )
        for p in rows.pantheon
    ]

    penalties = {
        PenaltyKey(p["championship"], p["season"], p["team_name"]): p["points"]
        for p in rows.penalties
    }

    return LeagueDocument(
        entities=LeagueEntities(
            managers=managers,
            seasons=seasons,
            matches=_group_matches(rows.matches),
        ),
        palmares=palmares,
        pantheon=pantheon,
        penalties=penalties,
    )


class DocumentAssembler:
    """Reads every collection from the store and assembles the document."""

    def __init__(self, store: TableStore | None, page_size: int | None = None):
        self.store = store
        self.page_size = page_size

    async def _read(self, table: str, **kwargs) -> list[Row]:
        try:
            return await self.store.select(table, **kwargs)
        except Exception as e:
            logger.warning(f"Error reading {table}: {e}")
            return []

    async def _read_matches(self) -> list[Row]:
        reader = PagedReader(self.store, self.page_size)
        rows = await reader.fetch_all("matches", MATCHES_ORDER)
        logger.info(f"Raw matches received: {len(rows)} ({reader.pages_fetched} pages)")
        return rows

    async def fetch_rows(self) -> CollectionRows:
        managers, seasons, matches, champions, pantheon, penalties = await asyncio.gather(
            self._read("managers"),
            self._read("seasons"),
            self._read_matches(),
            self._read("champions", order_by="season"),
            self._read("pantheon", order_by="total_points", descending=True),
            self._read("penalties"),
        )
        return CollectionRows(
            managers=managers,
            seasons=seasons,
            matches=matches,
            champions=champions,
            pantheon=pantheon,
            penalties=penalties,
        )

    async def fetch_document(self) -> LeagueDocument:
        if self.store is None:
            logger.info("Store not configured, serving empty document")
            return LeagueDocument.empty()

        try:
            rows = await self.fetch_rows()
            return assemble(rows)
        except Exception as e:
            logger.error(f"Error loading league data: {e}", exc_info=True)
            return LeagueDocument.empty()
