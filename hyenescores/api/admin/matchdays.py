from fastapi import APIRouter, Depends

from hyenescores.api.deps import get_store
from hyenescores.schemas.admin import (
    MatchdayReplaceRequest,
    OperationResponse,
    OperationStatus,
    SeasonExemptRequest,
)
from hyenescores.services import RecordPersister
from hyenescores.store import TableStore

router = APIRouter(tags=["admin-matches"])


@router.put(
    "/matchdays/{championship}/{season}/{matchday}",
    response_model=OperationResponse,
)
async def replace_matchday(
    championship: str,
    season: int,
    matchday: int,
    payload: MatchdayReplaceRequest,
    store: TableStore | None = Depends(get_store),
):
    """Replace all games of a matchday. Games without both teams are dropped."""
    rows = await RecordPersister(store).replace_matchday(
        championship, season, matchday, payload.games, payload.exempt_team
    )
    return OperationResponse(
        status=OperationStatus.SUCCESS,
        message=f"{len(rows)} matches saved for {championship} S{season} J{matchday}",
        details={"saved": len(rows)},
    )


@router.put("/seasons/{season}/exempt", response_model=OperationResponse)
async def update_season_exempt(
    season: int,
    payload: SeasonExemptRequest,
    store: TableStore | None = Depends(get_store),
):
    rows = await RecordPersister(store).update_season_exempt(
        season, payload.exempt_team, payload.championship
    )
    return OperationResponse(
        status=OperationStatus.SUCCESS,
        message=f"Exempt team updated on {len(rows)} matches of season {season}",
        details={"updated": len(rows)},
    )
