from fastapi import APIRouter, Depends

from hyenescores.api.deps import get_store
from hyenescores.schemas.admin import (
    ChampionSaveRequest,
    OperationResponse,
    OperationStatus,
    PantheonSaveRequest,
    PenaltySaveRequest,
    SeasonSaveRequest,
)
from hyenescores.services import RecordPersister
from hyenescores.store import TableStore

router = APIRouter(tags=["admin-records"])


@router.put("/seasons/{championship}/{season_number}", response_model=OperationResponse)
async def save_season(
    championship: str,
    season_number: int,
    payload: SeasonSaveRequest,
    store: TableStore | None = Depends(get_store),
):
    await RecordPersister(store).save_season(championship, season_number, payload.standings)
    return OperationResponse(
        status=OperationStatus.SUCCESS,
        message=f"Season {championship} S{season_number} saved",
    )


@router.put("/champions/{championship}/{season}", response_model=OperationResponse)
async def save_champion(
    championship: str,
    season: int,
    payload: ChampionSaveRequest,
    store: TableStore | None = Depends(get_store),
):
    await RecordPersister(store).save_champion(
        championship, season, payload.champion_name, payload.runner_up_name
    )
    return OperationResponse(
        status=OperationStatus.SUCCESS,
        message=f"Champion {championship} S{season} saved",
    )


@router.put("/pantheon/{manager_name}", response_model=OperationResponse)
async def save_pantheon_entry(
    manager_name: str,
    payload: PantheonSaveRequest,
    store: TableStore | None = Depends(get_store),
):
    await RecordPersister(store).save_pantheon_entry(
        manager_name, payload.total_points, payload.titles, payload.runner_ups
    )
    return OperationResponse(
        status=OperationStatus.SUCCESS,
        message=f"Pantheon entry {manager_name} saved",
    )


@router.put(
    "/penalties/{championship}/{season}/{team_name}",
    response_model=OperationResponse,
)
async def save_penalty(
    championship: str,
    season: int,
    team_name: str,
    payload: PenaltySaveRequest,
    store: TableStore | None = Depends(get_store),
):
    await RecordPersister(store).save_penalty(championship, season, team_name, payload.points)
    return OperationResponse(
        status=OperationStatus.SUCCESS,
        message=f"Penalty for {team_name} ({championship} S{season}) saved",
    )


@router.delete(
    "/penalties/{championship}/{season}/{team_name}",
    response_model=OperationResponse,
)
async def delete_penalty(
    championship: str,
    season: int,
    team_name: str,
    store: TableStore | None = Depends(get_store),
):
    await RecordPersister(store).delete_penalty(championship, season, team_name)
    return OperationResponse(
        status=OperationStatus.SUCCESS,
        message=f"Penalty for {team_name} ({championship} S{season}) deleted",
    )
