from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from hyenescores.schemas.document import GameEntry


class OperationStatus(str, Enum):
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


class OperationResponse(BaseModel):
    status: OperationStatus
    message: str
    details: dict | None = None


class ManagerSaveRequest(BaseModel):
    name: str = Field(min_length=1)


class ManagerRenameRequest(BaseModel):
    old_name: str = Field(min_length=1)
    new_name: str = Field(min_length=1)


class MatchdayReplaceRequest(BaseModel):
    games: list[GameEntry] = Field(default_factory=list)
    exempt_team: str | None = None


class SeasonSaveRequest(BaseModel):
    standings: Any = Field(default_factory=list)


class SeasonExemptRequest(BaseModel):
    exempt_team: str | None = None
    championship: str | None = None


class ChampionSaveRequest(BaseModel):
    champion_name: str = Field(min_length=1)
    runner_up_name: str | None = None


class PantheonSaveRequest(BaseModel):
    total_points: int = 0
    titles: int = 0
    runner_ups: int = 0


class PenaltySaveRequest(BaseModel):
    points: int
