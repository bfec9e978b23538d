"""
Nested league document.

This is the denormalized shape the client and the standings logic consume:
keyed managers/seasons, matchday blocks with their games, palmares per
championship, the pantheon ranking and the points penalties.

Penalties use a structured ``PenaltyKey`` everywhere in memory and are
serialized as a list of objects. The legacy ``"{championship}_{season}_{team}"``
string keys are only understood when reading an older export.
"""
from collections.abc import Mapping
from typing import Any, NamedTuple

from pydantic import BaseModel, Field, field_serializer, field_validator, model_validator
from pydantic.alias_generators import to_camel

DOCUMENT_VERSION = "2.0"

# Abbreviated game fields found in older exports.
LEGACY_GAME_FIELDS = {
    "h": "homeTeam",
    "a": "awayTeam",
    "hs": "homeScore",
    "as": "awayScore",
}


class PenaltyKey(NamedTuple):
    championship: str
    season: int
    team_name: str


def season_key(championship: str, season_number: int) -> str:
    return f"{championship}_s{season_number}"


def parse_legacy_penalty_key(key: str) -> PenaltyKey:
    """
    Split ``"{championship}_{season}_{team}"`` at the first and second underscore.

    Everything after the second underscore is the team name, so team names may
    contain underscores; a championship containing one is misparsed.
    """
    first = key.find("_")
    second = key.find("_", first + 1) if first >= 0 else -1
    if first <= 0 or second < 0:
        raise ValueError(f"Malformed penalty key: {key!r}")
    season = key[first + 1:second]
    team_name = key[second + 1:]
    if not team_name:
        raise ValueError(f"Malformed penalty key: {key!r}")
    return PenaltyKey(key[:first], int(season), team_name)


def coerce_penalties(value: Any) -> dict[PenaltyKey, int]:
    """Accept structured, tuple-keyed or legacy string-keyed penalties."""
    if value is None:
        return {}

    penalties: dict[PenaltyKey, int] = {}
    if isinstance(value, Mapping):
        for key, points in value.items():
            if isinstance(key, str):
                penalty_key = parse_legacy_penalty_key(key)
            else:
                championship, season, team_name = key
                penalty_key = PenaltyKey(championship, int(season), team_name)
            penalties[penalty_key] = int(points)
        return penalties

    if isinstance(value, list):
        for item in value:
            entry = item if isinstance(item, PenaltyItem) else PenaltyItem.model_validate(item)
            penalties[entry.key] = entry.points
        return penalties

    raise ValueError("penalties must be a mapping or a list")


class DocumentModel(BaseModel):
    model_config = {"populate_by_name": True, "alias_generator": to_camel}


class ManagerEntry(DocumentModel):
    id: str
    name: str


class SeasonEntry(DocumentModel):
    championship: str
    season: int
    standings: Any = Field(default_factory=list)

    @field_validator("standings", mode="before")
    @classmethod
    def _default_standings(cls, value: Any) -> Any:
        return [] if value is None else value


class GameEntry(DocumentModel):
    id: int | str | None = None
    home_team: str | None = None
    away_team: str | None = None
    home_score: int | None = None
    away_score: int | None = None

    @model_validator(mode="before")
    @classmethod
    def _expand_legacy_fields(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        if not any(short in data for short in LEGACY_GAME_FIELDS):
            return data

        expanded = {k: v for k, v in data.items() if k not in LEGACY_GAME_FIELDS}
        for short, full in LEGACY_GAME_FIELDS.items():
            if short not in data:
                continue
            current = expanded.get(full)
            if full.endswith("Team"):
                # team names fall back when missing or empty
                if not current:
                    expanded[full] = data[short]
            elif current is None:
                expanded[full] = data[short]
        return expanded

    @property
    def is_complete(self) -> bool:
        return bool(self.home_team and self.away_team)


class MatchdayBlock(DocumentModel):
    championship: str
    season: int
    matchday: int
    exempt: str = ""
    games: list[GameEntry]

    @field_validator("exempt", mode="before")
    @classmethod
    def _empty_exempt(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def coordinates(self) -> tuple[str, int, int]:
        return (self.championship, self.season, self.matchday)


class PalmaresEntry(DocumentModel):
    season: int
    champion: str
    runner_up: str = ""

    @field_validator("runner_up", mode="before")
    @classmethod
    def _empty_runner_up(cls, value: Any) -> Any:
        return "" if value is None else value


class PantheonItem(DocumentModel):
    name: str
    total_points: int = 0
    titles: int = 0
    runner_ups: int = 0


class PenaltyItem(DocumentModel):
    championship: str
    season: int
    team_name: str
    points: int

    @property
    def key(self) -> PenaltyKey:
        return PenaltyKey(self.championship, self.season, self.team_name)


class LeagueEntities(DocumentModel):
    managers: dict[str, ManagerEntry] = Field(default_factory=dict)
    seasons: dict[str, SeasonEntry] = Field(default_factory=dict)
    matches: list[MatchdayBlock] = Field(default_factory=list)


class LeagueDocument(DocumentModel):
    version: str = DOCUMENT_VERSION
    entities: LeagueEntities = Field(default_factory=LeagueEntities)
    palmares: dict[str, list[PalmaresEntry]] = Field(default_factory=dict)
    pantheon: list[PantheonItem] = Field(default_factory=list)
    penalties: dict[PenaltyKey, int] = Field(default_factory=dict)

    @field_validator("penalties", mode="before")
    @classmethod
    def _coerce_penalties(cls, value: Any) -> dict[PenaltyKey, int]:
        return coerce_penalties(value)

    @field_serializer("penalties")
    def _serialize_penalties(self, penalties: dict[PenaltyKey, int]) -> list[dict[str, Any]]:
        return [
            {
                "championship": key.championship,
                "season": key.season,
                "teamName": key.team_name,
                "points": points,
            }
            for key, points in penalties.items()
        ]

    @classmethod
    def empty(cls) -> "LeagueDocument":
        return cls()

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
