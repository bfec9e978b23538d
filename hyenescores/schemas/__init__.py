from hyenescores.schemas.document import (
    DOCUMENT_VERSION,
    GameEntry,
    LeagueDocument,
    LeagueEntities,
    ManagerEntry,
    MatchdayBlock,
    PalmaresEntry,
    PantheonItem,
    PenaltyItem,
    PenaltyKey,
    SeasonEntry,
    parse_legacy_penalty_key,
    season_key,
)

__all__ = [
    "DOCUMENT_VERSION",
    "GameEntry",
    "LeagueDocument",
    "LeagueEntities",
    "ManagerEntry",
    "MatchdayBlock",
    "PalmaresEntry",
    "PantheonItem",
    "PenaltyItem",
    "PenaltyKey",
    "SeasonEntry",
    "parse_legacy_penalty_key",
    "season_key",
]
