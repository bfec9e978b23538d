from hyenescores.models.manager import Manager
from hyenescores.models.season import Season
from hyenescores.models.match import Match
from hyenescores.models.champion import Champion
from hyenescores.models.pantheon import PantheonEntry
from hyenescores.models.penalty import Penalty

__all__ = [
    "Manager",
    "Season",
    "Match",
    "Champion",
    "PantheonEntry",
    "Penalty",
]
