from .match import Match
from .penalty import Penalty

__all__ = [
    "Match",
    "Penalty",
]
