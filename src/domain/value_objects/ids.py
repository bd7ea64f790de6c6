from typing import NewType

MatchId = NewType("MatchId", str)
PenaltyId = NewType("PenaltyId", str)
