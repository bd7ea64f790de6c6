from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..value_objects.ids import MatchId, PenaltyId


class Penalty(BaseModel):
    """A suspension issued during ``match_id`` for ``games`` following fixtures."""

    id: PenaltyId = Field(..., min_length=1)
    match_id: MatchId = Field(..., min_length=1, description="Match in which it was issued")
    club_name: str = Field(..., description="Club of the suspended player, as stored")
    player_name: str = Field(..., description="Free-text player name")
    games: int = Field(..., ge=1, description="Number of club fixtures to sit out")
    created_at: datetime = Field(..., description="Creation timestamp")
    created_by: str | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("created_at")
    @classmethod
    def _as_utc(cls, v: datetime) -> datetime:
        # Naive timestamps from the record store are UTC.
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)
