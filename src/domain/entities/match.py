from __future__ import annotations

import re
from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..value_objects.enums import Side
from ..value_objects.ids import MatchId
from ..value_objects.score import Score

_DAY_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


class Match(BaseModel):
    id: MatchId = Field(..., min_length=1, description="Unique identifier of the match")
    date: str = Field(..., description="Match day as ISO YYYY-MM-DD")
    time: str | None = Field(default=None, description="Throw-off time, free text")
    round: str | None = Field(default=None, description="Round label, numeric or free text")
    location: str = Field(default="", description="Venue")
    home: str = Field(..., description="Home team display name")
    away: str = Field(..., description="Away team display name")
    result: str | None = Field(default=None, description='Final result "A:B", home first')
    shootout: bool = Field(default=False, description="Decided by a penalty shootout")
    referees: tuple[str, ...] = Field(default=())
    delegate: str | None = Field(default=None, description="Delegate allowed to set the result")
    notes: str | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("date")
    @classmethod
    def _iso_date(cls, v: str) -> str:
        value = v.strip()
        if not _DAY_RE.fullmatch(value):
            raise ValueError("date must be formatted as YYYY-MM-DD")
        date.fromisoformat(value)
        return value

    @field_validator("shootout", mode="before")
    @classmethod
    def _null_shootout(cls, v: Any) -> Any:
        return False if v is None else v

    @property
    def is_finished(self) -> bool:
        return bool((self.result or "").strip())

    @property
    def score(self) -> Optional[Score]:
        """Parsed result, ``None`` when upcoming or malformed."""
        if not self.is_finished:
            return None
        return Score.parse(self.result)

    @property
    def day(self) -> date:
        return date.fromisoformat(self.date)

    def side_of(self, club: str) -> Side | None:
        """Return the side ``club`` plays on; names are compared as stored."""
        if self.home == club:
            return Side.HOME
        if self.away == club:
            return Side.AWAY
        return None
