from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import Side

_GOALS_RE = re.compile(r"^[+-]?\d+$")


class Score(BaseModel):
    """Final score of a finished match, home first."""

    home: int = Field(..., description="Goals scored by the home side")
    away: int = Field(..., description="Goals scored by the away side")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def parse(cls, raw: str | None) -> Optional["Score"]:
        """Parse an ``"A:B"`` result string.

        Returns ``None`` unless the string holds exactly two integer parts.
        """
        if raw is None:
            return None
        parts = [p.strip() for p in raw.strip().split(":")]
        if len(parts) != 2 or not all(_GOALS_RE.match(p) for p in parts):
            return None
        return cls(home=int(parts[0]), away=int(parts[1]))

    @property
    def winner(self) -> Side | None:
        if self.home > self.away:
            return Side.HOME
        if self.away > self.home:
            return Side.AWAY
        return None

    def __str__(self) -> str:
        return f"{self.home}:{self.away}"
