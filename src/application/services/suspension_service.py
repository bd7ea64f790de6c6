from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, time, timezone
from typing import Any, Mapping, Optional, Sequence

from src.domain.entities.match import Match
from src.domain.entities.penalty import Penalty
from src.domain.value_objects.enums import AnchorKind, Side
from src.domain.value_objects.ids import MatchId, PenaltyId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SuspendedPlayer:
    penalty_id: PenaltyId
    player_name: str

    def as_dict(self) -> dict[str, str]:
        return {"id": self.penalty_id, "name": self.player_name}


@dataclass
class MatchSuspensions:
    """Players sitting out one match, split by the side they belong to."""

    home: list[SuspendedPlayer] = field(default_factory=list)
    away: list[SuspendedPlayer] = field(default_factory=list)

    def add(self, side: Side, player: SuspendedPlayer) -> None:
        if side is Side.HOME:
            self.home.append(player)
        else:
            self.away.append(player)

    def as_dict(self) -> dict[str, Any]:
        return {
            "home": [p.as_dict() for p in self.home],
            "away": [p.as_dict() for p in self.away],
        }


@dataclass(frozen=True)
class SuspensionWindow:
    """Resolved placement of a single penalty in its club's schedule."""

    penalty_id: PenaltyId
    club: str
    anchor: AnchorKind
    start_index: int
    matches: tuple[Match, ...]

    @property
    def match_ids(self) -> list[MatchId]:
        return [m.id for m in self.matches]


def club_schedule(club: str, matches: Sequence[Match]) -> list[Match]:
    """All fixtures of ``club`` ordered by match day.

    Fixtures on the same day keep their input order.
    """
    own = [m for m in matches if m.home == club or m.away == club]
    return sorted(own, key=lambda m: m.date)


def _day_start_utc(match: Match) -> datetime:
    return datetime.combine(match.day, time.min, tzinfo=timezone.utc)


def _first_after(schedule: Sequence[Match], moment: datetime) -> Optional[int]:
    for idx, m in enumerate(schedule):
        if _day_start_utc(m) > moment:
            return idx
    return None


class SuspensionScheduler:
    """Project penalties onto the fixtures they rule a player out of.

    A penalty issued in match N of a club's schedule covers the next
    ``games`` fixtures of that club (N+1 ... N+games), counted in fixtures
    rather than calendar time. When the trigger match no longer exists the
    window starts at the club's first fixture dated after the penalty was
    created. A window running past the last known fixture is truncated.

    Malformed or unplaceable penalties never abort the computation; they
    contribute nothing and are logged.
    """

    def plan(self, penalty: Penalty, matches: Sequence[Match]) -> SuspensionWindow:
        schedule = club_schedule(penalty.club_name, matches)
        return self._plan_in(penalty, schedule)

    def build(
        self, penalties: Sequence[Penalty], matches: Sequence[Match]
    ) -> dict[MatchId, MatchSuspensions]:
        schedules: dict[str, list[Match]] = {}
        out: dict[MatchId, MatchSuspensions] = {}

        for p in penalties:
            schedule = schedules.get(p.club_name)
            if schedule is None:
                schedule = club_schedule(p.club_name, matches)
                schedules[p.club_name] = schedule

            window = self._plan_in(p, schedule)
            player = SuspendedPlayer(penalty_id=p.id, player_name=p.player_name)
            for m in window.matches:
                side = Side.HOME if m.home == p.club_name else Side.AWAY
                out.setdefault(m.id, MatchSuspensions()).add(side, player)

        logger.debug(
            "Suspensions scheduled",
            extra={"penalties": len(penalties), "matches_affected": len(out)},
        )
        return out

    def _plan_in(self, penalty: Penalty, schedule: Sequence[Match]) -> SuspensionWindow:
        trigger_idx = next(
            (i for i, m in enumerate(schedule) if m.id == penalty.match_id), None
        )
        if trigger_idx is not None:
            anchor = AnchorKind.TRIGGER_MATCH
            start = trigger_idx + 1
        else:
            first = _first_after(schedule, penalty.created_at)
            if first is None:
                logger.warning(
                    "Penalty %s: match %s not in schedule of %r and no fixture after %s",
                    penalty.id,
                    penalty.match_id,
                    penalty.club_name,
                    penalty.created_at.isoformat(),
                )
                return SuspensionWindow(
                    penalty_id=penalty.id,
                    club=penalty.club_name,
                    anchor=AnchorKind.UNRESOLVED,
                    start_index=len(schedule),
                    matches=(),
                )
            logger.info(
                "Penalty %s: match %s missing, anchoring on creation date",
                penalty.id,
                penalty.match_id,
            )
            anchor = AnchorKind.CREATED_AT
            start = first

        return SuspensionWindow(
            penalty_id=penalty.id,
            club=penalty.club_name,
            anchor=anchor,
            start_index=start,
            matches=tuple(schedule[start : start + penalty.games]),
        )


def build_suspension_map(
    penalties: Sequence[Penalty], matches: Sequence[Match]
) -> dict[MatchId, MatchSuspensions]:
    return SuspensionScheduler().build(penalties, matches)


def suspension_map_as_dict(
    suspensions: Mapping[MatchId, MatchSuspensions],
) -> dict[str, dict[str, Any]]:
    return {str(k): v.as_dict() for k, v in suspensions.items()}
