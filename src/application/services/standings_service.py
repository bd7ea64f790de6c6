from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Any, Iterable, Optional, Sequence, Union

from src.domain.entities.match import Match
from src.domain.value_objects.enums import Side, SkipReason
from src.domain.value_objects.ids import MatchId
from src.domain.value_objects.score import Score
from src.domain.value_objects.team_name import display_team_name, normalize_team_name

logger = logging.getLogger(__name__)

WIN_POINTS = 3
SHOOTOUT_WIN_POINTS = 2
SHOOTOUT_LOSS_POINTS = 1


@dataclass(frozen=True)
class StandingRow:
    team: str
    points: int
    played: int
    goals_for: int
    goals_against: int

    @property
    def goal_difference(self) -> int:
        return self.goals_for - self.goals_against

    def as_dict(self) -> dict[str, Any]:
        return {
            "team": self.team,
            "points": self.points,
            "played": self.played,
            "goals_for": self.goals_for,
            "goals_against": self.goals_against,
        }


@dataclass(frozen=True)
class Counted:
    match_id: MatchId
    home_points: int
    away_points: int


@dataclass(frozen=True)
class Skipped:
    match_id: MatchId
    reason: SkipReason


MatchOutcome = Union[Counted, Skipped]


@dataclass(frozen=True)
class StandingsReport:
    rows: list[StandingRow]
    outcomes: list[MatchOutcome]

    @property
    def counted(self) -> list[Counted]:
        return [o for o in self.outcomes if isinstance(o, Counted)]

    @property
    def skipped(self) -> list[Skipped]:
        return [o for o in self.outcomes if isinstance(o, Skipped)]


@dataclass
class _Tally:
    key: str
    team: str
    points: int = 0
    played: int = 0
    goals_for: int = 0
    goals_against: int = 0

    def add(self, scored: int, conceded: int, points: int) -> None:
        self.played += 1
        self.goals_for += scored
        self.goals_against += conceded
        self.points += points

    def freeze(self) -> StandingRow:
        return StandingRow(
            team=self.team,
            points=self.points,
            played=self.played,
            goals_for=self.goals_for,
            goals_against=self.goals_against,
        )


@dataclass
class _Table:
    rows: dict[str, _Tally] = field(default_factory=dict)

    def ensure(self, raw: str | None) -> Optional[_Tally]:
        key = normalize_team_name(raw)
        if not key:
            return None
        row = self.rows.get(key)
        if row is None:
            # First raw form seen wins as the label
            row = _Tally(key=key, team=display_team_name(raw))
            self.rows[key] = row
        return row


def award_points(score: Score, shootout: bool) -> tuple[int, int]:
    """Return ``(home_points, away_points)`` for a finished match.

    Regular play: 3 for the winner, 0/0 on a tie. Shootout: 2 for the side
    with the higher score and 1 for the other; an equal score counts as an
    away win.
    """
    if shootout:
        if score.home > score.away:
            return SHOOTOUT_WIN_POINTS, SHOOTOUT_LOSS_POINTS
        return SHOOTOUT_LOSS_POINTS, SHOOTOUT_WIN_POINTS
    winner = score.winner
    if winner is Side.HOME:
        return WIN_POINTS, 0
    if winner is Side.AWAY:
        return 0, WIN_POINTS
    return 0, 0


def _compare_names(x: _Tally, y: _Tally) -> int:
    a = (x.key.casefold(), x.key)
    b = (y.key.casefold(), y.key)
    return (a > b) - (a < b)


def _compare_rows(x: _Tally, y: _Tally) -> int:
    if x.played == 0 and y.played == 0:
        return _compare_names(x, y)
    for a, b in (
        (y.points, x.points),
        (y.goals_for - y.goals_against, x.goals_for - x.goals_against),
        (y.goals_for, x.goals_for),
    ):
        if a != b:
            return a - b
    return _compare_names(x, y)


class StandingsCalculator:
    """Build the league table from match results.

    - Teams are aggregated under :func:`normalize_team_name`, so cosmetic
      variants of a name share one row.
    - A seed list of team names keeps winless and unplayed teams in the table;
      without one the team set comes from the fixtures.
    - Rows are ranked by points, goal difference, goals scored and name. Two
      teams that have not played yet compare by name only.
    """

    def compute(
        self, matches: Sequence[Match], teams: Optional[Iterable[str]] = None
    ) -> list[StandingRow]:
        return self.evaluate(matches, teams).rows

    def evaluate(
        self, matches: Sequence[Match], teams: Optional[Iterable[str]] = None
    ) -> StandingsReport:
        table = _Table()
        seed = [t for t in (teams or []) if t is not None]
        if seed:
            for name in seed:
                table.ensure(name)
        else:
            for m in matches:
                table.ensure(m.home)
                table.ensure(m.away)

        outcomes: list[MatchOutcome] = []
        for m in matches:
            outcome = self._apply(table, m)
            if outcome is not None:
                outcomes.append(outcome)

        ordered = sorted(table.rows.values(), key=cmp_to_key(_compare_rows))
        report = StandingsReport(rows=[r.freeze() for r in ordered], outcomes=outcomes)
        logger.debug(
            "Standings computed",
            extra={"teams": len(report.rows), "counted": len(report.counted)},
        )
        return report

    def _apply(self, table: _Table, match: Match) -> Optional[MatchOutcome]:
        if not match.is_finished:
            return None
        home = table.ensure(match.home)
        away = table.ensure(match.away)
        if home is None or away is None:
            logger.debug("Skipping match %s: blank team name", match.id)
            return Skipped(match.id, SkipReason.BLANK_TEAM)
        score = match.score
        if score is None:
            logger.debug("Skipping match %s: unparsable result %r", match.id, match.result)
            return Skipped(match.id, SkipReason.UNPARSABLE_RESULT)
        if match.shootout and score.home == score.away:
            logger.warning(
                "Shootout match %s has an equal score %s; awarding it to the away side",
                match.id,
                score,
            )

        home_pts, away_pts = award_points(score, match.shootout)
        home.add(score.home, score.away, home_pts)
        away.add(score.away, score.home, away_pts)
        return Counted(match.id, home_pts, away_pts)


def compute_standings(
    matches: Sequence[Match], teams: Optional[Iterable[str]] = None
) -> list[StandingRow]:
    """Module-level shortcut for :meth:`StandingsCalculator.compute`."""
    return StandingsCalculator().compute(matches, teams)


def log_standings_summary(report: StandingsReport, log: logging.Logger = logger) -> None:
    reasons: dict[str, int] = {}
    for s in report.skipped:
        reasons[s.reason.value] = reasons.get(s.reason.value, 0) + 1
    log.info(
        "Standings summary",
        extra={
            "teams": len(report.rows),
            "counted": len(report.counted),
            "skipped": len(report.skipped),
            "skip_reasons": reasons,
        },
    )
