from __future__ import annotations

import re
from functools import cmp_to_key
from typing import Iterable, Optional, Sequence

from src.domain.entities.match import Match
from src.domain.value_objects.enums import FixtureSortKey, Side

_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

NO_RESULT = "-"
SHOOTOUT_MARK = "k"


def split_fixtures(matches: Iterable[Match]) -> tuple[list[Match], list[Match]]:
    """Split into ``(upcoming, finished)``, preserving input order."""
    upcoming: list[Match] = []
    finished: list[Match] = []
    for m in matches:
        (finished if m.is_finished else upcoming).append(m)
    return upcoming, finished


def _round_number(value: str | None) -> Optional[float]:
    text = (value or "").strip()
    if not text:
        # a missing round lists as round 0, ahead of numbered rounds
        return 0.0
    if not _NUMBER_RE.match(text):
        return None
    return float(text)


def _compare_dates(a: Match, b: Match) -> int:
    return (a.date > b.date) - (a.date < b.date)


def _compare_rounds(a: Match, b: Match) -> int:
    an = _round_number(a.round)
    bn = _round_number(b.round)
    if an is not None and bn is not None:
        return (an > bn) - (an < bn)
    if an is not None:
        return -1
    if bn is not None:
        return 1
    ar = a.round or ""
    br = b.round or ""
    return (ar > br) - (ar < br)


def sort_fixtures(
    matches: Iterable[Match],
    key: FixtureSortKey | str = FixtureSortKey.DATE,
    *,
    descending: bool = False,
) -> list[Match]:
    """Order fixtures for listing.

    - ``date``: by ISO match day.
    - ``round``: numeric rounds first in numeric order (a blank round counts
      as 0), then free-text rounds alphabetically.

    The sort is stable in both directions; equal keys keep input order.
    """
    cmp = _compare_dates if FixtureSortKey(key) is FixtureSortKey.DATE else _compare_rounds
    sign = -1 if descending else 1
    return sorted(matches, key=cmp_to_key(lambda a, b: sign * cmp(a, b)))


def search_fixtures(matches: Iterable[Match], query: str) -> list[Match]:
    """Case-insensitive substring search across the listing columns."""
    needle = (query or "").lower()
    out: list[Match] = []
    for m in matches:
        haystack = " ".join(
            [
                m.home,
                m.away,
                m.location,
                m.round or "",
                m.result or "",
                m.delegate or "",
                *m.referees,
            ]
        ).lower()
        if needle in haystack:
            out.append(m)
    return out


def render_result(match: Match) -> str:
    """Display form of a match result.

    Shootout wins are marked with ``k`` on the winner's side: ``k10:9`` for
    the home side, ``9:10k`` for the away side. Display only; points are
    computed from the plain score.
    """
    raw = (match.result or "").strip()
    if not raw:
        return NO_RESULT
    if not match.shootout:
        return raw
    score = match.score
    if score is None:
        return raw
    winner = score.winner
    if winner is Side.HOME:
        return f"{SHOOTOUT_MARK}{score}"
    if winner is Side.AWAY:
        return f"{score}{SHOOTOUT_MARK}"
    return raw


def fixture_line(match: Match) -> str:
    when = match.date if not match.time else f"{match.date} {match.time}"
    round_label = f"[{match.round}] " if match.round else ""
    return f"{when} | {round_label}{match.home} vs {match.away} -> {render_result(match)}"


def format_fixtures(matches: Sequence[Match]) -> list[str]:
    return [fixture_line(m) for m in matches]
