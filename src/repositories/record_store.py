from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol

from src.domain.entities import Match, Penalty
from src.domain.repositories.matches_repo import MatchesRepo
from src.domain.repositories.penalties_repo import PenaltiesRepo

from .records import LeagueSnapshot, map_rows, match_from_row, penalty_from_row

MATCHES_TABLE = "matches"
PENALTIES_TABLE = "penalties"
MATCHES_ORDER = "date.desc,time.desc.nullslast"
PENALTIES_ORDER = "created_at.desc"


class _SelectClient(Protocol):
    def select(self, table: str, *, order: Optional[str] = None) -> list[Mapping[str, Any]]: ...


class MatchesRepoRecordStore(MatchesRepo):
    """Record-store implementation of :class:`MatchesRepo`.

    Example:
        >>> repo = MatchesRepoRecordStore(RecordStoreClient())
        >>> repo.list_all()[0].id
        'b7d1...'
    """

    def __init__(self, client: _SelectClient, *, strict: bool = False) -> None:
        self._client = client
        self._strict = strict

    def list_all(self) -> list[Match]:
        rows = self._client.select(MATCHES_TABLE, order=MATCHES_ORDER)
        return map_rows(rows, match_from_row, kind="match", strict=self._strict)

    def get_by_id(self, match_id: str) -> Optional[Match]:
        return next((m for m in self.list_all() if m.id == match_id), None)


class PenaltiesRepoRecordStore(PenaltiesRepo):
    """Record-store implementation of :class:`PenaltiesRepo`."""

    def __init__(self, client: _SelectClient, *, strict: bool = False) -> None:
        self._client = client
        self._strict = strict

    def list_all(self) -> list[Penalty]:
        rows = self._client.select(PENALTIES_TABLE, order=PENALTIES_ORDER)
        return map_rows(rows, penalty_from_row, kind="penalty", strict=self._strict)

    def list_for_match(self, match_id: str) -> list[Penalty]:
        return [p for p in self.list_all() if p.match_id == match_id]


def fetch_snapshot(
    matches: MatchesRepo, penalties: PenaltiesRepo, teams: tuple[str, ...] = ()
) -> LeagueSnapshot:
    return LeagueSnapshot(
        matches=tuple(matches.list_all()),
        penalties=tuple(penalties.list_all()),
        teams=teams,
    )
