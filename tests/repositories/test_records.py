from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Optional

import pytest
from pydantic import ValidationError

from src.repositories.record_store import (
    MATCHES_ORDER,
    PENALTIES_ORDER,
    MatchesRepoRecordStore,
    PenaltiesRepoRecordStore,
    fetch_snapshot,
)
from src.repositories.records import (
    load_snapshot,
    match_from_row,
    penalty_from_row,
    save_snapshot,
    snapshot_from_payload,
)

MATCH_ROW = {
    "id": "m1",
    "date": "2024-05-01",
    "time": None,
    "round": "3",
    "location": "Szczecin",
    "home": "Arkonia",
    "away": "Polonia",
    "result": "10:9",
    "shootout": True,
    "referee1": "Nowak",
    "referee2": None,
    "delegate": "Kowalczyk",
    "notes": None,
    "created_by": "u1",
    "created_at": "2024-04-01T10:00:00+00:00",
}

PENALTY_ROW = {
    "id": "p1",
    "match_id": "m1",
    "club_name": "Arkonia",
    "player_name": "Jan Kowalski",
    "games": 2,
    "created_by": "u2",
    "created_at": "2024-05-01T21:15:00.123456+00:00",
}


def test_match_from_row_maps_store_columns() -> None:
    m = match_from_row(MATCH_ROW)
    assert m.id == "m1"
    assert m.time is None
    assert m.round == "3"
    assert m.referees == ("Nowak", "")
    assert m.shootout is True
    assert m.delegate == "Kowalczyk"


def test_match_from_row_accepts_exported_referees_list() -> None:
    row = dict(MATCH_ROW, referees=["A", "B"], result="", shootout=None)
    m = match_from_row(row)
    assert m.referees == ("A", "B")
    assert m.result is None
    assert m.shootout is False


def test_penalty_from_row() -> None:
    p = penalty_from_row(PENALTY_ROW)
    assert p.games == 2
    assert p.created_at.tzinfo is not None
    assert p.created_at.astimezone(timezone.utc).hour == 21


def test_penalty_from_row_rejects_zero_games() -> None:
    with pytest.raises(ValidationError):
        penalty_from_row(dict(PENALTY_ROW, games=0))


def test_snapshot_drops_invalid_rows_unless_strict(caplog: pytest.LogCaptureFixture) -> None:
    payload = {
        "matches": [MATCH_ROW, dict(MATCH_ROW, id="m2", date="tomorrow")],
        "penalties": [PENALTY_ROW, dict(PENALTY_ROW, id="p2", games=0)],
        "teams": ["Arkonia", "Polonia"],
    }
    caplog.set_level(logging.WARNING, logger="src.repositories.records")
    snap = snapshot_from_payload(payload)
    assert [m.id for m in snap.matches] == ["m1"]
    assert [p.id for p in snap.penalties] == ["p1"]
    assert snap.teams == ("Arkonia", "Polonia")
    dropped = [r for r in caplog.records if r.name == "src.repositories.records"]
    assert len(dropped) == 2
    assert "Dropping invalid match record" in dropped[0].getMessage()

    with pytest.raises(ValidationError):
        snapshot_from_payload(payload, strict=True)


def test_snapshot_accepts_bare_match_list() -> None:
    snap = snapshot_from_payload([MATCH_ROW])
    assert len(snap.matches) == 1
    assert snap.penalties == ()


def test_snapshot_rejects_wrong_shapes() -> None:
    with pytest.raises(ValueError):
        snapshot_from_payload("nope")
    with pytest.raises(ValueError):
        snapshot_from_payload({"matches": {"id": "m1"}})
    with pytest.raises(ValueError):
        snapshot_from_payload({"matches": [], "teams": "Arkonia"})


def test_save_and_load_snapshot(tmp_path: Path) -> None:
    snap = snapshot_from_payload(
        {"matches": [MATCH_ROW], "penalties": [PENALTY_ROW], "teams": ["Arkonia"]}
    )
    path = save_snapshot(snap, tmp_path / "out" / "snap.json")
    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["matches"][0]["referees"] == ["Nowak", ""]
    assert load_snapshot(path) == snap


class _FakeClient:
    def __init__(self, tables: Mapping[str, list[Mapping[str, Any]]]) -> None:
        self.tables = tables
        self.calls: list[tuple[str, Optional[str]]] = []

    def select(self, table: str, *, order: Optional[str] = None) -> list[Mapping[str, Any]]:
        self.calls.append((table, order))
        return list(self.tables.get(table, []))


def test_record_store_repos_and_snapshot() -> None:
    client = _FakeClient(
        {
            "matches": [MATCH_ROW, dict(MATCH_ROW, id="m2", date="2024-05-08")],
            "penalties": [PENALTY_ROW],
        }
    )
    matches = MatchesRepoRecordStore(client)
    penalties = PenaltiesRepoRecordStore(client)

    assert matches.get_by_id("m2") is not None
    assert matches.get_by_id("missing") is None
    assert [p.id for p in penalties.list_for_match("m1")] == ["p1"]
    assert penalties.list_for_match("m2") == []

    snap = fetch_snapshot(matches, penalties, ("Arkonia",))
    assert [m.id for m in snap.matches] == ["m1", "m2"]
    assert snap.penalties[0].created_at > datetime(2024, 5, 1, tzinfo=timezone.utc)
    assert snap.teams == ("Arkonia",)
    assert ("matches", MATCHES_ORDER) in client.calls
    assert ("penalties", PENALTIES_ORDER) in client.calls
