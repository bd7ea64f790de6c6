from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.domain.entities import Match, Penalty

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LeagueSnapshot(BaseModel):
    """Everything the standings and suspension engines read, taken at once."""

    matches: tuple[Match, ...] = Field(default=())
    penalties: tuple[Penalty, ...] = Field(default=())
    teams: tuple[str, ...] = Field(default=(), description="Optional seed list of team names")

    model_config = ConfigDict(frozen=True)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _optional_text(value: Any) -> str | None:
    text = _text(value).strip()
    return text or None


def _referees(row: Mapping[str, Any]) -> tuple[str, ...]:
    listed = row.get("referees")
    if isinstance(listed, (list, tuple)):
        return tuple(_text(r) for r in listed)
    return (_text(row.get("referee1")), _text(row.get("referee2")))


def match_from_row(row: Mapping[str, Any]) -> Match:
    """Map a ``matches`` row (or an exported match object) to a :class:`Match`.

    Store rows carry ``referee1``/``referee2`` columns; exports carry a
    ``referees`` list. Null text columns become empty.
    """
    return Match(
        id=_text(row.get("id")),
        date=_text(row.get("date")),
        time=_optional_text(row.get("time")),
        round=_optional_text(row.get("round")),
        location=_text(row.get("location")),
        home=_text(row.get("home")),
        away=_text(row.get("away")),
        result=_optional_text(row.get("result")),
        shootout=bool(row.get("shootout")),
        referees=_referees(row),
        delegate=_optional_text(row.get("delegate")),
        notes=_optional_text(row.get("notes")),
    )


def penalty_from_row(row: Mapping[str, Any]) -> Penalty:
    return Penalty(
        id=_text(row.get("id")),
        match_id=_text(row.get("match_id")),
        club_name=_text(row.get("club_name")),
        player_name=_text(row.get("player_name")),
        games=row.get("games"),
        created_at=row.get("created_at"),
        created_by=_optional_text(row.get("created_by")),
    )


def map_rows(
    rows: Iterable[Mapping[str, Any]],
    mapper: Callable[[Mapping[str, Any]], T],
    *,
    kind: str,
    strict: bool = False,
) -> list[T]:
    """Map rows with ``mapper``; invalid rows are logged and dropped unless ``strict``."""
    out: list[T] = []
    for row in rows:
        try:
            out.append(mapper(row))
        except ValidationError as exc:
            if strict:
                raise
            logger.warning(
                "Dropping invalid %s record %r: %s",
                kind,
                row.get("id"),
                exc.errors(include_url=False),
            )
    return out


def snapshot_from_payload(payload: Any, *, strict: bool = False) -> LeagueSnapshot:
    """Build a snapshot from decoded JSON.

    Accepts ``{"matches": [...], "penalties": [...], "teams": [...]}`` or a
    bare list of matches as written by the portal's JSON export.
    """
    if isinstance(payload, list):
        payload = {"matches": payload}
    if not isinstance(payload, Mapping):
        raise ValueError("Snapshot must be a JSON object or a list of matches")

    def _rows(key: str) -> Sequence[Mapping[str, Any]]:
        value = payload.get(key) or []
        if not isinstance(value, list):
            raise ValueError(f"Snapshot field {key!r} must be a list")
        return [r for r in value if isinstance(r, Mapping)]

    teams = payload.get("teams") or []
    if not isinstance(teams, list):
        raise ValueError("Snapshot field 'teams' must be a list")
    return LeagueSnapshot(
        matches=tuple(map_rows(_rows("matches"), match_from_row, kind="match", strict=strict)),
        penalties=tuple(
            map_rows(_rows("penalties"), penalty_from_row, kind="penalty", strict=strict)
        ),
        teams=tuple(str(t) for t in teams if t is not None),
    )


def load_snapshot(path: Path | str, *, strict: bool = False) -> LeagueSnapshot:
    with Path(path).open("r", encoding="utf-8") as f:
        payload = json.load(f)
    return snapshot_from_payload(payload, strict=strict)


def snapshot_to_payload(snapshot: LeagueSnapshot) -> dict[str, Any]:
    """JSON-ready form of a snapshot, readable back by :func:`snapshot_from_payload`."""
    return snapshot.model_dump(mode="json")


def save_snapshot(snapshot: LeagueSnapshot, path: Path | str) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as f:
        json.dump(snapshot_to_payload(snapshot), f, ensure_ascii=False, indent=2)
    return target
