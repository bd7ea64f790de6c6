from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Mapping, Sequence

from pydantic import ValidationError

from src.application.services.fixtures_service import (
    format_fixtures,
    search_fixtures,
    sort_fixtures,
    split_fixtures,
)
from src.application.services.standings_service import (
    StandingRow,
    StandingsCalculator,
    log_standings_summary,
)
from src.application.services.suspension_service import (
    MatchSuspensions,
    SuspensionScheduler,
    suspension_map_as_dict,
)
from src.infrastructure.record_store_client import RecordStoreClient, RecordStoreError
from src.logging_config import get_logger
from src.repositories.record_store import (
    MatchesRepoRecordStore,
    PenaltiesRepoRecordStore,
    fetch_snapshot,
)
from src.repositories.records import LeagueSnapshot, load_snapshot

EXIT_LOAD_ERROR = 2


def _load(args: argparse.Namespace) -> LeagueSnapshot:
    teams = tuple(args.team or ())
    if args.snapshot:
        snap = load_snapshot(args.snapshot, strict=bool(args.strict))
        if teams:
            snap = snap.model_copy(update={"teams": teams})
        return snap
    client = RecordStoreClient()
    return fetch_snapshot(
        MatchesRepoRecordStore(client, strict=bool(args.strict)),
        PenaltiesRepoRecordStore(client, strict=bool(args.strict)),
        teams,
    )


def _format_table(rows: Sequence[StandingRow]) -> list[str]:
    if not rows:
        return ["No teams."]
    width = max(len(r.team) for r in rows)
    lines = [f"{'#':>3}  {'Team':<{width}}  {'Pts':>3}  {'M':>3}  Goals"]
    for pos, r in enumerate(rows, start=1):
        lines.append(
            f"{pos:>3}  {r.team:<{width}}  {r.points:>3}  {r.played:>3}  "
            f"{r.goals_for}:{r.goals_against}"
        )
    return lines


def _format_suspensions(
    suspensions: Mapping[str, MatchSuspensions], snapshot: LeagueSnapshot
) -> list[str]:
    if not suspensions:
        return ["No suspended players."]
    by_id = {m.id: m for m in snapshot.matches}
    lines: list[str] = []
    for m in sort_fixtures(by_id[mid] for mid in suspensions if mid in by_id):
        bucket = suspensions[m.id]
        lines.append(f"{m.date} | {m.home} vs {m.away} (id={m.id})")
        for label, club, players in (("home", m.home, bucket.home), ("away", m.away, bucket.away)):
            if players:
                names = ", ".join(p.player_name for p in players)
                lines.append(f"  - {label} {club}: {names}")
    return lines


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="League table, suspensions and fixture lists")
    p.add_argument("--snapshot", help="JSON snapshot file (default: read the record store)")
    p.add_argument(
        "--team",
        action="append",
        help="Known team name to seed the table with (repeatable)",
    )
    p.add_argument(
        "--strict",
        action="store_true",
        help="Fail on invalid records instead of dropping them",
    )
    p.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    sub = p.add_subparsers(dest="cmd", required=True)

    pt = sub.add_parser("table", help="Print the league table")
    pt.add_argument("--json", action="store_true", help="Output rows as JSON")

    ps = sub.add_parser("suspensions", help="Print suspended players per match")
    ps.add_argument("--json", action="store_true", help="Output the suspension map as JSON")

    pf = sub.add_parser("fixtures", help="List upcoming and finished fixtures")
    pf.add_argument("--sort", choices=["date", "round"], default="round", help="Sort key")
    pf.add_argument("--desc", action="store_true", help="Sort descending")
    pf.add_argument("--query", default="", help="Case-insensitive search filter")
    return p


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    log = get_logger(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        snapshot = _load(args)
    except (OSError, ValueError, ValidationError, RecordStoreError, RuntimeError) as exc:
        log.error("Could not load league data: %s", exc)
        print(f"Could not load league data: {exc}", file=sys.stderr)
        return EXIT_LOAD_ERROR

    if args.cmd == "table":
        report = StandingsCalculator().evaluate(snapshot.matches, snapshot.teams)
        log_standings_summary(report, log)
        if args.json:
            print(json.dumps([r.as_dict() for r in report.rows], ensure_ascii=False, indent=2))
        else:
            print("\n".join(_format_table(report.rows)))
        return 0

    if args.cmd == "suspensions":
        suspensions = SuspensionScheduler().build(snapshot.penalties, snapshot.matches)
        if args.json:
            print(json.dumps(suspension_map_as_dict(suspensions), ensure_ascii=False, indent=2))
        else:
            print("\n".join(_format_suspensions(suspensions, snapshot)))
        return 0

    if args.cmd == "fixtures":
        matches = search_fixtures(snapshot.matches, args.query)
        ordered = sort_fixtures(matches, args.sort, descending=bool(args.desc))
        upcoming, finished = split_fixtures(ordered)
        print("Upcoming:")
        print("\n".join(format_fixtures(upcoming)) if upcoming else "  none")
        print("Finished:")
        print("\n".join(format_fixtures(finished)) if finished else "  none")
        return 0

    return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
