from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.infrastructure.record_store_client import RecordStoreClient, RecordStoreError  # noqa: E402
from src.logging_config import get_logger  # noqa: E402
from src.repositories.record_store import (  # noqa: E402
    MatchesRepoRecordStore,
    PenaltiesRepoRecordStore,
    fetch_snapshot,
)
from src.repositories.records import save_snapshot  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(description="Dump matches and penalties to a JSON snapshot")
    parser.add_argument(
        "--out",
        default=str(ROOT / "data" / f"league-snapshot-{date.today().isoformat()}.json"),
        help="Output file (default: data/league-snapshot-<today>.json)",
    )
    parser.add_argument("--team", action="append", help="Seed team name to store (repeatable)")
    args = parser.parse_args()

    log = get_logger()
    client = RecordStoreClient()
    try:
        snapshot = fetch_snapshot(
            MatchesRepoRecordStore(client),
            PenaltiesRepoRecordStore(client),
            tuple(args.team or ()),
        )
    except RecordStoreError as exc:
        log.error("Export failed: %s", exc)
        return 1

    path = save_snapshot(snapshot, args.out)
    log.info(
        "Snapshot written",
        extra={"path": str(path), "matches": len(snapshot.matches), "penalties": len(snapshot.penalties)},
    )
    print(f"Wrote {len(snapshot.matches)} matches and {len(snapshot.penalties)} penalties to {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
