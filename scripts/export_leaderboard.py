import argparse
import json
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from golf_scoring.db import load_snapshot
from golf_scoring.leaderboard import build_leaderboard
from golf_scoring.main import LeaderboardPayload
from golf_scoring.models import TournamentSnapshot
from golf_scoring.settings import load_settings


def snapshot_from_file(path: Path) -> TournamentSnapshot:
    raw = json.loads(path.read_text(encoding="utf-8"))
    return LeaderboardPayload.model_validate(raw).to_snapshot()


def export_leaderboard(snapshot: TournamentSnapshot) -> dict:
    entries = build_leaderboard(snapshot)
    return {
        "tournament_id": snapshot.tournament_id,
        "name": snapshot.name,
        "format": snapshot.format,
        "entries": [entry.to_dict() for entry in entries],
    }


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Compute a tournament leaderboard.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--input",
        "-i",
        type=Path,
        help="JSON snapshot with holes, entrants and scores.",
    )
    source.add_argument(
        "--tournament-id",
        "-t",
        type=int,
        help="Load the tournament from the database instead.",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Path to write the JSON leaderboard (defaults to stdout).",
    )
    args = parser.parse_args(argv)

    if args.input:
        snapshot = snapshot_from_file(args.input)
    else:
        snapshot = load_snapshot(load_settings().database_url, args.tournament_id)
        if snapshot is None:
            raise SystemExit(f"Tournament {args.tournament_id} not found.")

    payload = json.dumps(export_leaderboard(snapshot), default=str, indent=2)
    if args.output:
        args.output.write_text(payload, encoding="utf-8")
        print(f"Leaderboard saved to {args.output}")
    else:
        print(payload)


if __name__ == "__main__":
    main()
