#!/usr/bin/env python3
"""Ensure the scoring schema exists, optionally creating a tournament."""

import argparse
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from golf_scoring.db import ensure_schema, upsert_tournament
from golf_scoring.models import STROKE_PLAY
from golf_scoring.settings import load_settings


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the golf scoring tables.")
    parser.add_argument("--tournament", help="Name of a tournament to create.")
    parser.add_argument("--format", default=STROKE_PLAY, help="Scoring format, e.g. Stableford or Scramble.")
    parser.add_argument("--slope", type=int, help="Slope rating of the tees in play.")
    parser.add_argument("--rating", type=float, help="Course rating of the tees in play.")
    args = parser.parse_args()

    settings = load_settings()
    ensure_schema(settings.database_url)
    print(f"Schema ensured on {settings.database_url}")

    if args.tournament:
        tournament_id = upsert_tournament(
            settings.database_url,
            None,
            args.tournament,
            args.format,
            slope_rating=args.slope,
            course_rating=args.rating,
        )
        print(f"Created tournament '{args.tournament}' with id {tournament_id}.")


if __name__ == "__main__":
    main()
