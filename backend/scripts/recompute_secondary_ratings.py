#!/usr/bin/env python3
"""Recompute every stored secondary rating from the primary rating.

Run after changing the secondary rating ratio (e.g. 0.8 -> 0.9). Only
participants whose value changes are written.

Usage:
    uv run python scripts/recompute_secondary_ratings.py [--ratio 0.9] [--database path]
"""
import argparse
from pathlib import Path

from rift_teams.config import settings
from rift_teams.main import get_database_path
from rift_teams.repositories.participant_repository import DuckDBParticipantRepository
from rift_teams.services.rating_updater import recompute_secondary_ratings


def main():
    parser = argparse.ArgumentParser(description="Recompute secondary ratings")
    parser.add_argument("--ratio", type=float, default=settings.secondary_rating_ratio)
    parser.add_argument("--database", type=Path, default=None, help="DuckDB file (default: from settings)")
    args = parser.parse_args()

    db_path = args.database or get_database_path()
    repo = DuckDBParticipantRepository(db_path)
    try:
        changed = recompute_secondary_ratings(repo, args.ratio)
    finally:
        repo.close()

    for participant_id, old, new in changed:
        print(f"  {participant_id}: {old} -> {new}")
    print(f"\nUpdated {len(changed)} participants (ratio {args.ratio})")


if __name__ == "__main__":
    main()
