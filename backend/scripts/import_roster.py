#!/usr/bin/env python3
"""Load a roster CSV into the DuckDB database.

Existing participants with the same id are replaced. Ratings may be given
directly (primary_rating, secondary_rating) or seeded from a rank column.

Usage:
    uv run python scripts/import_roster.py roster.csv [--database data/rift_teams.duckdb]

CSV columns: name, primary_role, and optionally id, primary_rating,
secondary_rating, rank, wins, losses, labels, excluded_roles
(labels and excluded_roles are ';'-separated).
"""
import argparse
import sys
from pathlib import Path

from rift_teams.config import settings
from rift_teams.main import get_database_path
from rift_teams.repositories.participant_repository import DuckDBParticipantRepository
from rift_teams.utils.roster_import import load_roster_csv


def main():
    parser = argparse.ArgumentParser(description="Import a roster CSV")
    parser.add_argument("csv_path", type=Path, help="Roster CSV file")
    parser.add_argument("--database", type=Path, default=None, help="DuckDB file (default: from settings)")
    parser.add_argument(
        "--secondary-ratio",
        type=float,
        default=settings.secondary_rating_ratio,
        help="Ratio used when a row has a primary rating but no secondary rating",
    )
    args = parser.parse_args()

    if not args.csv_path.exists():
        print(f"Error: CSV not found: {args.csv_path}")
        sys.exit(1)

    try:
        participants = load_roster_csv(args.csv_path, args.secondary_ratio, settings.rating_ceiling)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    db_path = args.database or get_database_path()
    repo = DuckDBParticipantRepository(db_path)
    try:
        written = repo.upsert_participants(participants)
    finally:
        repo.close()

    for p in participants:
        print(f"  ✓ {p.name} ({p.primary_role.value}) {p.primary_rating}/{p.secondary_rating}")
    print(f"\nImported {written} participants into {db_path}")


if __name__ == "__main__":
    main()
