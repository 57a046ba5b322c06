"""Roster loading from CSV exports."""

import re
from pathlib import Path

import pandas as pd

from rift_teams.models.participant import Participant
from rift_teams.utils.rank_rates import DEFAULT_RATING_CEILING, derive_secondary_rating, seed_ratings
from rift_teams.utils.role_normalizer import normalize_role_strict

REQUIRED_COLUMNS = {"name", "primary_role"}
LIST_SEPARATOR = ";"


def _blank(value) -> bool:
    return value is None or pd.isna(value) or str(value).strip() == ""


def _split(value) -> list[str]:
    if _blank(value):
        return []
    return [part.strip() for part in str(value).split(LIST_SEPARATOR) if part.strip()]


def _slug(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def _int_or_none(value) -> int | None:
    if _blank(value):
        return None
    return int(float(value))


def participant_from_row(
    row: dict,
    secondary_ratio: float = 0.8,
    rating_ceiling: int = DEFAULT_RATING_CEILING,
) -> Participant:
    """Build a Participant from one CSV row.

    Ratings come from the primary_rating/secondary_rating columns when set;
    otherwise from the rank column's seed table. A missing secondary rating
    next to a given primary rating is derived with secondary_ratio. Both
    ratings must lie in [0, rating_ceiling].

    Raises:
        ValueError: If the row has no usable name, role or rating source
    """
    name = "" if _blank(row.get("name")) else str(row["name"]).strip()
    if not name:
        raise ValueError("Row has no name")

    primary = _int_or_none(row.get("primary_rating"))
    secondary = _int_or_none(row.get("secondary_rating"))
    if primary is None:
        rank = row.get("rank")
        if _blank(rank):
            raise ValueError(f"{name}: needs primary_rating or rank")
        seeds = seed_ratings(rank)
        primary = seeds.primary
        if secondary is None:
            secondary = seeds.secondary
    if secondary is None:
        secondary = derive_secondary_rating(primary, secondary_ratio)
    for column, value in (("primary_rating", primary), ("secondary_rating", secondary)):
        if not 0 <= value <= rating_ceiling:
            raise ValueError(f"{name}: {column} {value} outside 0..{rating_ceiling}")

    row_id = row.get("id")
    return Participant(
        id=_slug(name) if _blank(row_id) else str(row_id).strip(),
        name=name,
        primary_role=normalize_role_strict(str(row.get("primary_role"))),
        primary_rating=primary,
        secondary_rating=secondary,
        wins=_int_or_none(row.get("wins")) or 0,
        losses=_int_or_none(row.get("losses")) or 0,
        labels=tuple(_split(row.get("labels"))),
        excluded_roles=frozenset(normalize_role_strict(r) for r in _split(row.get("excluded_roles"))),
    )


def load_roster_csv(
    path: Path,
    secondary_ratio: float = 0.8,
    rating_ceiling: int = DEFAULT_RATING_CEILING,
) -> list[Participant]:
    """Read a roster CSV into participants.

    Raises:
        ValueError: If required columns are missing or a row is invalid
    """
    df = pd.read_csv(path, dtype=str, keep_default_na=True)
    df.columns = [c.strip().lower() for c in df.columns]
    missing = REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise ValueError(f"{path}: missing columns {', '.join(sorted(missing))}")

    participants = [
        participant_from_row(row, secondary_ratio, rating_ceiling)
        for row in df.to_dict(orient="records")
    ]
    ids = [p.id for p in participants]
    duplicates = sorted({pid for pid in ids if ids.count(pid) > 1})
    if duplicates:
        raise ValueError(f"{path}: duplicate participant ids {', '.join(duplicates)}")
    return participants
