"""Participant and match storage."""

import logging
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Protocol

import duckdb

from rift_teams.exceptions import PersistenceError
from rift_teams.models.match import MatchEntry, MatchRecord, RatingField, RecordField
from rift_teams.models.participant import Participant
from rift_teams.models.team import Side
from rift_teams.utils.role_normalizer import Role, normalize_role_strict, sort_roles

logger = logging.getLogger(__name__)


class ParticipantRepository(Protocol):
    """Storage operations the team maker depends on."""

    def list_participants(self) -> list[Participant]: ...

    def get_participant(self, participant_id: str) -> Participant | None: ...

    def update_participant_rating(self, participant_id: str, field: RatingField, value: int) -> None: ...

    def increment_participant_record(self, participant_id: str, field: RecordField) -> None: ...

    def create_match_record(self, record: MatchRecord) -> str: ...

    def list_match_records(self, limit: int = 50) -> list[MatchRecord]: ...


SCHEMA = """
    CREATE TABLE IF NOT EXISTS participants (
        id VARCHAR PRIMARY KEY,
        name VARCHAR NOT NULL,
        primary_role VARCHAR NOT NULL,
        primary_rating INTEGER NOT NULL CHECK (primary_rating >= 0),
        secondary_rating INTEGER NOT NULL CHECK (secondary_rating >= 0),
        wins INTEGER NOT NULL DEFAULT 0,
        losses INTEGER NOT NULL DEFAULT 0,
        labels VARCHAR[],
        excluded_roles VARCHAR[]
    );

    CREATE TABLE IF NOT EXISTS matches (
        id VARCHAR PRIMARY KEY,
        played_at TIMESTAMP NOT NULL,  -- UTC
        winner VARCHAR NOT NULL
    );

    CREATE TABLE IF NOT EXISTS match_entries (
        match_id VARCHAR NOT NULL,
        slot INTEGER NOT NULL,
        participant_id VARCHAR NOT NULL,
        role VARCHAR NOT NULL,
        side VARCHAR NOT NULL
    );
"""

PARTICIPANT_COLUMNS = (
    "id, name, primary_role, primary_rating, secondary_rating, "
    "wins, losses, labels, excluded_roles"
)


def _row_to_participant(row: tuple) -> Participant:
    pid, name, primary_role, primary_rating, secondary_rating, wins, losses, labels, excluded = row
    return Participant(
        id=pid,
        name=name,
        primary_role=normalize_role_strict(primary_role),
        primary_rating=int(primary_rating),
        secondary_rating=int(secondary_rating),
        wins=int(wins),
        losses=int(losses),
        labels=tuple(labels or ()),
        excluded_roles=frozenset(normalize_role_strict(r) for r in excluded or ()),
    )


def _to_utc_naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class DuckDBParticipantRepository:
    """Data access layer - read/write DuckDB file holding the roster and match history."""

    def __init__(self, database_path: str | Path):
        """Open (or create) the database file and ensure the schema exists.

        Args:
            database_path: Path to the .duckdb file; ":memory:" for a throwaway store
        """
        self._db_path = str(database_path)
        if self._db_path != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)

        # One shared connection; every call works on its own cursor so
        # rating writes can come from worker threads
        self._conn = duckdb.connect(self._db_path)
        self._conn.execute(SCHEMA)
        self._lock = threading.Lock()

        count = self._conn.execute("SELECT COUNT(*) FROM participants").fetchone()[0]
        logger.info(f"ParticipantRepository: Using {self._db_path} ({count} participants)")

    def close(self) -> None:
        self._conn.close()

    def _cursor(self) -> duckdb.DuckDBPyConnection:
        with self._lock:
            return self._conn.cursor()

    # Roster

    def list_participants(self) -> list[Participant]:
        """Point-in-time snapshot of the roster, ordered by name."""
        try:
            with self._cursor() as cur:
                rows = cur.execute(
                    f"SELECT {PARTICIPANT_COLUMNS} FROM participants ORDER BY name, id"
                ).fetchall()
        except duckdb.Error as e:
            raise PersistenceError(f"Failed to list participants: {e}") from e
        return [_row_to_participant(row) for row in rows]

    def get_participant(self, participant_id: str) -> Participant | None:
        try:
            with self._cursor() as cur:
                row = cur.execute(
                    f"SELECT {PARTICIPANT_COLUMNS} FROM participants WHERE id = ?",
                    [participant_id],
                ).fetchone()
        except duckdb.Error as e:
            raise PersistenceError(f"Failed to read participant: {e}", participant_id) from e
        return _row_to_participant(row) if row else None

    def upsert_participants(self, participants: Iterable[Participant]) -> int:
        """Insert or replace roster rows. Returns the number written."""
        rows = [
            [
                p.id,
                p.name,
                p.primary_role.value,
                p.primary_rating,
                p.secondary_rating,
                p.wins,
                p.losses,
                list(p.labels),
                [r.value for r in sort_roles(p.excluded_roles)],
            ]
            for p in participants
        ]
        if not rows:
            return 0
        try:
            with self._cursor() as cur:
                cur.executemany(
                    f"INSERT OR REPLACE INTO participants ({PARTICIPANT_COLUMNS}) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?, ?::VARCHAR[], ?::VARCHAR[])",
                    rows,
                )
        except duckdb.Error as e:
            raise PersistenceError(f"Failed to write participants: {e}") from e
        return len(rows)

    def update_participant_rating(self, participant_id: str, field: RatingField, value: int) -> None:
        """Overwrite one rating column for one participant."""
        column = RatingField(field).value
        self._update_one(
            participant_id,
            f"UPDATE participants SET {column} = ? WHERE id = ? RETURNING id",
            [value, participant_id],
        )

    def increment_participant_record(self, participant_id: str, field: RecordField) -> None:
        """Add one to the participant's win or loss counter."""
        column = RecordField(field).value
        self._update_one(
            participant_id,
            f"UPDATE participants SET {column} = {column} + 1 WHERE id = ? RETURNING id",
            [participant_id],
        )

    def _update_one(self, participant_id: str, sql: str, params: list) -> None:
        try:
            with self._cursor() as cur:
                updated = cur.execute(sql, params).fetchall()
        except duckdb.Error as e:
            raise PersistenceError(f"Failed to update participant: {e}", participant_id) from e
        if not updated:
            raise PersistenceError(f"Participant not found: {participant_id}", participant_id)

    # Matches

    def create_match_record(self, record: MatchRecord) -> str:
        """Store a match and its entries in one transaction. Returns the new id."""
        match_id = record.id or uuid.uuid4().hex
        try:
            with self._cursor() as cur:
                cur.begin()
                try:
                    cur.execute(
                        "INSERT INTO matches (id, played_at, winner) VALUES (?, ?, ?)",
                        [match_id, _to_utc_naive(record.played_at), record.winner.value],
                    )
                    cur.executemany(
                        "INSERT INTO match_entries (match_id, slot, participant_id, role, side) "
                        "VALUES (?, ?, ?, ?, ?)",
                        [
                            [match_id, slot, e.participant_id, e.role.value, e.side.value]
                            for slot, e in enumerate(record.entries)
                        ],
                    )
                    cur.commit()
                except duckdb.Error:
                    cur.rollback()
                    raise
        except duckdb.Error as e:
            raise PersistenceError(f"Failed to create match record: {e}") from e
        return match_id

    def list_match_records(self, limit: int = 50) -> list[MatchRecord]:
        """Most recent matches first."""
        try:
            with self._cursor() as cur:
                matches = cur.execute(
                    "SELECT id, played_at, winner FROM matches ORDER BY played_at DESC, id LIMIT ?",
                    [limit],
                ).fetchall()
                if not matches:
                    return []
                ids = [m[0] for m in matches]
                entries = cur.execute(
                    "SELECT match_id, participant_id, role, side FROM match_entries "
                    "WHERE list_contains(?::VARCHAR[], match_id) ORDER BY match_id, slot",
                    [ids],
                ).fetchall()
        except duckdb.Error as e:
            raise PersistenceError(f"Failed to list match records: {e}") from e

        by_match: dict[str, list[MatchEntry]] = {}
        for match_id, participant_id, role, side in entries:
            by_match.setdefault(match_id, []).append(
                MatchEntry(participant_id=participant_id, role=Role(role), side=Side(side))
            )

        return [
            MatchRecord(
                id=match_id,
                played_at=played_at.replace(tzinfo=timezone.utc),
                entries=tuple(by_match.get(match_id, [])),
                winner=Side(winner),
            )
            for match_id, played_at, winner in matches
        ]
