"""Match record and rating update result models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from rift_teams.models.team import Side, TeamPair
from rift_teams.utils.role_normalizer import Role


class RatingField(str, Enum):
    """Stored rating columns a match result can move."""

    PRIMARY = "primary_rating"
    SECONDARY = "secondary_rating"


class RecordField(str, Enum):
    """Stored win/loss counters."""

    WINS = "wins"
    LOSSES = "losses"


@dataclass(frozen=True)
class MatchEntry:
    """One participant's role and side in a finished match."""

    participant_id: str
    role: Role
    side: Side


@dataclass(frozen=True)
class MatchRecord:
    """A reported match as it is persisted."""

    played_at: datetime
    entries: tuple[MatchEntry, ...]
    winner: Side
    id: str | None = None  # Assigned by the repository

    @classmethod
    def from_team_pair(
        cls,
        team_pair: TeamPair,
        winner: Side,
        played_at: datetime | None = None,
    ) -> "MatchRecord":
        """Flatten a team pair into a match record, blue side first."""
        return cls(
            played_at=played_at or datetime.now(timezone.utc),
            entries=tuple(
                MatchEntry(participant_id=slot.participant.id, role=slot.role, side=side)
                for slot, side in team_pair.entries()
            ),
            winner=winner,
        )


@dataclass
class RatingUpdateResult:
    """Outcome of applying one match result to participant records."""

    match_id: str
    winner: Side
    updated: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)  # participant id -> error

    @property
    def success(self) -> bool:
        return not self.failed

    @property
    def failed_ids(self) -> list[str]:
        return list(self.failed)
