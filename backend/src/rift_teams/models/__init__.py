"""Data models for the team maker."""

from rift_teams.models.participant import Participant, SessionSelection, WishPriority
from rift_teams.models.team import Side, TeamPair, TeamSlot
from rift_teams.models.match import (
    MatchEntry,
    MatchRecord,
    RatingField,
    RatingUpdateResult,
    RecordField,
)

__all__ = [
    "Participant",
    "SessionSelection",
    "WishPriority",
    "Side",
    "TeamPair",
    "TeamSlot",
    "MatchEntry",
    "MatchRecord",
    "RatingField",
    "RatingUpdateResult",
    "RecordField",
]
