"""Participant and per-session selection models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from rift_teams.utils.role_normalizer import Role


class WishPriority(str, Enum):
    """How strongly a participant wants their role wish honored."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def rank(self) -> int:
        """Sort key: 0 for HIGH, 2 for LOW."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {WishPriority.HIGH: 0, WishPriority.MEDIUM: 1, WishPriority.LOW: 2}


@dataclass(frozen=True)
class Participant:
    """A roster entry as read from the repository."""

    id: str
    name: str
    primary_role: Role
    primary_rating: int
    secondary_rating: int  # Applied to every role except primary_role
    wins: int = 0
    losses: int = 0
    labels: tuple[str, ...] = ()
    excluded_roles: frozenset[Role] = frozenset()  # Persisted "never assign" roles

    def rating_for(self, role: Role) -> int:
        """Rating used when this participant plays the given role."""
        return self.primary_rating if role == self.primary_role else self.secondary_rating

    @property
    def games_played(self) -> int:
        return self.wins + self.losses

    @property
    def win_rate(self) -> int:
        """Win percentage rounded to an integer, 0 when no games were played."""
        if self.games_played == 0:
            return 0
        return round(self.wins / self.games_played * 100)


@dataclass(frozen=True)
class SessionSelection:
    """A participant picked for one team-building session."""

    participant: Participant
    excluded_roles: frozenset[Role] = frozenset()
    wanted_roles: frozenset[Role] = frozenset()
    role_wish: Optional[Role] = None
    wish_priority: Optional[WishPriority] = None

    @classmethod
    def from_participant(
        cls,
        participant: Participant,
        excluded_roles: Optional[frozenset[Role]] = None,
        wanted_roles: frozenset[Role] = frozenset(),
        role_wish: Optional[Role] = None,
        wish_priority: Optional[WishPriority] = None,
    ) -> "SessionSelection":
        """Build a selection, defaulting exclusions to the persisted set."""
        if excluded_roles is None:
            excluded_roles = participant.excluded_roles
        return cls(
            participant=participant,
            excluded_roles=frozenset(excluded_roles),
            wanted_roles=frozenset(wanted_roles),
            role_wish=role_wish,
            wish_priority=wish_priority,
        )

    @property
    def participant_id(self) -> str:
        return self.participant.id

    def can_play(self, role: Role) -> bool:
        return role not in self.excluded_roles

    def wants(self, role: Role) -> bool:
        """True if the role is this session's wish or in the wanted set."""
        return role == self.role_wish or role in self.wanted_roles
