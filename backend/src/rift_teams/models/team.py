"""Team slot and team pair models.

A TeamPair is an immutable value: every edit builds a new pair and shares
only frozen objects with the original.
"""

from collections import Counter
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterator, Sequence

from rift_teams.models.participant import Participant
from rift_teams.utils.role_normalizer import ROLE_ORDER, Role


class Side(str, Enum):
    """The two sides of a custom game."""

    BLUE = "blue"
    RED = "red"

    @property
    def opponent(self) -> "Side":
        return Side.RED if self is Side.BLUE else Side.BLUE


@dataclass(frozen=True)
class TeamSlot:
    """One participant playing one role."""

    participant: Participant
    role: Role

    @property
    def rating(self) -> int:
        return self.participant.rating_for(self.role)

    @property
    def on_primary_role(self) -> bool:
        return self.role == self.participant.primary_role


@dataclass(frozen=True)
class TeamPair:
    """Two teams, blue and red, built from one selection."""

    blue: tuple[TeamSlot, ...]
    red: tuple[TeamSlot, ...]

    def side(self, side: Side) -> tuple[TeamSlot, ...]:
        return self.blue if side is Side.BLUE else self.red

    def with_side(self, side: Side, slots: Sequence[TeamSlot]) -> "TeamPair":
        """Copy of this pair with one side replaced."""
        if side is Side.BLUE:
            return replace(self, blue=tuple(slots))
        return replace(self, red=tuple(slots))

    def entries(self) -> Iterator[tuple[TeamSlot, Side]]:
        """All slots, blue side first, in slot order."""
        for slot in self.blue:
            yield slot, Side.BLUE
        for slot in self.red:
            yield slot, Side.RED

    @property
    def participant_ids(self) -> list[str]:
        return [slot.participant.id for slot, _ in self.entries()]

    def structural_problems(self, roles: Sequence[Role] = ROLE_ORDER) -> list[str]:
        """Describe every way this pair breaks the team structure.

        An empty list means each side has one slot per role and no
        participant appears twice across both sides.
        """
        problems = []
        expected = Counter(roles)
        for side in Side:
            slots = self.side(side)
            if len(slots) != len(roles):
                problems.append(f"{side.value} has {len(slots)} slots, expected {len(roles)}")
            if Counter(slot.role for slot in slots) != expected:
                problems.append(f"{side.value} does not cover each role exactly once")

        duplicates = [pid for pid, n in Counter(self.participant_ids).items() if n > 1]
        if duplicates:
            problems.append(f"participants assigned more than once: {', '.join(sorted(duplicates))}")
        return problems

    def is_valid(self, roles: Sequence[Role] = ROLE_ORDER) -> bool:
        return not self.structural_problems(roles)
