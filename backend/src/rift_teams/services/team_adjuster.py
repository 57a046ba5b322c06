"""Manual edits to a generated team pair.

Every function returns a new TeamPair and leaves its input untouched.
Edits do not look at session exclusions; call find_exclusion_violations
afterwards when that matters.
"""

from typing import Iterable, Mapping, NamedTuple

from rift_teams.exceptions import StructuralConflict
from rift_teams.models.participant import SessionSelection
from rift_teams.models.team import Side, TeamPair, TeamSlot
from rift_teams.utils.role_normalizer import Role


class ExclusionViolation(NamedTuple):
    participant_id: str
    participant_name: str
    role: Role
    side: Side


def _check_index(team_pair: TeamPair, side: Side, index: int) -> None:
    size = len(team_pair.side(side))
    if not 0 <= index < size:
        raise StructuralConflict(f"No slot {index} on {side.value} side (size {size})")


def swap(team_pair: TeamPair, side_x: Side, index_x: int, side_y: Side, index_y: int) -> TeamPair:
    """Exchange the participants in two slots.

    Roles stay with the slots, so each participant takes over the role the
    other one vacated. Both slots may be on the same side.
    """
    _check_index(team_pair, side_x, index_x)
    _check_index(team_pair, side_y, index_y)

    slot_x = team_pair.side(side_x)[index_x]
    slot_y = team_pair.side(side_y)[index_y]

    sides = {side: list(team_pair.side(side)) for side in Side}
    sides[side_x][index_x] = TeamSlot(participant=slot_y.participant, role=slot_x.role)
    sides[side_y][index_y] = TeamSlot(participant=slot_x.participant, role=slot_y.role)
    return TeamPair(blue=tuple(sides[Side.BLUE]), red=tuple(sides[Side.RED]))


def reassign_role(team_pair: TeamPair, side: Side, index: int, new_role: Role) -> TeamPair:
    """Give one slot a different role.

    Raises:
        StructuralConflict: If another slot on the same side already plays new_role
    """
    _check_index(team_pair, side, index)
    slots = list(team_pair.side(side))

    for i, slot in enumerate(slots):
        if i != index and slot.role == new_role:
            raise StructuralConflict(
                f"{new_role.value} is already played by {slot.participant.name} on {side.value} side"
            )

    slots[index] = TeamSlot(participant=slots[index].participant, role=new_role)
    return team_pair.with_side(side, slots)


def find_exclusion_violations(
    team_pair: TeamPair,
    selections: Mapping[str, SessionSelection] | Iterable[SessionSelection],
) -> list[ExclusionViolation]:
    """List slots whose participant excluded the assigned role this session."""
    if not isinstance(selections, Mapping):
        selections = {s.participant_id: s for s in selections}

    violations = []
    for slot, side in team_pair.entries():
        selection = selections.get(slot.participant.id)
        if selection is not None and not selection.can_play(slot.role):
            violations.append(
                ExclusionViolation(slot.participant.id, slot.participant.name, slot.role, side)
            )
    return violations
