"""Tests for manual swap and role reassignment."""
import pytest

from rift_teams.exceptions import StructuralConflict
from rift_teams.models.participant import Participant, SessionSelection
from rift_teams.models.team import Side, TeamPair, TeamSlot
from rift_teams.services.team_adjuster import find_exclusion_violations, reassign_role, swap
from rift_teams.utils.role_normalizer import ROLE_ORDER, Role


def make_participant(i):
    return Participant(
        id=f"p{i}",
        name=f"Player{i}",
        primary_role=ROLE_ORDER[i % 5],
        primary_rating=1000 + i,
        secondary_rating=800 + i,
    )


@pytest.fixture
def team_pair():
    blue = tuple(TeamSlot(make_participant(i), role) for i, role in enumerate(ROLE_ORDER))
    red = tuple(TeamSlot(make_participant(i + 5), role) for i, role in enumerate(ROLE_ORDER))
    return TeamPair(blue=blue, red=red)


class TestSwap:
    def test_swap_is_self_inverse(self, team_pair):
        once = swap(team_pair, Side.BLUE, 0, Side.RED, 0)
        twice = swap(once, Side.BLUE, 0, Side.RED, 0)

        assert once != team_pair
        assert twice == team_pair

    def test_participants_take_vacated_roles(self, team_pair):
        swapped = swap(team_pair, Side.BLUE, 1, Side.RED, 3)

        assert swapped.blue[1].participant.id == "p8"
        assert swapped.blue[1].role == Role.JUNGLE
        assert swapped.red[3].participant.id == "p1"
        assert swapped.red[3].role == Role.ADC
        assert swapped.is_valid()

    def test_swap_within_one_side(self, team_pair):
        swapped = swap(team_pair, Side.RED, 0, Side.RED, 4)

        assert swapped.red[0].participant.id == "p9"
        assert swapped.red[0].role == Role.TOP
        assert swapped.red[4].participant.id == "p5"
        assert swapped.blue == team_pair.blue

    def test_input_is_not_mutated(self, team_pair):
        blue_before, red_before = team_pair.blue, team_pair.red

        swap(team_pair, Side.BLUE, 2, Side.RED, 2)

        assert team_pair.blue is blue_before
        assert team_pair.red is red_before
        assert team_pair.blue[2].participant.id == "p2"

    @pytest.mark.parametrize("index", [-1, 5])
    def test_out_of_range_index(self, team_pair, index):
        with pytest.raises(StructuralConflict):
            swap(team_pair, Side.BLUE, index, Side.RED, 0)


class TestReassignRole:
    def test_duplicate_role_is_rejected(self, team_pair):
        with pytest.raises(StructuralConflict, match="MID"):
            reassign_role(team_pair, Side.BLUE, 0, Role.MID)

        assert team_pair.blue[0].role == Role.TOP
        assert team_pair.is_valid()

    def test_same_role_is_a_no_op(self, team_pair):
        assert reassign_role(team_pair, Side.RED, 2, Role.MID) == team_pair

    def test_fills_a_missing_role(self, team_pair):
        # Blue plays two ADCs and no support
        broken_blue = team_pair.blue[:4] + (TeamSlot(team_pair.blue[4].participant, Role.ADC),)
        broken = team_pair.with_side(Side.BLUE, broken_blue)
        assert not broken.is_valid()

        fixed = reassign_role(broken, Side.BLUE, 4, Role.SUP)

        assert fixed.is_valid()
        assert broken.blue[4].role == Role.ADC

    def test_out_of_range_index(self, team_pair):
        with pytest.raises(StructuralConflict):
            reassign_role(team_pair, Side.RED, 7, Role.TOP)


def test_manual_edits_can_break_exclusions(team_pair):
    """Edits are not blocked by exclusions; the check reports them afterwards."""
    selections = [
        SessionSelection(slot.participant, excluded_roles=frozenset({Role.SUP}))
        if slot.participant.id == "p0"
        else SessionSelection(slot.participant)
        for slot, _ in team_pair.entries()
    ]
    assert find_exclusion_violations(team_pair, selections) == []

    edited = swap(team_pair, Side.BLUE, 0, Side.RED, 4)
    violations = find_exclusion_violations(edited, selections)

    assert len(violations) == 1
    assert violations[0].participant_id == "p0"
    assert violations[0].role == Role.SUP
    assert violations[0].side == Side.RED
