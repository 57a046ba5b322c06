"""Tests for the over-exclusion pre-check."""
import pytest

from rift_teams.exceptions import InfeasibleConstraints
from rift_teams.models.participant import Participant, SessionSelection
from rift_teams.services.constraint_validator import ConstraintValidator
from rift_teams.utils.role_normalizer import ROLE_ORDER, Role


def make_selections(exclusions: dict[int, set[Role]]) -> list[SessionSelection]:
    selections = []
    for i in range(10):
        participant = Participant(
            id=f"p{i}",
            name=f"Player{i}",
            primary_role=ROLE_ORDER[i % 5],
            primary_rating=1000,
            secondary_rating=800,
        )
        selections.append(SessionSelection(participant, excluded_roles=frozenset(exclusions.get(i, ()))))
    return selections


@pytest.fixture
def validator():
    return ConstraintValidator()


def test_exclusion_counts(validator):
    selections = make_selections({0: {Role.TOP, Role.MID}, 1: {Role.TOP}})
    counts = validator.exclusion_counts(selections)
    assert counts == {Role.TOP: 2, Role.JUNGLE: 0, Role.MID: 1, Role.ADC: 0, Role.SUP: 0}


def test_eight_exclusions_is_infeasible(validator):
    selections = make_selections({i: {Role.JUNGLE} for i in range(8)})

    with pytest.raises(InfeasibleConstraints) as exc_info:
        validator.validate(selections)

    assert exc_info.value.roles == [Role.JUNGLE]
    assert exc_info.value.threshold == 8
    assert "JUNGLE" in str(exc_info.value)


def test_seven_exclusions_passes(validator):
    selections = make_selections({i: {Role.JUNGLE} for i in range(7)})
    validator.validate(selections)
    assert validator.over_excluded_roles(selections) == []


def test_names_every_over_excluded_role(validator):
    selections = make_selections({i: {Role.SUP, Role.TOP} for i in range(9)})

    with pytest.raises(InfeasibleConstraints) as exc_info:
        validator.validate(selections)

    assert exc_info.value.roles == [Role.TOP, Role.SUP]


def test_custom_threshold():
    validator = ConstraintValidator(threshold=3)
    selections = make_selections({i: {Role.MID} for i in range(3)})
    assert validator.over_excluded_roles(selections) == [Role.MID]
