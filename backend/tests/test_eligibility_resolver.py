"""Tests for per-role candidate pools."""
import random

import pytest

from rift_teams.models.participant import Participant, SessionSelection, WishPriority
from rift_teams.services.eligibility_resolver import EligibilityResolver
from rift_teams.utils.role_normalizer import ROLE_ORDER, Role


def make_selection(i, excluded=(), wanted=(), wish=None, priority=None):
    participant = Participant(
        id=f"p{i}",
        name=f"Player{i}",
        primary_role=ROLE_ORDER[i % 5],
        primary_rating=1000,
        secondary_rating=800,
    )
    return SessionSelection(
        participant=participant,
        excluded_roles=frozenset(excluded),
        wanted_roles=frozenset(wanted),
        role_wish=wish,
        wish_priority=priority,
    )


@pytest.fixture
def resolver():
    return EligibilityResolver()


def test_pools_exclude_only_excluded_roles(resolver):
    selections = [make_selection(i) for i in range(10)]
    selections[0] = make_selection(0, excluded={Role.JUNGLE, Role.SUP})

    pools = resolver.resolve(selections)

    assert set(pools) == set(ROLE_ORDER)
    assert len(pools[Role.JUNGLE]) == 9
    assert len(pools[Role.SUP]) == 9
    assert len(pools[Role.TOP]) == 10
    assert "p0" not in {s.participant_id for s in pools[Role.JUNGLE].members}


def test_tier_order_wishes_by_priority_then_wanted_then_rest(resolver):
    selections = [
        make_selection(0),
        make_selection(1, wanted={Role.MID}),
        make_selection(2, wish=Role.MID, priority=WishPriority.LOW),
        make_selection(3, wish=Role.MID, priority=WishPriority.HIGH),
        make_selection(4, wish=Role.MID, priority=WishPriority.MEDIUM),
        make_selection(5, wish=Role.TOP, priority=WishPriority.HIGH),
    ]

    pool = resolver.resolve_role(Role.MID, selections)

    assert [[s.participant_id for s in tier] for tier in pool.tiers] == [
        ["p3"],
        ["p4"],
        ["p2"],
        ["p1"],
        ["p0", "p5"],
    ]


def test_wish_without_priority_sorts_after_low(resolver):
    selections = [
        make_selection(0, wish=Role.ADC),
        make_selection(1, wish=Role.ADC, priority=WishPriority.LOW),
    ]

    pool = resolver.resolve_role(Role.ADC, selections)

    assert [s.participant_id for s in pool.members] == ["p1", "p0"]


def test_excluded_wish_is_not_eligible(resolver):
    selections = [make_selection(0, excluded={Role.TOP}, wish=Role.TOP, priority=WishPriority.HIGH)]

    pool = resolver.resolve_role(Role.TOP, selections)

    assert len(pool) == 0
    assert pool.tiers == ()


def test_draw_order_keeps_tiers_and_skips_assigned(resolver):
    selections = [make_selection(i) for i in range(6)]
    selections[5] = make_selection(5, wish=Role.SUP, priority=WishPriority.HIGH)
    pool = resolver.resolve_role(Role.SUP, selections)

    rng = random.Random(1)
    for _ in range(20):
        order = pool.draw_order(rng, exclude_ids={"p0"})
        assert order[0].participant_id == "p5"
        assert {s.participant_id for s in order} == {"p1", "p2", "p3", "p4", "p5"}

    assert pool.draw_order(rng, exclude_ids={"p5"})[0].participant_id != "p5"
