"""Tests for role normalization."""
import pytest

from rift_teams.utils.role_normalizer import (
    ROLE_ORDER,
    Role,
    is_valid_role,
    normalize_role,
    normalize_role_strict,
    normalize_roles,
    sort_roles,
)


def test_normalize_role_aliases():
    """All common spellings map to the canonical role."""
    assert normalize_role("JUNGLE") == Role.JUNGLE
    assert normalize_role("jng") == Role.JUNGLE
    assert normalize_role("JG") == Role.JUNGLE
    assert normalize_role("bot") == Role.ADC
    assert normalize_role("ADC") == Role.ADC
    assert normalize_role("support") == Role.SUP
    assert normalize_role(" middle ") == Role.MID
    assert normalize_role("Top") == Role.TOP


def test_normalize_role_passes_enum_through():
    assert normalize_role(Role.SUP) is Role.SUP


def test_normalize_role_unknown_and_none():
    assert normalize_role(None) is None
    assert normalize_role("FILL") is None
    assert is_valid_role("fill") is False
    assert is_valid_role("mid") is True


def test_normalize_role_strict_raises():
    with pytest.raises(ValueError, match="Unknown role"):
        normalize_role_strict("carry")


def test_normalize_roles_collection():
    assert normalize_roles(["top", "JNG", "top"]) == frozenset({Role.TOP, Role.JUNGLE})
    assert normalize_roles(None) == frozenset()
    with pytest.raises(ValueError):
        normalize_roles(["top", "nope"])


def test_sort_roles_uses_lane_order():
    assert sort_roles({Role.SUP, Role.TOP, Role.MID}) == [Role.TOP, Role.MID, Role.SUP]
    assert sort_roles(reversed(ROLE_ORDER)) == list(ROLE_ORDER)
