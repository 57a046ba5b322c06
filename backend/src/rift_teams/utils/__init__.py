"""Utility modules for rift_teams."""

from rift_teams.utils.role_normalizer import (
    CANONICAL_ROLES,
    ROLE_ALIASES,
    ROLE_ORDER,
    Role,
    normalize_role,
    normalize_role_strict,
    normalize_roles,
    is_valid_role,
    sort_roles,
)
from rift_teams.utils.rank_rates import (
    RANK_RATES,
    Rank,
    SeedRatings,
    derive_secondary_rating,
    seed_ratings,
)

__all__ = [
    "CANONICAL_ROLES",
    "ROLE_ALIASES",
    "ROLE_ORDER",
    "Role",
    "normalize_role",
    "normalize_role_strict",
    "normalize_roles",
    "is_valid_role",
    "sort_roles",
    "RANK_RATES",
    "Rank",
    "SeedRatings",
    "derive_secondary_rating",
    "seed_ratings",
]
