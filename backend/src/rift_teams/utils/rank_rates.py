"""Seed ratings for new participants, keyed by ladder rank."""

from enum import Enum
from typing import NamedTuple


class Rank(str, Enum):
    UNRANKED = "UNRANKED"
    IRON = "IRON"
    BRONZE = "BRONZE"
    SILVER = "SILVER"
    GOLD = "GOLD"
    PLATINUM = "PLATINUM"
    EMERALD = "EMERALD"
    DIAMOND = "DIAMOND"
    MASTER = "MASTER"
    GRANDMASTER = "GRANDMASTER"
    CHALLENGER = "CHALLENGER"


# Upper bound for any stored rating; the lower bound is 0
DEFAULT_RATING_CEILING = 10000


class SeedRatings(NamedTuple):
    primary: int
    secondary: int


RANK_RATES: dict[Rank, SeedRatings] = {
    Rank.UNRANKED: SeedRatings(500, 400),
    Rank.IRON: SeedRatings(600, 480),
    Rank.BRONZE: SeedRatings(1300, 1040),
    Rank.SILVER: SeedRatings(1500, 1200),
    Rank.GOLD: SeedRatings(1700, 1360),
    Rank.PLATINUM: SeedRatings(1900, 1520),
    Rank.EMERALD: SeedRatings(2000, 1600),
    Rank.DIAMOND: SeedRatings(2200, 1760),
    Rank.MASTER: SeedRatings(2500, 2000),
    Rank.GRANDMASTER: SeedRatings(2700, 2160),
    Rank.CHALLENGER: SeedRatings(3000, 2400),
}


def seed_ratings(rank: str | Rank) -> SeedRatings:
    """Get the starting (primary, secondary) ratings for a rank name.

    Raises:
        ValueError: If the rank is not recognized
    """
    if isinstance(rank, Rank):
        return RANK_RATES[rank]
    try:
        return RANK_RATES[Rank(str(rank).strip().upper())]
    except ValueError:
        raise ValueError(f"Unknown rank: {rank}") from None


def derive_secondary_rating(primary_rating: int, ratio: float) -> int:
    """Secondary rating as a fixed fraction of the primary rating.

    Rounds half up so 1250 * 0.9 gives 1125 rather than banker's rounding.
    """
    if not 0 < ratio <= 1:
        raise ValueError(f"ratio must be in (0, 1], got {ratio}")
    return int(primary_rating * ratio + 0.5)
