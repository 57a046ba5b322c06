"""Centralized role normalization utility.

All role parsing in the codebase should go through this module so that
request bodies, roster imports and stored rows agree on one spelling.
The canonical format is the ``Role`` enum value: TOP, JUNGLE, MID, ADC, SUP.
"""

from enum import Enum
from typing import Iterable, Optional


class Role(str, Enum):
    """The five lanes every team must cover exactly once."""

    TOP = "TOP"
    JUNGLE = "JUNGLE"
    MID = "MID"
    ADC = "ADC"
    SUP = "SUP"


# Role ordering for consistent display/sorting
ROLE_ORDER: tuple[Role, ...] = (Role.TOP, Role.JUNGLE, Role.MID, Role.ADC, Role.SUP)

CANONICAL_ROLES = frozenset(ROLE_ORDER)

# Mapping from known role spellings (lowercased) to the canonical role
ROLE_ALIASES: dict[str, Role] = {
    # Top lane variations
    "top": Role.TOP,
    "top laner": Role.TOP,
    "toplane": Role.TOP,

    # Jungle variations
    "jungle": Role.JUNGLE,
    "jungler": Role.JUNGLE,
    "jng": Role.JUNGLE,
    "jg": Role.JUNGLE,

    # Mid lane variations
    "mid": Role.MID,
    "middle": Role.MID,
    "mid laner": Role.MID,
    "midlane": Role.MID,

    # Bot/ADC variations - all normalize to ADC
    "adc": Role.ADC,
    "bot": Role.ADC,
    "bottom": Role.ADC,
    "ad carry": Role.ADC,
    "marksman": Role.ADC,

    # Support variations
    "sup": Role.SUP,
    "supp": Role.SUP,
    "support": Role.SUP,
}


def normalize_role(role: Optional[str]) -> Optional[Role]:
    """Normalize a role string to the canonical ``Role``.

    Args:
        role: Role string in any known format (e.g., "JNG", "jungle", "bot", "SUP")

    Returns:
        The matching Role, or None if the value is None or unknown

    Examples:
        >>> normalize_role("JNG")
        <Role.JUNGLE: 'JUNGLE'>
        >>> normalize_role("bot")
        <Role.ADC: 'ADC'>
    """
    if role is None:
        return None
    if isinstance(role, Role):
        return role

    return ROLE_ALIASES.get(role.strip().lower())


def normalize_role_strict(role: str) -> Role:
    """Normalize a role string, raising ValueError if unknown."""
    normalized = normalize_role(role)
    if normalized is None:
        raise ValueError(f"Unknown role: {role}")
    return normalized


def normalize_roles(roles: Optional[Iterable[str]]) -> frozenset[Role]:
    """Normalize a collection of role strings, rejecting unknown ones."""
    if not roles:
        return frozenset()
    return frozenset(normalize_role_strict(r) for r in roles)


def is_valid_role(role: Optional[str]) -> bool:
    """Check if a role string can be normalized."""
    return normalize_role(role) is not None


def sort_roles(roles: Iterable[Role]) -> list[Role]:
    """Sort roles in standard lane order (top, jungle, mid, adc, sup)."""
    return sorted(roles, key=ROLE_ORDER.index)
