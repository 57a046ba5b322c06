"""Per-role candidate pools for team building."""

import random
from dataclasses import dataclass
from typing import Collection, Sequence

from rift_teams.models.participant import SessionSelection, WishPriority
from rift_teams.utils.role_normalizer import ROLE_ORDER, Role


@dataclass(frozen=True)
class RolePool:
    """Eligible participants for one role, grouped into preference tiers.

    Tiers are ordered best first: role wishes by priority, then explicit
    wanted roles, then everyone else who has not excluded the role. Order
    inside a tier carries no meaning.
    """

    role: Role
    tiers: tuple[tuple[SessionSelection, ...], ...]

    @property
    def members(self) -> list[SessionSelection]:
        return [s for tier in self.tiers for s in tier]

    def __len__(self) -> int:
        return sum(len(tier) for tier in self.tiers)

    def draw_order(self, rng: random.Random, exclude_ids: Collection[str] = ()) -> list[SessionSelection]:
        """Candidates in tier order, each tier shuffled, minus excluded ids."""
        ordered = []
        for tier in self.tiers:
            available = [s for s in tier if s.participant_id not in exclude_ids]
            rng.shuffle(available)
            ordered.extend(available)
        return ordered


def _wish_tier(selection: SessionSelection) -> int:
    # Wishes without a priority sort after LOW
    if selection.wish_priority is None:
        return len(WishPriority)
    return selection.wish_priority.rank


class EligibilityResolver:
    """Builds the candidate pool for each role from a session's selections."""

    def __init__(self, roles: Sequence[Role] = ROLE_ORDER):
        self.roles = tuple(roles)

    def resolve(self, selections: Sequence[SessionSelection]) -> dict[Role, RolePool]:
        """Map every role to the selections allowed to play it."""
        return {role: self.resolve_role(role, selections) for role in self.roles}

    def resolve_role(self, role: Role, selections: Sequence[SessionSelection]) -> RolePool:
        eligible = [s for s in selections if s.can_play(role)]

        wishers = sorted((s for s in eligible if s.role_wish == role), key=_wish_tier)
        wish_tiers: list[tuple[SessionSelection, ...]] = []
        for selection in wishers:
            if wish_tiers and _wish_tier(wish_tiers[-1][0]) == _wish_tier(selection):
                wish_tiers[-1] = wish_tiers[-1] + (selection,)
            else:
                wish_tiers.append((selection,))

        wanted = tuple(s for s in eligible if s.role_wish != role and role in s.wanted_roles)
        others = tuple(s for s in eligible if not s.wants(role))

        tiers = [*wish_tiers, wanted, others]
        return RolePool(role=role, tiers=tuple(tier for tier in tiers if tier))
