"""Pre-generation check for roles nobody can fill."""

import logging
from collections import Counter
from typing import Sequence

from rift_teams.exceptions import InfeasibleConstraints
from rift_teams.models.participant import SessionSelection
from rift_teams.utils.role_normalizer import ROLE_ORDER, Role

logger = logging.getLogger(__name__)

DEFAULT_EXCLUSION_THRESHOLD = 8


class ConstraintValidator:
    """Flags roles excluded by at least ``threshold`` participants.

    Passing the check does not promise a successful build: a role with a
    few exclusions under the threshold may still starve the builder.
    """

    def __init__(
        self,
        threshold: int = DEFAULT_EXCLUSION_THRESHOLD,
        roles: Sequence[Role] = ROLE_ORDER,
    ):
        self.threshold = threshold
        self.roles = tuple(roles)

    def exclusion_counts(self, selections: Sequence[SessionSelection]) -> dict[Role, int]:
        """Number of participants excluding each role."""
        counts = Counter(role for s in selections for role in s.excluded_roles)
        return {role: counts.get(role, 0) for role in self.roles}

    def over_excluded_roles(self, selections: Sequence[SessionSelection]) -> list[Role]:
        counts = self.exclusion_counts(selections)
        return [role for role in self.roles if counts[role] >= self.threshold]

    def validate(self, selections: Sequence[SessionSelection]) -> None:
        """Raise InfeasibleConstraints naming every over-excluded role."""
        problem_roles = self.over_excluded_roles(selections)
        if problem_roles:
            logger.warning(
                f"Over-excluded roles: {', '.join(r.value for r in problem_roles)} "
                f"(threshold {self.threshold})"
            )
            raise InfeasibleConstraints(problem_roles, self.threshold)
