"""Domain errors raised by the team maker."""

from typing import Iterable

from rift_teams.utils.role_normalizer import Role, sort_roles


class TeamMakerError(Exception):
    """Base class for all team maker errors."""


class SelectionCountError(TeamMakerError):
    """Raised when a selection is not exactly the required number of distinct participants."""

    def __init__(self, count: int, expected: int = 10, message: str | None = None):
        self.count = count
        self.expected = expected
        super().__init__(message or f"Select exactly {expected} participants (got {count})")


class InfeasibleConstraints(TeamMakerError):
    """Raised when one or more roles are excluded by too many participants."""

    def __init__(self, roles: Iterable[Role], threshold: int):
        self.roles = sort_roles(roles)
        self.threshold = threshold
        names = ", ".join(r.value for r in self.roles)
        super().__init__(
            f"Too many participants refuse {names} "
            f"({threshold} or more exclusions); teams cannot be built"
        )


class GenerationFailure(TeamMakerError):
    """Raised when no trial produced a complete team pair."""

    def __init__(self, trial_count: int):
        self.trial_count = trial_count
        super().__init__(f"No valid team pair found in {trial_count} trials")


class StructuralConflict(TeamMakerError):
    """Raised when a manual edit would break the team pair structure."""


class PersistenceError(TeamMakerError):
    """Raised when a repository read or write fails."""

    def __init__(self, message: str, participant_id: str | None = None):
        self.participant_id = participant_id
        super().__init__(message)
