"""Business logic services."""

from rift_teams.services.constraint_validator import ConstraintValidator
from rift_teams.services.eligibility_resolver import EligibilityResolver, RolePool
from rift_teams.services.rating_updater import RatingUpdater
from rift_teams.services.team_adjuster import (
    ExclusionViolation,
    find_exclusion_violations,
    reassign_role,
    swap,
)
from rift_teams.services.team_builder import GenerationResult, TeamBuilder
from rift_teams.services.team_evaluator import TeamEvaluation, TeamEvaluator
from rift_teams.services.team_maker_service import TeamMakerService

__all__ = [
    "ConstraintValidator",
    "EligibilityResolver",
    "RolePool",
    "RatingUpdater",
    "ExclusionViolation",
    "find_exclusion_violations",
    "reassign_role",
    "swap",
    "GenerationResult",
    "TeamBuilder",
    "TeamEvaluation",
    "TeamEvaluator",
    "TeamMakerService",
]
