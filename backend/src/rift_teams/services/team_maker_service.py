"""Team maker business logic: generation, manual edits, and result reporting."""

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Optional, Sequence

from rift_teams.exceptions import SelectionCountError
from rift_teams.models.match import MatchRecord, RatingUpdateResult
from rift_teams.models.participant import Participant, SessionSelection
from rift_teams.models.team import Side, TeamPair
from rift_teams.services.constraint_validator import ConstraintValidator
from rift_teams.services.rating_updater import RatingUpdater
from rift_teams.services.team_adjuster import ExclusionViolation, find_exclusion_violations
from rift_teams.services.team_builder import GenerationResult, TeamBuilder

if TYPE_CHECKING:
    from rift_teams.config import Settings
    from rift_teams.repositories.participant_repository import ParticipantRepository

logger = logging.getLogger(__name__)

TEAM_SIZE = 5
SELECTION_SIZE = TEAM_SIZE * 2


class TeamMakerService:
    """Entry point used by the API: wraps validation, building and rating updates."""

    def __init__(
        self,
        repository: "ParticipantRepository",
        builder: Optional[TeamBuilder] = None,
        validator: Optional[ConstraintValidator] = None,
        updater: Optional[RatingUpdater] = None,
    ):
        """Initialize the service.

        Args:
            repository: Roster and match storage, shared with the updater
            builder: Team builder (default: 100 trials, unseeded)
            validator: Exclusion pre-check (default threshold 8)
            updater: Rating updater (default delta 50)
        """
        self.repository = repository
        self.builder = builder or TeamBuilder()
        self.validator = validator or ConstraintValidator()
        self.updater = updater or RatingUpdater(repository)

    @classmethod
    def from_settings(cls, repository: "ParticipantRepository", settings: "Settings") -> "TeamMakerService":
        return cls(
            repository,
            builder=TeamBuilder(trial_count=settings.trial_count, workers=settings.generation_workers),
            validator=ConstraintValidator(threshold=settings.exclusion_threshold),
            updater=RatingUpdater(
                repository,
                delta=settings.rating_delta,
                ceiling=settings.rating_ceiling,
                workers=settings.update_workers,
            ),
        )

    def list_participants(self) -> list[Participant]:
        return self.repository.list_participants()

    def validate_and_generate(
        self,
        selections: Sequence[SessionSelection],
        relaxed: bool = False,
    ) -> GenerationResult:
        """Check the selection and build the best team pair found.

        Args:
            selections: Exactly ten selections with distinct participants
            relaxed: Lift session exclusions for the over-excluded roles
                instead of refusing to build

        Raises:
            SelectionCountError: Wrong number of selections or a repeated participant
            InfeasibleConstraints: Some role is over-excluded and relaxed is False
            GenerationFailure: No trial completed
        """
        if len(selections) != SELECTION_SIZE:
            raise SelectionCountError(len(selections), SELECTION_SIZE)
        distinct = {s.participant_id for s in selections}
        if len(distinct) != SELECTION_SIZE:
            raise SelectionCountError(
                len(distinct),
                SELECTION_SIZE,
                f"Select {SELECTION_SIZE} distinct participants (got {len(distinct)} distinct)",
            )

        if not relaxed:
            self.validator.validate(selections)
            return self.builder.build(selections)

        lifted = self.validator.over_excluded_roles(selections)
        if lifted:
            logger.info(f"Relaxed mode: ignoring exclusions for {', '.join(r.value for r in lifted)}")
            selections = [
                replace(s, excluded_roles=s.excluded_roles.difference(lifted)) for s in selections
            ]
        result = self.builder.build(selections)
        return replace(result, relaxed_roles=tuple(lifted))

    def exclusion_violations(
        self,
        team_pair: TeamPair,
        selections: Sequence[SessionSelection],
    ) -> list[ExclusionViolation]:
        """Re-check a (possibly hand-edited) team pair against session exclusions."""
        return find_exclusion_violations(team_pair, selections)

    def report_result(self, team_pair: TeamPair, winner: Side) -> RatingUpdateResult:
        return self.updater.report_result(team_pair, winner)

    def match_history(self, limit: int = 50) -> list[MatchRecord]:
        return self.repository.list_match_records(limit)

    def rematch_selections(self, team_pair: TeamPair) -> list[SessionSelection]:
        """Selections for playing again with the same ten participants.

        Uses current roster data where available, persisted exclusions, and
        no session wishes.
        """
        roster = {p.id: p for p in self.repository.list_participants()}
        return [
            SessionSelection.from_participant(roster.get(slot.participant.id, slot.participant))
            for slot, _ in team_pair.entries()
        ]
