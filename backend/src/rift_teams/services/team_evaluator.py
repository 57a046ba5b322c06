"""Team pair scoring: preference satisfaction first, rating balance second."""

from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from rift_teams.models.participant import SessionSelection
from rift_teams.models.team import Side, TeamPair, TeamSlot


@dataclass(frozen=True)
class TeamEvaluation:
    """Objective values for one team pair."""

    blue_rating: int
    red_rating: int
    primary_count: int  # Slots matching the session wish or a wanted role
    main_role_count: int  # Slots on the participant's stored primary role
    blue_average: int = 0
    red_average: int = 0

    @property
    def rating_gap(self) -> int:
        return abs(self.blue_rating - self.red_rating)

    def side_rating(self, side: Side) -> int:
        return self.blue_rating if side is Side.BLUE else self.red_rating

    def is_better_than(self, other: Optional["TeamEvaluation"]) -> bool:
        """Lexicographic comparison: more satisfied wishes, then smaller gap.

        Exact ties return False, so whichever candidate was kept first stays.
        Which of several tied candidates is found first depends on the random
        search, so tie outcomes are not deterministic across runs.
        """
        if other is None:
            return True
        if self.primary_count != other.primary_count:
            return self.primary_count > other.primary_count
        return self.rating_gap < other.rating_gap


class TeamEvaluator:
    """Scores team pairs against the selections they were built from."""

    @staticmethod
    def calculate_side_rating(slots: Sequence[TeamSlot]) -> int:
        """Sum of each slot's primary or secondary rating."""
        return sum(slot.rating for slot in slots)

    @staticmethod
    def calculate_average_rating(slots: Sequence[TeamSlot]) -> int:
        if not slots:
            return 0
        return round(sum(slot.rating for slot in slots) / len(slots))

    def evaluate(
        self,
        team_pair: TeamPair,
        selections: Mapping[str, SessionSelection],
    ) -> TeamEvaluation:
        """Score a team pair.

        Args:
            team_pair: Candidate teams
            selections: Session selections keyed by participant id; slots for
                participants missing here never count as satisfied

        Returns:
            TeamEvaluation with side ratings and preference counts
        """
        primary_count = 0
        main_role_count = 0
        for slot, _ in team_pair.entries():
            selection = selections.get(slot.participant.id)
            if selection is not None and selection.wants(slot.role):
                primary_count += 1
            if slot.on_primary_role:
                main_role_count += 1

        return TeamEvaluation(
            blue_rating=self.calculate_side_rating(team_pair.blue),
            red_rating=self.calculate_side_rating(team_pair.red),
            primary_count=primary_count,
            main_role_count=main_role_count,
            blue_average=self.calculate_average_rating(team_pair.blue),
            red_average=self.calculate_average_rating(team_pair.red),
        )
