"""Applies a reported match result to participant ratings and records."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

from rift_teams.exceptions import PersistenceError, StructuralConflict
from rift_teams.models.match import MatchRecord, RatingField, RatingUpdateResult, RecordField
from rift_teams.models.team import Side, TeamPair, TeamSlot
from rift_teams.utils.rank_rates import DEFAULT_RATING_CEILING, derive_secondary_rating

if TYPE_CHECKING:
    from rift_teams.repositories.participant_repository import ParticipantRepository

logger = logging.getLogger(__name__)

DEFAULT_RATING_DELTA = 50


class RatingUpdater:
    """Moves ratings by a fixed delta and bumps win/loss counters.

    New values are computed from the participant snapshot carried in the
    team pair. Writes are independent: a failed participant does not undo
    the ones that succeeded, and the caller must not report the same match
    twice.
    """

    def __init__(
        self,
        repository: "ParticipantRepository",
        delta: int = DEFAULT_RATING_DELTA,
        ceiling: int = DEFAULT_RATING_CEILING,
        workers: int = 10,
    ):
        self.repository = repository
        self.delta = delta
        self.ceiling = ceiling
        self.workers = max(1, workers)

    def new_rating(self, slot: TeamSlot, is_winner: bool) -> tuple[RatingField, int]:
        """Rating column to write for a slot and its value after the match."""
        change = self.delta if is_winner else -self.delta
        if slot.on_primary_role:
            field, current = RatingField.PRIMARY, slot.participant.primary_rating
        else:
            field, current = RatingField.SECONDARY, slot.participant.secondary_rating
        return field, min(max(current + change, 0), self.ceiling)

    def report_result(self, team_pair: TeamPair, winner: Side) -> RatingUpdateResult:
        """Record the match, then update all ten participants.

        Raises:
            StructuralConflict: If the team pair is not a complete pair
            PersistenceError: If the match record itself cannot be written
                (no participant has been touched at that point)

        Returns:
            RatingUpdateResult listing updated and failed participant ids
        """
        problems = team_pair.structural_problems()
        if problems:
            raise StructuralConflict(f"Cannot report an incomplete team pair: {'; '.join(problems)}")

        record = MatchRecord.from_team_pair(team_pair, winner)
        try:
            match_id = self.repository.create_match_record(record)
        except PersistenceError as e:
            logger.error(f"Failed to record match: {e}")
            raise

        result = RatingUpdateResult(match_id=match_id, winner=winner)
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            futures = {
                slot.participant.id: executor.submit(self._apply, slot, side == winner)
                for slot, side in team_pair.entries()
            }
            for participant_id, future in futures.items():
                try:
                    future.result()
                except PersistenceError as e:
                    logger.warning(f"Rating update failed for {participant_id}: {e}")
                    result.failed[participant_id] = str(e)
                except Exception as e:
                    logger.exception(f"Unexpected error updating {participant_id}")
                    result.failed[participant_id] = f"{type(e).__name__}: {e}"
                else:
                    result.updated.append(participant_id)

        logger.info(
            f"Match {match_id} recorded: {winner.value} won, "
            f"{len(result.updated)} updated, {len(result.failed)} failed"
        )
        return result

    def _apply(self, slot: TeamSlot, is_winner: bool) -> None:
        participant_id = slot.participant.id
        field, value = self.new_rating(slot, is_winner)
        self.repository.update_participant_rating(participant_id, field, value)
        self.repository.increment_participant_record(
            participant_id, RecordField.WINS if is_winner else RecordField.LOSSES
        )


def recompute_secondary_ratings(
    repository: "ParticipantRepository",
    ratio: float,
) -> list[tuple[str, int, int]]:
    """Rewrite every stored secondary rating as ``ratio`` of the primary rating.

    Only participants whose value changes are written.

    Returns:
        (participant id, old value, new value) for each changed participant
    """
    changed = []
    for participant in repository.list_participants():
        new_value = derive_secondary_rating(participant.primary_rating, ratio)
        if new_value == participant.secondary_rating:
            continue
        repository.update_participant_rating(participant.id, RatingField.SECONDARY, new_value)
        changed.append((participant.id, participant.secondary_rating, new_value))
        logger.info(
            f"Secondary rating for {participant.name}: {participant.secondary_rating} -> {new_value}"
        )
    return changed
