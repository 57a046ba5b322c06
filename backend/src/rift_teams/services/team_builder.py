"""Randomized multi-restart team construction.

Each trial shuffles the role order, fills blue then red greedily from the
per-role pools, patches any open slot from the leftover participants, and
keeps the best completed pair according to TeamEvaluation.is_better_than.
"""

import logging
import random
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from rift_teams.exceptions import GenerationFailure
from rift_teams.models.participant import SessionSelection
from rift_teams.models.team import Side, TeamPair, TeamSlot
from rift_teams.services.eligibility_resolver import EligibilityResolver, RolePool
from rift_teams.services.team_evaluator import TeamEvaluation, TeamEvaluator
from rift_teams.utils.role_normalizer import ROLE_ORDER, Role

logger = logging.getLogger(__name__)

DEFAULT_TRIAL_COUNT = 100


@dataclass(frozen=True)
class GenerationResult:
    """Best team pair found by a build, with diagnostics."""

    team_pair: TeamPair
    evaluation: TeamEvaluation
    trials_run: int
    trials_completed: int
    relaxed_roles: tuple[Role, ...] = ()

    @property
    def primary_count(self) -> int:
        return self.evaluation.primary_count

    @property
    def rating_gap(self) -> int:
        return self.evaluation.rating_gap


@dataclass
class _TrialBatch:
    best_pair: Optional[TeamPair] = None
    best_evaluation: Optional[TeamEvaluation] = None
    completed: int = 0

    def offer(self, pair: TeamPair, evaluation: TeamEvaluation) -> None:
        if evaluation.is_better_than(self.best_evaluation):
            self.best_pair = pair
            self.best_evaluation = evaluation


class TeamBuilder:
    """Builds balanced team pairs from session selections."""

    def __init__(
        self,
        trial_count: int = DEFAULT_TRIAL_COUNT,
        roles: Sequence[Role] = ROLE_ORDER,
        rng: Optional[random.Random] = None,
        workers: int = 1,
        evaluator: Optional[TeamEvaluator] = None,
    ):
        """Initialize the builder.

        Args:
            trial_count: Number of independent construction attempts per build
            roles: Roles each side must cover; team size is len(roles)
            rng: Random source, seeded in tests for reproducible builds
            workers: Threads to split trials across (1 runs inline)
            evaluator: Scorer for completed trials
        """
        if trial_count < 1:
            raise ValueError("trial_count must be at least 1")
        self.trial_count = trial_count
        self.roles = tuple(roles)
        self.workers = max(1, workers)
        self._rng = rng or random.Random()
        self.resolver = EligibilityResolver(self.roles)
        self.evaluator = evaluator or TeamEvaluator()

    def build(self, selections: Sequence[SessionSelection]) -> GenerationResult:
        """Run all trials and return the best team pair.

        Raises:
            GenerationFailure: If no trial filled every slot on both sides
        """
        pools = self.resolver.resolve(selections)
        by_id = {s.participant_id: s for s in selections}

        if self.workers == 1:
            batch = self._run_batch(self.trial_count, pools, selections, by_id, self._rng)
        else:
            batch = self._run_parallel(pools, selections, by_id)

        if batch.best_pair is None:
            logger.warning(f"Team generation failed: 0/{self.trial_count} trials completed")
            raise GenerationFailure(self.trial_count)

        logger.info(
            f"Team generation: {batch.completed}/{self.trial_count} trials completed, "
            f"primary_count={batch.best_evaluation.primary_count}, "
            f"rating_gap={batch.best_evaluation.rating_gap}"
        )
        return GenerationResult(
            team_pair=batch.best_pair,
            evaluation=batch.best_evaluation,
            trials_run=self.trial_count,
            trials_completed=batch.completed,
        )

    def _run_parallel(
        self,
        pools: Mapping[Role, RolePool],
        selections: Sequence[SessionSelection],
        by_id: Mapping[str, SessionSelection],
    ) -> _TrialBatch:
        # Pools and selections are frozen, so workers share them without locks
        chunk, extra = divmod(self.trial_count, self.workers)
        sizes = [chunk + (1 if i < extra else 0) for i in range(self.workers)]
        seeds = [self._rng.getrandbits(64) for _ in sizes]

        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            batches = list(executor.map(
                lambda args: self._run_batch(args[0], pools, selections, by_id, random.Random(args[1])),
                [(size, seed) for size, seed in zip(sizes, seeds) if size],
            ))

        merged = _TrialBatch()
        for batch in batches:
            merged.completed += batch.completed
            if batch.best_pair is not None:
                merged.offer(batch.best_pair, batch.best_evaluation)
        return merged

    def _run_batch(
        self,
        trials: int,
        pools: Mapping[Role, RolePool],
        selections: Sequence[SessionSelection],
        by_id: Mapping[str, SessionSelection],
        rng: random.Random,
    ) -> _TrialBatch:
        batch = _TrialBatch()
        for _ in range(trials):
            pair = self._run_trial(pools, selections, rng)
            if pair is None:
                continue
            batch.completed += 1
            batch.offer(pair, self.evaluator.evaluate(pair, by_id))
        return batch

    def _run_trial(
        self,
        pools: Mapping[Role, RolePool],
        selections: Sequence[SessionSelection],
        rng: random.Random,
    ) -> Optional[TeamPair]:
        """One construction attempt; None when a slot cannot be filled."""
        role_order = list(self.roles)
        rng.shuffle(role_order)

        assigned: set[str] = set()
        filled: dict[Side, dict[Role, SessionSelection]] = {Side.BLUE: {}, Side.RED: {}}

        for side in Side:
            for role in role_order:
                candidates = pools[role].draw_order(rng, assigned)
                if candidates:
                    filled[side][role] = candidates[0]
                    assigned.add(candidates[0].participant_id)

        if any(len(filled[side]) < len(self.roles) for side in Side):
            leftovers = [s for s in selections if s.participant_id not in assigned]
            rng.shuffle(leftovers)
            for side in Side:
                for role in role_order:
                    if role in filled[side]:
                        continue
                    found = next(
                        (s for s in leftovers if s.participant_id not in assigned and s.can_play(role)),
                        None,
                    )
                    if found is None:
                        return None
                    filled[side][role] = found
                    assigned.add(found.participant_id)

        return TeamPair(
            blue=self._to_slots(filled[Side.BLUE]),
            red=self._to_slots(filled[Side.RED]),
        )

    def _to_slots(self, filled: Mapping[Role, SessionSelection]) -> tuple[TeamSlot, ...]:
        return tuple(TeamSlot(participant=filled[role].participant, role=role) for role in self.roles)
