"""Owner-assignment enumeration and plan selection."""

import itertools
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime

from leadtime.logger import checks_enabled, get_logger

from .builder import PlanBuilder
from .core import OwnerCandidateList, Plan

logger = get_logger()

Assignment = dict[str, str | None]


@dataclass
class Selection:
    """The chosen plan and how it was chosen."""

    plan: Plan
    feasible: bool
    candidates_evaluated: int
    all_preferred_plan: Plan | None = None


class CandidateSelector:
    """Enumerates owner assignments and picks a plan.

    Selection policy, in order:

    1. The all-preferred plan, if it meets the cutoff, even when a plan with
       fallback owners would finish earlier.
    2. Otherwise the earliest-completing plan that meets the cutoff.
    3. Otherwise the earliest-completing plan overall (best infeasible).

    Ties go to the plan using more preferred owners, then to enumeration
    order. A plan only meets the cutoff if every team has an owner.
    """

    def __init__(
        self,
        builder: PlanBuilder,
        candidates: Mapping[str, OwnerCandidateList],
        order: Sequence[str],
        cutoff: datetime,
    ) -> None:
        self.builder = builder
        self.candidates = candidates
        self.order = list(order)
        self.cutoff = cutoff
        # Completions are compared in next-working-start form
        self.deadline = builder.calendar.latest_completion(cutoff)

    def owner_options(self, team: str) -> list[str | None]:
        """Owners a team can draw from; a single None if there are none."""
        ordered = self.candidates.get(team, OwnerCandidateList()).ordered
        return list(ordered) if ordered else [None]

    def all_preferred_assignment(self) -> Assignment | None:
        """Every team on its preferred owner, or None if some team has none."""
        assignment: Assignment = {}
        for team in self.order:
            preferred = self.candidates.get(team, OwnerCandidateList()).preferred
            if not preferred:
                return None
            assignment[team] = preferred
        return assignment

    def assignments(self) -> Iterator[Assignment]:
        """Lazily yield every combination of one owner per team."""
        options = [self.owner_options(team) for team in self.order]
        for combo in itertools.product(*options):
            yield dict(zip(self.order, combo, strict=True))

    def count(self) -> int:
        """Size of the assignment space."""
        total = 1
        for team in self.order:
            total *= len(self.owner_options(team))
        return total

    @staticmethod
    def _rank(indexed: tuple[int, Plan]) -> tuple[datetime, int, int]:
        index, plan = indexed
        completion = plan.completion
        assert completion is not None
        return (completion, -plan.preferred_count, index)

    def select(self) -> Selection:
        """Build candidate plans and choose one under the selection policy."""
        preferred_assignment = self.all_preferred_assignment()
        preferred_plan: Plan | None = None

        if preferred_assignment is not None:
            preferred_plan = self.builder.build(preferred_assignment)
            if preferred_plan.meets(self.deadline):
                logger.changes(
                    f"All-preferred plan meets cutoff "
                    f"(completion {_fmt(preferred_plan.completion)})"
                )
                return Selection(
                    plan=preferred_plan,
                    feasible=True,
                    candidates_evaluated=1,
                    all_preferred_plan=preferred_plan,
                )
            logger.checks(
                f"All-preferred plan misses cutoff {self.cutoff.isoformat()} "
                f"(completion {_fmt(preferred_plan.completion)})"
            )

        logger.checks(f"Enumerating {self.count()} owner assignments")
        plans: list[tuple[int, Plan]] = []
        for index, assignment in enumerate(self.assignments()):
            if preferred_plan is not None and assignment == preferred_assignment:
                plan = preferred_plan
            else:
                plan = self.builder.build(assignment)
            if checks_enabled():
                logger.checks(
                    f"  candidate {index}: {_fmt_assignment(assignment)} "
                    f"-> {_fmt(plan.completion)}"
                    f"{'' if plan.meets(self.deadline) else ' (late)'}"
                )
            plans.append((index, plan))

        feasible_plans = [entry for entry in plans if entry[1].meets(self.deadline)]
        pool = feasible_plans or plans
        _, chosen = min(pool, key=self._rank)

        logger.changes(
            f"Selected {_fmt_assignment(chosen.assignment)} completing {_fmt(chosen.completion)} "
            f"({'feasible' if feasible_plans else 'infeasible'}, {len(plans)} candidates)"
        )
        return Selection(
            plan=chosen,
            feasible=bool(feasible_plans),
            candidates_evaluated=len(plans),
            all_preferred_plan=preferred_plan,
        )


def _fmt(instant: datetime | None) -> str:
    return instant.isoformat() if instant else "n/a"


def _fmt_assignment(assignment: Mapping[str, str | None]) -> str:
    return ", ".join(f"{team}={owner or '-'}" for team, owner in assignment.items())
