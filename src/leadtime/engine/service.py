"""High-level feasibility service."""

from dataclasses import replace
from typing import TYPE_CHECKING

from leadtime.logger import changes_enabled, get_logger

from .builder import PlanBuilder
from .calendar import WorkingCalendar
from .config import EngineConfig
from .core import CommittedObligation, FeasibilityResult, TaskDefinition
from .dependencies import order_work_items
from .diagnostics import Diagnostics
from .ledger import ResourceLedger
from .selector import CandidateSelector
from .validator import TaskInputValidator

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

logger = get_logger()


class FeasibilityService:
    """Evaluates whether one task can be delivered by its due date.

    This service coordinates:
    - TaskInputValidator (reject malformed input up front)
    - Dependency resolution (team processing order, cycle detection)
    - ResourceLedger (committed obligations per owner)
    - CandidateSelector over PlanBuilder (owner assignment search)
    - Diagnostics (why the selected plan is late)

    Every call builds its own ledger, builder and selector, so one service
    instance can evaluate tasks from several threads at once.
    """

    def __init__(self, config: EngineConfig | None = None):
        """Initialize the service.

        Args:
            config: Calendar and capacity configuration (defaults apply if omitted)
        """
        self.config = config or EngineConfig()
        self.calendar = WorkingCalendar(self.config.calendar)
        self.validator = TaskInputValidator(self.calendar)

    def evaluate(
        self,
        task: TaskDefinition,
        obligations: "Iterable[CommittedObligation]" = (),
    ) -> FeasibilityResult:
        """Evaluate a task against the committed obligations of its owners.

        Args:
            task: Task dates, per-team work and owner candidates
            obligations: Existing obligations of the candidate owners

        Returns:
            FeasibilityResult with the selected plan and, if infeasible, the
            blocking reason and a recommendation

        Raises:
            InputError: If the task input is malformed
            CircularDependencyError: If team dependencies form a cycle
            MissingReferenceError: If a team depends on a team outside the task
        """
        self.validator.validate(task)
        local_obligations = [self._localize(o) for o in obligations]
        self.validator.validate_obligations(local_obligations)

        order = order_work_items(task.work_items)
        start = self.calendar.to_local(task.start)
        cutoff = self.calendar.cutoff_for(task.due)
        logger.changes(
            f"Evaluating {task.task_id or 'task'}: {len(order)} teams, "
            f"start {start.isoformat()}, cutoff {cutoff.isoformat()}"
        )

        ledger = ResourceLedger(local_obligations, self.config.capacity)
        builder = PlanBuilder(
            self.calendar, ledger, task.work_items, order, task.candidates, start
        )
        selection = CandidateSelector(builder, task.candidates, order, cutoff).select()
        preferred_plan = selection.all_preferred_plan
        fallback_chosen = preferred_plan is not None and preferred_plan is not selection.plan
        if fallback_chosen and changes_enabled():
            assert preferred_plan is not None
            logger.changes(
                f"Fallback owners used; preferred owners would finish "
                f"{_fmt(preferred_plan.completion)}"
            )

        blocking_reason = None
        recommendation = None
        if not selection.feasible:
            blocking_reason, recommendation = Diagnostics(
                self.calendar, ledger, start, cutoff
            ).diagnose(selection.plan)

        return FeasibilityResult(
            feasible=selection.feasible,
            estimated_delivery=selection.plan.completion,
            cutoff=cutoff,
            plan=selection.plan,
            blocking_reason=blocking_reason,
            recommendation=recommendation,
            candidates_evaluated=selection.candidates_evaluated,
            task_id=task.task_id,
        )

    def _localize(self, obligation: CommittedObligation) -> CommittedObligation:
        return replace(
            obligation,
            window_start=self.calendar.to_local(obligation.window_start),
            window_end=self.calendar.to_local(obligation.window_end),
        )


def evaluate(
    task: TaskDefinition,
    obligations: "Iterable[CommittedObligation]" = (),
    config: EngineConfig | None = None,
) -> FeasibilityResult:
    """Evaluate one task with a fresh service (see ``FeasibilityService``)."""
    return FeasibilityService(config).evaluate(task, obligations)


def _fmt(instant: "datetime | None") -> str:
    return instant.isoformat() if instant else "n/a"
