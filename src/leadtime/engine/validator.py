"""Input validation for feasibility evaluation."""

import math
from datetime import time
from typing import Any

from leadtime.exceptions import InputError
from leadtime.logger import get_logger

from .calendar import WorkingCalendar
from .core import CommittedObligation, TaskDefinition

logger = get_logger()


class TaskInputValidator:
    """Rejects malformed task input before any scheduling happens.

    Nothing is defaulted silently: missing dates, an empty team map, effort
    values that are not finite non-negative numbers and a due date before the
    start date all raise ``InputError``.
    """

    def __init__(self, calendar: WorkingCalendar | None = None) -> None:
        self.calendar = calendar or WorkingCalendar()

    def parse_effort(self, team: str, value: Any) -> float:
        """Validate an effort value, returning it as hours."""
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InputError(f"Team '{team}' effort_hours must be a number, got {value!r}")
        effort = float(value)
        if not math.isfinite(effort):
            raise InputError(f"Team '{team}' effort_hours must be finite, got {value!r}")
        if effort < 0:
            raise InputError(f"Team '{team}' effort_hours cannot be negative, got {value!r}")
        return effort

    def validate(self, task: TaskDefinition) -> None:
        """Validate a task definition.

        Raises:
            InputError: If the task cannot be evaluated as given
        """
        label = f"Task '{task.task_id}'" if task.task_id else "Task"

        if task.start is None:
            raise InputError(f"{label} is missing a start date")
        if task.due is None:
            raise InputError(f"{label} is missing a due date")
        start = self.calendar.to_local(task.start)
        due = self.calendar.to_local(task.due)
        # A due at local midnight names a whole day
        if due.date() < start.date() or (due.time() != time(0) and due < start):
            raise InputError(
                f"{label} due {due.isoformat()} is before start {start.isoformat()}"
            )

        if not task.work_items:
            raise InputError(f"{label} has no team work to evaluate")

        for team, item in task.work_items.items():
            if item.team != team:
                raise InputError(f"Work item keyed '{team}' belongs to team '{item.team}'")
            self.parse_effort(team, item.effort_hours)

        for team in task.candidates:
            if team not in task.work_items:
                logger.debug(f"Ignoring owner candidates for '{team}' (no work for this team)")

    def validate_obligations(self, obligations: list[CommittedObligation]) -> None:
        """Reject obligations whose window ends before it starts."""
        for obligation in obligations:
            if obligation.window_end < obligation.window_start:
                raise InputError(
                    f"Obligation {obligation.task_id or '?'} for {obligation.owner_id} "
                    f"ends before it starts"
                )
