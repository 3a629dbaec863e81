"""Timeline construction for one owner assignment."""

from collections.abc import Mapping, Sequence
from datetime import datetime

from leadtime.logger import debug_enabled, get_logger

from .calendar import WorkingCalendar
from .core import ExecutionTimelineEntry, OwnerCandidateList, Plan, WorkItem
from .ledger import ResourceLedger

logger = get_logger()


class PlanBuilder:
    """Builds a dependency- and capacity-respecting plan per assignment.

    The builder holds everything that is shared between candidate plans of
    one evaluation; ``build`` itself keeps no state between calls.
    """

    def __init__(  # noqa: PLR0913 - shared inputs of one evaluation
        self,
        calendar: WorkingCalendar,
        ledger: ResourceLedger,
        work_items: Mapping[str, WorkItem],
        order: Sequence[str],
        candidates: Mapping[str, OwnerCandidateList],
        task_start: datetime,
    ) -> None:
        self.calendar = calendar
        self.ledger = ledger
        self.work_items = work_items
        self.order = list(order)
        self.candidates = candidates
        self.task_start = calendar.to_local(task_start)

    def build(self, assignment: Mapping[str, str | None]) -> Plan:
        """Compute start and end for every team under ``assignment``.

        Args:
            assignment: team -> owner id, or None for a team nobody can own

        Returns:
            Plan with one entry per team, in dependency order
        """
        entries: dict[str, ExecutionTimelineEntry] = {}
        # Owners already claimed earlier in this plan are busy until these times
        claimed_until: dict[str, datetime] = {}

        for team in self.order:
            item = self.work_items[team]
            owner = assignment.get(team)

            # Ready times are snapped to working instants
            if item.depends_on:
                latest = max(entries[dep].end for dep in item.depends_on)
            else:
                latest = self.task_start
            dependency_ready = self.calendar.snap_to_work_start(latest)

            if owner is not None:
                free_at = self.ledger.earliest_free(owner, self.task_start)
                if owner in claimed_until:
                    free_at = max(free_at, claimed_until[owner])
                owner_ready = self.calendar.snap_to_work_start(free_at)
            else:
                owner_ready = dependency_ready

            start = max(dependency_ready, owner_ready)
            if owner is not None:
                end = self.calendar.advance_working_hours(start, item.effort_hours)
                claimed_until[owner] = end
            else:
                end = start

            preferred = self.candidates.get(team, OwnerCandidateList()).preferred
            entries[team] = ExecutionTimelineEntry(
                team=team,
                owner_id=owner,
                start=start,
                end=end,
                effort_hours=item.effort_hours,
                depends_on=item.depends_on,
                is_preferred_owner=owner is not None and owner == preferred,
                dependency_ready=dependency_ready,
                owner_ready=owner_ready,
            )
            if debug_enabled():
                logger.debug(
                    f"  {team}: owner={owner or '-'} "
                    f"start={start.isoformat()} end={end.isoformat()}"
                )

        return Plan(entries=entries)
