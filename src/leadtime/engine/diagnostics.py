"""Root-cause diagnosis for plans that miss the cutoff."""

from datetime import datetime

from leadtime.logger import get_logger

from .calendar import WorkingCalendar
from .core import (
    BlockingReason,
    BlockingType,
    ExecutionTimelineEntry,
    Plan,
    Recommendation,
    RecommendedAction,
)
from .ledger import ResourceLedger

logger = get_logger()


def _fmt(instant: datetime) -> str:
    return instant.strftime("%a %Y-%m-%d %H:%M")


def critical_entry(plan: Plan) -> ExecutionTimelineEntry:
    """The entry that finishes last (first in plan order on ties)."""
    return max(plan.entries.values(), key=lambda entry: entry.end)


def critical_chain(plan: Plan, team: str) -> list[str]:
    """Teams whose completion determined ``team``'s start, upstream first.

    From ``team``, repeatedly step to the prerequisite that finished last.
    """
    chain = [team]
    entry = plan.entries[team]
    while entry.depends_on:
        previous = max(entry.depends_on, key=lambda dep: plan.entries[dep].end)
        chain.append(previous)
        entry = plan.entries[previous]
    chain.reverse()
    return chain


class Diagnostics:
    """Explains why a selected plan is infeasible.

    Causes are checked in priority order and exactly one is reported:
    missing ownership, a capacity conflict with a committed obligation, a
    dependency chain that runs too long, and finally work that simply does
    not fit before the cutoff.
    """

    def __init__(
        self,
        calendar: WorkingCalendar,
        ledger: ResourceLedger,
        task_start: datetime,
        cutoff: datetime,
    ) -> None:
        self.calendar = calendar
        self.ledger = ledger
        self.task_start = calendar.to_local(task_start)
        self.cutoff = cutoff
        self.deadline = calendar.latest_completion(cutoff)

    def diagnose(self, plan: Plan) -> tuple[BlockingReason, Recommendation]:
        """Classify the cause that keeps ``plan`` from meeting the cutoff."""
        result = (
            self._ownership_missing(plan)
            or self._capacity_conflict(plan)
            or self._dependency_overrun(plan)
            or self._schedule_overrun(plan)
        )
        reason, _ = result
        logger.changes(f"Blocking reason: {reason.type.value} - {reason.message}")
        return result

    def _ownership_missing(self, plan: Plan) -> tuple[BlockingReason, Recommendation] | None:
        teams = plan.unassigned_teams
        if not teams:
            return None
        names = ", ".join(teams)
        reason = BlockingReason(
            type=BlockingType.OWNERSHIP_MISSING,
            message=f"No owner is available for team(s): {names}",
            team=teams[0],
            details={"teams": teams},
        )
        recommendation = Recommendation(
            action=RecommendedAction.ASSIGN_OWNER,
            message=f"Assign a preferred or fallback owner for {names} in the module ownership",
        )
        return reason, recommendation

    def _capacity_conflict(self, plan: Plan) -> tuple[BlockingReason, Recommendation] | None:
        critical = critical_entry(plan)
        for team in reversed(critical_chain(plan, critical.team)):
            entry = plan.entries[team]
            if not entry.owner_bound:
                continue
            assert entry.owner_id is not None
            obligation = self.ledger.blocking_obligation(
                entry.owner_id, entry.dependency_ready, entry.end
            )
            if obligation is None:
                logger.checks(f"{team}: owner-bound but no committed obligation in window")
                continue

            origin = obligation.title or obligation.task_id or "another task"
            reason = BlockingReason(
                type=BlockingType.CAPACITY_CONFLICT,
                message=(
                    f"{entry.owner_id} ({team}) is committed to '{origin}' until "
                    f"{_fmt(obligation.window_end)}, so {team} cannot start before "
                    f"{_fmt(entry.start)} and finishes {_fmt(entry.end)}"
                ),
                team=team,
                owner_id=entry.owner_id,
                details={
                    "conflicting_task_id": obligation.task_id,
                    "conflicting_task_title": obligation.title,
                    "conflicting_task_priority": obligation.priority,
                    "conflict_start": obligation.window_start.isoformat(),
                    "conflict_end": obligation.window_end.isoformat(),
                    "planned_start": entry.start.isoformat(),
                    "planned_end": entry.end.isoformat(),
                },
            )
            recommendation = Recommendation(
                action=RecommendedAction.REPRIORITIZE_OR_EXTEND,
                message=(
                    f"Reprioritize '{origin}' for {entry.owner_id} or extend the due date "
                    f"past {_fmt(plan.completion or entry.end)}"
                ),
            )
            return reason, recommendation
        return None

    def _dependency_overrun(self, plan: Plan) -> tuple[BlockingReason, Recommendation] | None:
        critical = critical_entry(plan)
        chain = critical_chain(plan, critical.team)
        if len(chain) < 2:  # noqa: PLR2004 - a chain needs an upstream team
            return None

        # Prefer the most upstream team that could not even start before the cutoff
        overrun = next(
            (team for team in chain[1:] if plan.entries[team].dependency_ready > self.deadline),
            None,
        )
        if overrun is None:
            alone_end = self.calendar.advance_working_hours(
                self.task_start, critical.effort_hours
            )
            if alone_end > self.deadline:
                # Even without prerequisites this team misses the cutoff
                return None
            overrun = critical.team

        entry = plan.entries[overrun]
        upstream = chain[: chain.index(overrun)]
        reason = BlockingReason(
            type=BlockingType.DEPENDENCY_OVERRUN,
            message=(
                f"{overrun} waits for {' -> '.join(upstream)} until "
                f"{_fmt(entry.dependency_ready)}; the chain finishes {_fmt(critical.end)}"
            ),
            team=overrun,
            owner_id=entry.owner_id,
            details={
                "chain": chain,
                "dependency_ready": entry.dependency_ready.isoformat(),
                "upstream_exceeds_cutoff": entry.dependency_ready > self.deadline,
            },
        )
        recommendation = Recommendation(
            action=RecommendedAction.PARALLELIZE_DEPENDENCIES,
            message=(
                f"Parallelize work along {' -> '.join(chain)} or relax the dependencies "
                f"of {overrun}"
            ),
        )
        return reason, recommendation

    def _schedule_overrun(self, plan: Plan) -> tuple[BlockingReason, Recommendation]:
        critical = critical_entry(plan)
        available = self.calendar.working_hours_between(self.task_start, self.cutoff)
        shared_with = [
            entry.team
            for entry in plan.entries.values()
            if entry.owner_id == critical.owner_id and entry.team != critical.team
        ]
        message = (
            f"{critical.team} needs {critical.effort_hours:g}h of work but only "
            f"{available:g} working hours remain before the cutoff"
        )
        if shared_with:
            message += f" after {critical.owner_id} finishes {', '.join(shared_with)}"
        reason = BlockingReason(
            type=BlockingType.SCHEDULE_OVERRUN,
            message=message,
            team=critical.team,
            owner_id=critical.owner_id,
            details={
                "effort_hours": critical.effort_hours,
                "available_hours": available,
                "planned_end": critical.end.isoformat(),
                "owner_shared_with": shared_with,
            },
        )
        recommendation = Recommendation(
            action=RecommendedAction.EXTEND_DUE_DATE,
            message=f"Extend the due date to at least {_fmt(critical.end)}",
        )
        return reason, recommendation


def diagnose(
    plan: Plan,
    *,
    calendar: WorkingCalendar,
    ledger: ResourceLedger,
    task_start: datetime,
    cutoff: datetime,
) -> tuple[BlockingReason, Recommendation]:
    """Diagnose an infeasible plan (see ``Diagnostics``)."""
    return Diagnostics(calendar, ledger, task_start, cutoff).diagnose(plan)
