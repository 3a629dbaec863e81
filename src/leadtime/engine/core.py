"""Core dataclasses for the feasibility engine."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


def _default_str_tuple() -> tuple[str, ...]:
    return ()


def _default_dict() -> dict[str, Any]:
    return {}


@dataclass(frozen=True)
class WorkItem:
    """One team's share of a task."""

    team: str
    effort_hours: float
    depends_on: tuple[str, ...] = field(default_factory=_default_str_tuple)


@dataclass(frozen=True)
class OwnerCandidateList:
    """Ranked owners for a team: one preferred, then fallbacks in order."""

    preferred: str | None = None
    fallbacks: tuple[str, ...] = field(default_factory=_default_str_tuple)

    @property
    def ordered(self) -> list[str]:
        """Preferred owner first, then fallbacks, without duplicates."""
        seen: set[str] = set()
        result: list[str] = []
        for owner in (self.preferred, *self.fallbacks):
            if owner and owner not in seen:
                seen.add(owner)
                result.append(owner)
        return result

    @property
    def is_empty(self) -> bool:
        """True if nobody can own the team's work."""
        return not self.ordered


@dataclass(frozen=True)
class CommittedObligation:
    """An existing claim on an owner's time.

    The origin fields (task id, title, priority) are only used to explain a
    capacity conflict.
    """

    owner_id: str
    window_start: datetime
    window_end: datetime
    task_id: str | None = None
    title: str | None = None
    priority: str | None = None
    status: str = "committed"
    counts_toward_capacity: bool = True

    def overlaps(self, start: datetime, end: datetime) -> bool:
        """Half-open interval overlap with ``[start, end)``."""
        return self.window_start < end and start < self.window_end

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary for reports."""
        return {
            "owner_id": self.owner_id,
            "task_id": self.task_id,
            "title": self.title,
            "priority": self.priority,
            "start": self.window_start.isoformat(),
            "end": self.window_end.isoformat(),
        }


@dataclass(frozen=True)
class TaskDefinition:
    """Everything needed to evaluate one task, resolved by the caller."""

    start: datetime
    due: datetime
    work_items: dict[str, WorkItem]
    candidates: dict[str, OwnerCandidateList]
    task_id: str | None = None
    title: str | None = None


@dataclass(frozen=True)
class ExecutionTimelineEntry:
    """Computed placement of one team's work within a plan."""

    team: str
    owner_id: str | None
    start: datetime
    end: datetime
    effort_hours: float
    depends_on: tuple[str, ...]
    is_preferred_owner: bool
    dependency_ready: datetime  # Working instant all prerequisites were done
    owner_ready: datetime  # Working instant the owner was free

    @property
    def is_assigned(self) -> bool:
        return self.owner_id is not None

    @property
    def owner_bound(self) -> bool:
        """True if owner availability, not prerequisites, set the start."""
        return self.owner_id is not None and self.owner_ready > self.dependency_ready

    def to_dict(self) -> dict[str, Any]:
        """Convert to the plan entry shape returned to callers."""
        return {
            "owner_id": self.owner_id,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "effort_hours": self.effort_hours,
            "depends_on": list(self.depends_on),
            "is_preferred_owner": self.is_preferred_owner,
        }


@dataclass(frozen=True)
class Plan:
    """A timeline for one concrete owner assignment."""

    entries: dict[str, ExecutionTimelineEntry]

    @property
    def completion(self) -> datetime | None:
        """Latest end across all entries (None for an empty plan)."""
        if not self.entries:
            return None
        return max(entry.end for entry in self.entries.values())

    @property
    def all_preferred(self) -> bool:
        return all(entry.is_preferred_owner for entry in self.entries.values())

    @property
    def preferred_count(self) -> int:
        return sum(1 for entry in self.entries.values() if entry.is_preferred_owner)

    @property
    def unassigned_teams(self) -> list[str]:
        return [team for team, entry in self.entries.items() if not entry.is_assigned]

    @property
    def assignment(self) -> dict[str, str | None]:
        return {team: entry.owner_id for team, entry in self.entries.items()}

    def meets(self, cutoff: datetime) -> bool:
        """True if every team is staffed and the plan completes by ``cutoff``."""
        completion = self.completion
        return completion is not None and not self.unassigned_teams and completion <= cutoff

    def to_dict(self) -> dict[str, Any]:
        return {team: entry.to_dict() for team, entry in self.entries.items()}


class BlockingType(str, Enum):
    """Why no candidate plan met the cutoff."""

    OWNERSHIP_MISSING = "OWNERSHIP_MISSING"
    CAPACITY_CONFLICT = "CAPACITY_CONFLICT"
    DEPENDENCY_OVERRUN = "DEPENDENCY_OVERRUN"
    SCHEDULE_OVERRUN = "SCHEDULE_OVERRUN"


class RecommendedAction(str, Enum):
    """Remedial action suggested alongside a blocking reason."""

    ASSIGN_OWNER = "ASSIGN_OWNER"
    REPRIORITIZE_OR_EXTEND = "REPRIORITIZE_OR_EXTEND"
    PARALLELIZE_DEPENDENCIES = "PARALLELIZE_DEPENDENCIES"
    EXTEND_DUE_DATE = "EXTEND_DUE_DATE"


@dataclass(frozen=True)
class BlockingReason:
    """Structured diagnosis of an infeasible evaluation.

    ``details`` carries the cause-specific fields (offending teams, owner,
    conflicting obligation, dependency chain) so callers can render an
    explanation without recomputing anything.
    """

    type: BlockingType
    message: str
    team: str | None = None
    owner_id: str | None = None
    details: dict[str, Any] = field(default_factory=_default_dict)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"type": self.type.value, "message": self.message}
        if self.team is not None:
            result["team"] = self.team
        if self.owner_id is not None:
            result["owner_id"] = self.owner_id
        result.update(self.details)
        return result


@dataclass(frozen=True)
class Recommendation:
    """Suggested remedy for a blocking reason."""

    action: RecommendedAction
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"action": self.action.value, "message": self.message}


@dataclass(frozen=True)
class FeasibilityResult:
    """Outcome of one evaluation: the chosen plan and, if late, why."""

    feasible: bool
    estimated_delivery: datetime | None
    cutoff: datetime
    plan: Plan
    blocking_reason: BlockingReason | None = None
    recommendation: Recommendation | None = None
    candidates_evaluated: int = 0
    task_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to plain data suitable for JSON or YAML output."""
        return {
            "task_id": self.task_id,
            "feasible": self.feasible,
            "estimated_delivery": (
                self.estimated_delivery.isoformat() if self.estimated_delivery else None
            ),
            "cutoff": self.cutoff.isoformat(),
            "plan": self.plan.to_dict(),
            "blocking_reason": self.blocking_reason.to_dict() if self.blocking_reason else None,
            "recommendation": self.recommendation.to_dict() if self.recommendation else None,
            "candidates_evaluated": self.candidates_evaluated,
        }
