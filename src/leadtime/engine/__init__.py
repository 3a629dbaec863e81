"""Feasibility engine - can a task be delivered by its due date?

This package evaluates one task, split into per-team work items with
dependencies and ranked owners, against the committed obligations of those
owners:
- WorkingCalendar: business-hours arithmetic in a fixed UTC offset
- resolve_order: dependency ordering with cycle detection
- ResourceLedger: when is an owner next free, what blocks them
- PlanBuilder: timeline for one owner assignment
- CandidateSelector: owner assignment search and plan selection
- Diagnostics: why the selected plan misses the cutoff

Main entry points:
- FeasibilityService / evaluate(): run a complete evaluation
"""

from .builder import PlanBuilder
from .calendar import WorkingCalendar
from .config import CalendarConfig, CapacityPolicy, EngineConfig
from .core import (
    BlockingReason,
    BlockingType,
    CommittedObligation,
    ExecutionTimelineEntry,
    FeasibilityResult,
    OwnerCandidateList,
    Plan,
    Recommendation,
    RecommendedAction,
    TaskDefinition,
    WorkItem,
)
from .dependencies import order_work_items, resolve_order
from .diagnostics import Diagnostics, critical_chain, diagnose
from .ledger import ResourceLedger
from .selector import CandidateSelector, Selection
from .service import FeasibilityService, evaluate
from .validator import TaskInputValidator

__all__ = [
    # Core dataclasses
    "WorkItem",
    "OwnerCandidateList",
    "CommittedObligation",
    "TaskDefinition",
    "ExecutionTimelineEntry",
    "Plan",
    "BlockingType",
    "BlockingReason",
    "RecommendedAction",
    "Recommendation",
    "FeasibilityResult",
    # Configuration
    "CalendarConfig",
    "CapacityPolicy",
    "EngineConfig",
    # Components
    "WorkingCalendar",
    "resolve_order",
    "order_work_items",
    "ResourceLedger",
    "PlanBuilder",
    "CandidateSelector",
    "Selection",
    "Diagnostics",
    "critical_chain",
    "diagnose",
    "TaskInputValidator",
    # High-level service
    "FeasibilityService",
    "evaluate",
]
