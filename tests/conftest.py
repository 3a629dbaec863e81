"""Pytest configuration and shared builders for leadtime tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from leadtime.engine import (
    CommittedObligation,
    OwnerCandidateList,
    TaskDefinition,
    WorkingCalendar,
    WorkItem,
)
from leadtime.logger import reset_logger

# Default calendar offset (UTC+05:30)
IST = timezone(timedelta(hours=5, minutes=30))

# Reference week: Monday 2025-01-06 .. Sunday 2025-01-12
MON, TUE, WED, THU, FRI, SAT, SUN = 6, 7, 8, 9, 10, 11, 12
NEXT_MON, NEXT_TUE = 13, 14


def at(day: int, hour: int = 9, minute: int = 0) -> datetime:
    """Local instant in January 2025 (calendar offset)."""
    return datetime(2025, 1, day, hour, minute, tzinfo=IST)


def team(
    name: str,
    effort: float,
    *depends_on: str,
) -> WorkItem:
    """Create a WorkItem."""
    return WorkItem(team=name, effort_hours=effort, depends_on=tuple(depends_on))


def owners(preferred: str | None, *fallbacks: str) -> OwnerCandidateList:
    """Create an OwnerCandidateList."""
    return OwnerCandidateList(preferred=preferred, fallbacks=tuple(fallbacks))


def busy(  # noqa: PLR0913 - test builder
    owner_id: str,
    start: datetime,
    end: datetime,
    *,
    task_id: str = "T-OTHER",
    title: str | None = "Other work",
    priority: str | None = "High",
    status: str = "committed",
    counts: bool = True,
) -> CommittedObligation:
    """Create a CommittedObligation."""
    return CommittedObligation(
        owner_id=owner_id,
        window_start=start,
        window_end=end,
        task_id=task_id,
        title=title,
        priority=priority,
        status=status,
        counts_toward_capacity=counts,
    )


def make_task(
    items: list[WorkItem],
    candidates: dict[str, OwnerCandidateList],
    *,
    start: datetime | None = None,
    due: datetime | None = None,
    task_id: str | None = "T-1",
) -> TaskDefinition:
    """Task starting Monday 09:00 and due Friday of the reference week."""
    return TaskDefinition(
        start=start or at(MON, 9),
        due=due or at(FRI, 12),
        work_items={item.team: item for item in items},
        candidates=candidates,
        task_id=task_id,
        title="Test task",
    )


@pytest.fixture
def calendar() -> WorkingCalendar:
    """Default calendar: UTC+05:30, 09:00-17:00, Saturday/Sunday off."""
    return WorkingCalendar()


@pytest.fixture(autouse=True)
def clean_logger() -> None:
    """Reset the leadtime logger between tests."""
    reset_logger()
