"""Dependency ordering for a task's teams."""

from collections.abc import Mapping, Sequence
from enum import Enum

from leadtime.exceptions import CircularDependencyError, MissingReferenceError
from leadtime.logger import get_logger

from .core import WorkItem

logger = get_logger()


class _Mark(Enum):
    VISITING = 1
    DONE = 2


def resolve_order(dependencies: Mapping[str, Sequence[str]]) -> list[str]:
    """Order teams so that every team comes after all of its prerequisites.

    Depth-first post-order over the teams in mapping order, visiting each
    team's prerequisites in the order they are listed. The result is the same
    for the same input.

    Args:
        dependencies: team -> prerequisite teams

    Returns:
        Teams in processing order

    Raises:
        CircularDependencyError: If prerequisites form a cycle (including a
            team that depends on itself)
        MissingReferenceError: If a prerequisite is not a team of the task
    """
    marks: dict[str, _Mark] = {}
    order: list[str] = []
    path: list[str] = []

    def visit(team: str) -> None:
        mark = marks.get(team)
        if mark is _Mark.DONE:
            return
        if mark is _Mark.VISITING:
            cycle = path[path.index(team) :] + [team]
            raise CircularDependencyError(cycle)

        marks[team] = _Mark.VISITING
        path.append(team)
        for prerequisite in dependencies[team]:
            if prerequisite not in dependencies:
                raise MissingReferenceError(
                    f"Team '{team}' depends on unknown team '{prerequisite}'"
                )
            visit(prerequisite)
        path.pop()
        marks[team] = _Mark.DONE
        order.append(team)

    for team in dependencies:
        visit(team)

    logger.debug(f"Dependency order: {' -> '.join(order)}")
    return order


def order_work_items(work_items: Mapping[str, WorkItem]) -> list[str]:
    """Resolve the processing order for a task's work items."""
    return resolve_order({team: item.depends_on for team, item in work_items.items()})
