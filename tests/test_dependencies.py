"""Tests for team dependency ordering."""

import pytest

from leadtime.engine import order_work_items, resolve_order
from leadtime.exceptions import CircularDependencyError, InputError, MissingReferenceError
from tests.conftest import team


def test_independent_teams_keep_input_order():
    """Teams without prerequisites are processed in the order given."""
    assert resolve_order({"Backend": [], "Frontend": [], "QA": []}) == [
        "Backend",
        "Frontend",
        "QA",
    ]


def test_prerequisite_comes_first():
    """A team listed before its prerequisite is still processed after it."""
    assert resolve_order({"QA": ["Backend"], "Backend": []}) == ["Backend", "QA"]


def test_diamond_is_deterministic():
    """Diamond dependencies resolve the same way every time."""
    deps = {"D": ["B", "C"], "B": ["A"], "C": ["A"], "A": []}
    first = resolve_order(deps)
    assert first == ["A", "B", "C", "D"]
    assert resolve_order(deps) == first


def test_every_team_follows_its_prerequisites():
    """Each team's position is after all of its prerequisites."""
    deps = {
        "Release": ["QA", "Docs"],
        "QA": ["Backend", "Frontend"],
        "Frontend": ["Design"],
        "Backend": ["Design"],
        "Docs": [],
        "Design": [],
    }
    order = resolve_order(deps)
    position = {name: index for index, name in enumerate(order)}

    assert sorted(order) == sorted(deps)
    for name, prerequisites in deps.items():
        for prerequisite in prerequisites:
            assert position[prerequisite] < position[name]


def test_empty_mapping():
    """No teams resolve to an empty order."""
    assert resolve_order({}) == []


def test_cycle_detected():
    """Mutual dependencies raise an error naming the cycle."""
    with pytest.raises(CircularDependencyError) as exc_info:
        resolve_order({"A": ["B"], "B": ["A"]})

    assert exc_info.value.cycle == ["A", "B", "A"]
    assert "A -> B -> A" in str(exc_info.value)


def test_longer_cycle_detected():
    """A cycle through several teams is reported from where it closes."""
    with pytest.raises(CircularDependencyError) as exc_info:
        resolve_order({"Start": ["A"], "A": ["B"], "B": ["C"], "C": ["A"]})

    assert exc_info.value.cycle == ["A", "B", "C", "A"]


def test_self_dependency_is_a_cycle():
    """A team depending on itself is a cycle of one."""
    with pytest.raises(CircularDependencyError) as exc_info:
        resolve_order({"A": ["A"]})

    assert exc_info.value.cycle == ["A", "A"]


def test_unknown_prerequisite():
    """Depending on a team outside the task is an error."""
    with pytest.raises(MissingReferenceError, match="Infra"):
        resolve_order({"Backend": ["Infra"]})


def test_order_work_items():
    """Work items are ordered by their depends_on."""
    items = {
        "QA": team("QA", 8, "Backend"),
        "Backend": team("Backend", 16),
    }
    assert order_work_items(items) == ["Backend", "QA"]


def test_unknown_prerequisite_is_input_error():
    """Callers catching InputError also see unknown prerequisites."""
    with pytest.raises(InputError):
        resolve_order({"QA": ["Backend"]})
