"""Rendering of feasibility results."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import yaml

if TYPE_CHECKING:
    from datetime import datetime

    from .engine.core import FeasibilityResult, Plan


def _fmt(instant: datetime | None) -> str:
    return instant.strftime("%a %Y-%m-%d %H:%M") if instant else "-"


def format_plan(plan: Plan) -> list[str]:
    """One block of lines per team, in dependency order."""
    lines: list[str] = []
    for team, entry in plan.entries.items():
        owner = entry.owner_id or "(no owner)"
        role = "preferred" if entry.is_preferred_owner else "fallback"
        if entry.owner_id is None:
            role = "unassigned"
        lines.append(f"{team}")
        lines.append(f"  Owner:   {owner} ({role})")
        lines.append(f"  Effort:  {entry.effort_hours:g}h")
        lines.append(f"  Start:   {_fmt(entry.start)}")
        lines.append(f"  End:     {_fmt(entry.end)}")
        if entry.depends_on:
            lines.append(f"  After:   {', '.join(entry.depends_on)}")
        lines.append("")
    return lines


def format_text(result: FeasibilityResult) -> str:
    """Human-readable report of a feasibility result."""
    title = f"Feasibility for {result.task_id}" if result.task_id else "Feasibility"
    lines = [title, "=" * 80, ""]

    verdict = "FEASIBLE" if result.feasible else "NOT FEASIBLE"
    lines.append(f"Result:             {verdict}")
    lines.append(f"Estimated delivery: {_fmt(result.estimated_delivery)}")
    lines.append(f"Cutoff:             {_fmt(result.cutoff)}")
    lines.append(f"Candidates checked: {result.candidates_evaluated}")
    lines.append("")

    lines.extend(format_plan(result.plan))

    if result.blocking_reason:
        lines.append(f"Blocking reason ({result.blocking_reason.type.value}):")
        lines.append(f"  {result.blocking_reason.message}")
    if result.recommendation:
        lines.append(f"Recommendation ({result.recommendation.action.value}):")
        lines.append(f"  {result.recommendation.message}")

    return "\n".join(lines).rstrip() + "\n"


def format_json(result: FeasibilityResult) -> str:
    """JSON document of a feasibility result."""
    return json.dumps(result.to_dict(), indent=2) + "\n"


def format_yaml(result: FeasibilityResult) -> str:
    """YAML document of a feasibility result."""
    return yaml.safe_dump(result.to_dict(), default_flow_style=False, sort_keys=False)
