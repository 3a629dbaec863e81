"""YAML/JSON loading for task documents and obligation snapshots."""

from __future__ import annotations

from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import ValidationError as PydanticValidationError

from .engine.core import CommittedObligation, OwnerCandidateList, TaskDefinition, WorkItem
from .exceptions import InputError, ParseError
from .logger import get_logger
from .schemas import ModuleSchema, ObligationSchema, TaskFileSchema, TeamWorkSchema

logger = get_logger()


def _read_yaml(path: Path | str) -> Any:
    path = Path(path)
    if not path.exists():
        raise ParseError(f"File not found: {path}")
    try:
        with path.open(encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ParseError(f"Failed to parse YAML: {e}") from e


def resolve_candidates(
    team: str, work: TeamWorkSchema, module: ModuleSchema | None
) -> OwnerCandidateList:
    """Owner candidates for a team.

    Explicit ``owners`` on the team win; otherwise the module's primary role
    is the preferred owner and its secondary roles are the fallbacks.
    """
    if work.owners is not None:
        return OwnerCandidateList(
            preferred=work.owners.preferred, fallbacks=tuple(work.owners.fallbacks)
        )
    if module is not None:
        return OwnerCandidateList(
            preferred=module.primary_roles.get(team),
            fallbacks=tuple(module.secondary_roles.get(team, [])),
        )
    return OwnerCandidateList()


def to_obligation(schema: ObligationSchema) -> CommittedObligation:
    """Convert a validated obligation record to the engine's dataclass."""
    return CommittedObligation(
        owner_id=schema.owner_id,
        window_start=schema.start,
        window_end=schema.end,
        task_id=schema.task_id,
        title=schema.title,
        priority=schema.priority,
        status=schema.status,
        counts_toward_capacity=schema.counts_toward_capacity,
    )


class TaskFileParser:
    """Parser for task documents.

    A document holds the task dates, per-team work, owner candidates (inline
    or through module role maps) and optionally the obligation snapshot.
    """

    def parse_file(self, file_path: Path | str) -> tuple[TaskDefinition, list[CommittedObligation]]:
        """Parse a YAML or JSON task file."""
        data = _read_yaml(file_path)
        if not isinstance(data, dict):
            raise ParseError("Task file must contain a mapping at the root level")
        return self.parse_data(cast(dict[str, Any], data))

    def parse_data(
        self, data: dict[str, Any]
    ) -> tuple[TaskDefinition, list[CommittedObligation]]:
        """Parse already-loaded task data."""
        try:
            schema = TaskFileSchema.model_validate(data)
        except PydanticValidationError as e:
            raise InputError(f"Invalid task document: {e}") from e

        teams = dict(schema.teams)
        if schema.teams_involved is not None:
            for team in schema.teams_involved:
                if team not in teams:
                    logger.checks(f"Team '{team}' is involved but has no work specified, skipping")
            teams = {team: work for team, work in teams.items() if team in schema.teams_involved}

        work_items = {
            team: WorkItem(
                team=team, effort_hours=work.effort_hours, depends_on=tuple(work.depends_on)
            )
            for team, work in teams.items()
        }
        candidates = {
            team: resolve_candidates(team, work, schema.module) for team, work in teams.items()
        }

        task = TaskDefinition(
            start=schema.task.start_date,  # type: ignore[arg-type] - checked by the validator
            due=schema.task.required_by,  # type: ignore[arg-type]
            work_items=work_items,
            candidates=candidates,
            task_id=schema.task.id,
            title=schema.task.title,
        )
        obligations = [to_obligation(o) for o in schema.obligations]
        return task, obligations


def load_obligations(path: Path | str) -> list[CommittedObligation]:
    """Load an obligation snapshot: a list, or a mapping with ``obligations``."""
    data = _read_yaml(path)
    if data is None:
        return []
    if isinstance(data, dict):
        data = cast(dict[str, Any], data).get("obligations", [])
    if not isinstance(data, list):
        raise ParseError("Obligations file must contain a list of obligations")

    obligations: list[CommittedObligation] = []
    for index, record in enumerate(cast(list[Any], data)):
        try:
            obligations.append(to_obligation(ObligationSchema.model_validate(record)))
        except PydanticValidationError as e:
            raise InputError(f"Invalid obligation #{index + 1}: {e}") from e
    return obligations


def load_task(
    path: Path | str, obligations_path: Path | str | None = None
) -> tuple[TaskDefinition, list[CommittedObligation]]:
    """Load a task file plus an optional separate obligations file."""
    task, obligations = TaskFileParser().parse_file(path)
    if obligations_path is not None:
        obligations = obligations + load_obligations(obligations_path)
    return task, obligations
