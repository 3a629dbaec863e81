"""Pydantic schemas for task and obligation documents."""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator


def coerce_instant(v: Any) -> datetime | None:
    """Normalise a date, datetime or ISO string to a datetime.

    Plain dates become naive midnight, which the calendar reads as local
    wall-clock time.
    """
    if v is None or isinstance(v, datetime):
        return v
    if isinstance(v, date):
        return datetime.combine(v, time(0))
    if isinstance(v, str):
        text = v.strip()
        if not text:
            return None
        try:
            return datetime.fromisoformat(text)
        except ValueError as e:
            raise ValueError(f"invalid date or datetime '{v}'") from e
    raise ValueError(f"expected a date or datetime, got {type(v).__name__}")


def _ensure_str_list(v: Any) -> list[str]:
    if v is None:
        return []
    if isinstance(v, list):
        return [str(item) for item in v]  # type: ignore[misc]
    return [str(v)]


class OwnersSchema(BaseModel):
    """Explicit owner candidates for one team."""

    preferred: str | None = None
    fallbacks: list[str] = Field(default_factory=list)

    @field_validator("fallbacks", mode="before")
    @classmethod
    def ensure_list(cls, v: Any) -> list[str]:
        """Accept a single owner as well as a list."""
        return _ensure_str_list(v)


class TeamWorkSchema(BaseModel):
    """One team's work on the task."""

    effort_hours: float
    depends_on: list[str] = Field(default_factory=list)
    owners: OwnersSchema | None = None

    @field_validator("depends_on", mode="before")
    @classmethod
    def ensure_list(cls, v: Any) -> list[str]:
        """Accept a single prerequisite as well as a list."""
        return _ensure_str_list(v)


class ModuleSchema(BaseModel):
    """Module ownership: a primary owner and secondary owners per team."""

    id: str | None = None
    primary_roles: dict[str, str] = Field(
        default_factory=dict, validation_alias=AliasChoices("primary_roles", "primary_roles_map")
    )
    secondary_roles: dict[str, list[str]] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("secondary_roles", "secondary_roles_map"),
    )

    @field_validator("secondary_roles", mode="before")
    @classmethod
    def ensure_lists(cls, v: Any) -> dict[str, list[str]]:
        """Accept a single secondary owner per team as well as a list."""
        if not isinstance(v, dict):
            return v
        return {str(team): _ensure_str_list(owners) for team, owners in v.items()}  # type: ignore[misc]


class TaskMetaSchema(BaseModel):
    """Task identity and dates."""

    id: str | None = None
    title: str | None = None
    start_date: datetime | None = None
    required_by: datetime | None = Field(
        default=None, validation_alias=AliasChoices("required_by", "due_date")
    )

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str | None:
        """Numeric ids are kept as strings."""
        return None if v is None else str(v)

    @field_validator("start_date", "required_by", mode="before")
    @classmethod
    def coerce_dates(cls, v: Any) -> datetime | None:
        """Accept dates, datetimes and ISO strings."""
        return coerce_instant(v)


class ObligationSchema(BaseModel):
    """A committed claim on an owner's time."""

    owner_id: str = Field(validation_alias=AliasChoices("owner_id", "member_id"))
    start: datetime = Field(validation_alias=AliasChoices("start", "start_date"))
    end: datetime = Field(validation_alias=AliasChoices("end", "end_date"))
    task_id: str | None = None
    title: str | None = None
    priority: str | None = None
    status: str = "committed"
    counts_toward_capacity: bool = True

    @field_validator("owner_id", "task_id", "priority", mode="before")
    @classmethod
    def coerce_str(cls, v: Any) -> str | None:
        """Numeric ids and priorities are kept as strings."""
        return None if v is None else str(v)

    @field_validator("start", "end", mode="before")
    @classmethod
    def coerce_dates(cls, v: Any) -> datetime | None:
        """Accept dates, datetimes and ISO strings."""
        return coerce_instant(v)


class TaskFileSchema(BaseModel):
    """Schema for a complete task document."""

    task: TaskMetaSchema = Field(default_factory=TaskMetaSchema)
    module: ModuleSchema | None = None
    teams_involved: list[str] | None = None
    teams: dict[str, TeamWorkSchema] = Field(
        default_factory=dict, validation_alias=AliasChoices("teams", "team_work")
    )
    obligations: list[ObligationSchema] = Field(default_factory=list)
