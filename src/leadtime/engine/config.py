"""Configuration classes for the feasibility engine."""

import re
from datetime import date, timedelta, timezone

from pydantic import BaseModel, Field, field_validator, model_validator

DAYS_PER_WEEK = 7
HOURS_PER_DAY = 24

_OFFSET_RE = re.compile(r"^(?:UTC)?([+-])(\d{1,2}):?(\d{2})$")


def parse_utc_offset(offset: str) -> timedelta:
    """Parse an offset such as "+05:30", "-0800" or "UTC+05:30"."""
    if offset.strip().upper() in ("Z", "UTC", "+00:00"):
        return timedelta(0)
    match = _OFFSET_RE.match(offset.strip())
    if not match:
        raise ValueError(f"Invalid UTC offset '{offset}', expected e.g. '+05:30'")
    sign, hours, minutes = match.groups()
    delta = timedelta(hours=int(hours), minutes=int(minutes))
    if delta >= timedelta(hours=HOURS_PER_DAY):
        raise ValueError(f"UTC offset out of range: '{offset}'")
    return -delta if sign == "-" else delta


class CalendarConfig(BaseModel):
    """Business calendar: fixed UTC offset, daily hours and non-working days."""

    utc_offset: str = "+05:30"
    day_start_hour: int = 9
    day_end_hour: int = 17
    weekend_days: list[int] = Field(default_factory=lambda: [5, 6])  # Mon=0 .. Sun=6
    holidays: list[date] = Field(default_factory=list[date])

    @field_validator("utc_offset")
    @classmethod
    def validate_offset(cls, v: str) -> str:
        """Reject offsets that cannot be parsed."""
        parse_utc_offset(v)
        return v

    @field_validator("weekend_days")
    @classmethod
    def validate_weekend_days(cls, v: list[int]) -> list[int]:
        """Weekdays are numbered 0 (Monday) to 6 (Sunday)."""
        for day in v:
            if not 0 <= day < DAYS_PER_WEEK:
                raise ValueError(f"weekend day {day} out of range 0-6")
        if len(set(v)) >= DAYS_PER_WEEK:
            raise ValueError("calendar must have at least one working weekday")
        return sorted(set(v))

    @model_validator(mode="after")
    def validate_hours(self) -> "CalendarConfig":
        """Ensure the business day is a non-empty window inside one calendar day."""
        if not 0 <= self.day_start_hour < self.day_end_hour <= HOURS_PER_DAY:
            raise ValueError(
                f"business hours must satisfy 0 <= start < end <= 24, "
                f"got {self.day_start_hour}-{self.day_end_hour}"
            )
        return self

    @property
    def tzinfo(self) -> timezone:
        """Fixed-offset timezone for the calendar."""
        return timezone(parse_utc_offset(self.utc_offset))

    @property
    def hours_per_day(self) -> int:
        """Working hours in one business day."""
        return self.day_end_hour - self.day_start_hour


class CapacityPolicy(BaseModel):
    """Which committed obligations count against an owner's capacity.

    An obligation blocks only if its status is one of ``blocking_statuses``
    and, when ``require_counts_toward_capacity`` is set, it is flagged as
    counting toward capacity (tasks put on hold keep their assignments but
    stop counting).
    """

    blocking_statuses: list[str] = Field(default_factory=lambda: ["committed"])
    require_counts_toward_capacity: bool = True


class EngineConfig(BaseModel):
    """Configuration for one feasibility evaluation."""

    calendar: CalendarConfig = CalendarConfig()
    capacity: CapacityPolicy = CapacityPolicy()
