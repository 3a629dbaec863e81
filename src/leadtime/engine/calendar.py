"""Business-hours calendar arithmetic.

All UTC offset handling for the engine lives here. Other components only see
local, timezone-aware datetimes produced by ``WorkingCalendar.to_local``.
"""

from datetime import date, datetime, time, timedelta, timezone

from leadtime.exceptions import InputError
from leadtime.logger import get_logger

from .config import CalendarConfig

logger = get_logger()

ZERO = timedelta(0)


class WorkingCalendar:
    """Fixed-offset business calendar with weekday-only working hours.

    A working day runs from ``day_start_hour`` to ``day_end_hour`` local time.
    Weekend days and configured holidays have no working time at all.
    """

    def __init__(self, config: CalendarConfig | None = None) -> None:
        self.config = config or CalendarConfig()
        self.tz = self.config.tzinfo
        self._day_start = timedelta(hours=self.config.day_start_hour)
        self._day_end = timedelta(hours=self.config.day_end_hour)
        self._holidays = frozenset(self.config.holidays)

    # -- offset conversion -------------------------------------------------

    def to_local(self, instant: datetime | date) -> datetime:
        """Convert an instant to calendar-local time.

        Naive datetimes are taken as local wall-clock time. A plain date is
        local midnight of that day.
        """
        if not isinstance(instant, datetime):
            return datetime.combine(instant, time(0), tzinfo=self.tz)
        if instant.tzinfo is None:
            return instant.replace(tzinfo=self.tz)
        return instant.astimezone(self.tz)

    def to_utc(self, instant: datetime | date) -> datetime:
        """Convert an instant (local if naive) to UTC."""
        return self.to_local(instant).astimezone(timezone.utc)

    # -- day classification ------------------------------------------------

    def is_weekend(self, local: datetime | date) -> bool:
        """True for the configured non-working weekdays."""
        return local.weekday() in self.config.weekend_days

    def is_working_day(self, local: datetime | date) -> bool:
        """True if the day has business hours (not a weekend or holiday)."""
        day = local.date() if isinstance(local, datetime) else local
        return not self.is_weekend(day) and day not in self._holidays

    def _midnight(self, local: datetime) -> datetime:
        return local.replace(hour=0, minute=0, second=0, microsecond=0)

    def start_of_workday(self, local: datetime) -> datetime:
        """Business start on the same calendar day."""
        return self._midnight(local) + self._day_start

    def end_of_workday(self, local: datetime) -> datetime:
        """Business end on the same calendar day, whatever the time of day."""
        return self._midnight(self.to_local(local)) + self._day_end

    def next_work_start(self, local: datetime) -> datetime:
        """Business start of the first working day after ``local``'s day."""
        day = self._midnight(local) + timedelta(days=1)
        while not self.is_working_day(day):
            day += timedelta(days=1)
        return day + self._day_start

    # -- arithmetic --------------------------------------------------------

    def snap_to_work_start(self, local: datetime) -> datetime:
        """Move ``local`` forward to the next instant inside business hours.

        Instants already inside business hours are returned unchanged.
        """
        local = self.to_local(local)
        if not self.is_working_day(local):
            return self.next_work_start(local)
        day_start = self.start_of_workday(local)
        if local < day_start:
            return day_start
        if local >= self.end_of_workday(local):
            return self.next_work_start(local)
        return local

    def advance_working_hours(self, local: datetime, hours: float) -> datetime:
        """Advance ``local`` by ``hours`` of working time.

        Work that exactly fills the rest of a business day finishes at the
        next working day's start, which is the same point in working time as
        that day's business end.
        """
        if hours < 0:
            raise InputError(f"Cannot advance by negative working hours: {hours}")

        current = self.snap_to_work_start(local)
        remaining = timedelta(hours=hours)

        while remaining > ZERO:
            available = self.end_of_workday(current) - current
            if remaining < available:
                return current + remaining
            remaining -= available
            current = self.next_work_start(current)

        return current

    def working_hours_between(self, start: datetime, end: datetime) -> float:
        """Working hours inside business windows between two instants."""
        start = self.to_local(start)
        end = self.to_local(end)
        if end <= start:
            return 0.0

        total = ZERO
        current = self.snap_to_work_start(start)
        while current < end:
            day_end = self.end_of_workday(current)
            total += min(day_end, end) - current
            current = self.next_work_start(current)
        return total / timedelta(hours=1)

    def cutoff_for(self, due: datetime | date) -> datetime:
        """Feasibility cutoff: business end on the due date."""
        cutoff = self.end_of_workday(self.to_local(due))
        logger.debug(f"Due {due} -> cutoff {cutoff.isoformat()}")
        return cutoff

    def latest_completion(self, cutoff: datetime) -> datetime:
        """Latest ``advance_working_hours`` result that still finishes by ``cutoff``.

        Work ending at business end is reported at the next working day's
        start, so completions are compared against the cutoff in that form.
        """
        return self.snap_to_work_start(cutoff)
