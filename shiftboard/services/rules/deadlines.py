"""
Submission window: is a week still open for employees to submit?

Two ways to derive the deadline, behind one interface:
    AutoDeadline      fixed offset from the week start (default: Tuesday 12:00)
    ExplicitDeadline  manager-set deadline per week, open when none is set
"""

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Callable, Optional, Protocol


class SubmissionWindow(Protocol):
    def deadline_for(self, week_start: date) -> Optional[datetime]:
        ...

    def is_submission_open(self, week_start: date, now: datetime) -> bool:
        ...


def as_aware(value: datetime, tz: tzinfo = timezone.utc) -> datetime:
    """Treat naive datetimes (e.g. read back from SQLite) as being in `tz`."""
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value


def _open_before(deadline: Optional[datetime], now: datetime) -> bool:
    if deadline is None:
        return True
    return as_aware(now) <= as_aware(deadline)


class AutoDeadline:
    def __init__(self, offset_days: int = 2, hour: int = 12, tz: tzinfo = timezone.utc):
        self.offset_days = offset_days
        self.hour = hour
        self.tz = tz

    def deadline_for(self, week_start: date) -> datetime:
        day = week_start + timedelta(days=self.offset_days)
        return datetime.combine(day, time(self.hour, 0), tzinfo=self.tz)

    def is_submission_open(self, week_start: date, now: datetime) -> bool:
        return _open_before(self.deadline_for(week_start), as_aware(now, self.tz))


class ExplicitDeadline:
    def __init__(self, lookup: Callable[[date], Optional[datetime]], tz: tzinfo = timezone.utc):
        self.lookup = lookup
        self.tz = tz

    def deadline_for(self, week_start: date) -> Optional[datetime]:
        deadline = self.lookup(week_start)
        return as_aware(deadline, self.tz) if deadline is not None else None

    def is_submission_open(self, week_start: date, now: datetime) -> bool:
        return _open_before(self.deadline_for(week_start), as_aware(now, self.tz))
