"""
Week helpers. Weeks start on Sunday and are identified by that Sunday's date.
"""

from datetime import date, timedelta

from shiftboard.core.errors import BadRequestError

DAYS_IN_WEEK = 7
SUNDAY = 6  # date.weekday() value


def week_start_for(day: date) -> date:
    """Sunday on or before the given date."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def is_week_start(day: date) -> bool:
    return day.weekday() == SUNDAY


def week_dates(week_start: date) -> list[date]:
    return [week_start + timedelta(days=i) for i in range(DAYS_IN_WEEK)]


def offset_week(week_start: date, offset: int) -> date:
    return week_start + timedelta(weeks=offset)


def ensure_week_start(day: date) -> date:
    if not is_week_start(day):
        raise BadRequestError("invalid_week_start", value=day.isoformat())
    return day


def parse_week_start(iso: str) -> date:
    try:
        day = date.fromisoformat(iso)
    except (TypeError, ValueError):
        raise BadRequestError("invalid_week_start", value=str(iso)) from None
    return ensure_week_start(day)
