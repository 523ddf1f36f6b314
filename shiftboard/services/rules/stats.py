"""
Category counting and period aggregation.
count_by_category is also what the validation rules count with, so both
always agree on what a regular morning shift is.
"""

import calendar
from datetime import date
from typing import Iterable, Optional, Sequence

from .catalog import ShiftCatalog
from .types import (
    CategoryCounts,
    RequestStatus,
    Shift,
    ShiftCategory,
    ShiftSelection,
    ShiftType,
    UserStats,
    WeekRequestRecord,
)

_REGULAR_TYPE_FIELDS = {
    ShiftType.MORNING: "morning",
    ShiftType.NOON: "noon",
    ShiftType.EVENING: "evening",
    ShiftType.NIGHT: "night",
}

_CATEGORY_FIELDS = {
    ShiftCategory.ROTATION: "rotation",
    ShiftCategory.PREMIUM: "premium",
    ShiftCategory.MANAGER_ONLY: "manager_only",
}


def category_field(shift: Optional[Shift]) -> Optional[str]:
    """Name of the CategoryCounts field a shift counts toward, or None."""
    if shift is None:
        return None
    if shift.category == ShiftCategory.REGULAR:
        return _REGULAR_TYPE_FIELDS[shift.type]
    return _CATEGORY_FIELDS[shift.category]


def count_by_category(selections: Sequence[ShiftSelection], catalog: ShiftCatalog) -> CategoryCounts:
    counts = CategoryCounts()
    for sel in selections:
        name = category_field(catalog.shift_by_id(sel.shift_id))
        if name is not None:
            setattr(counts, name, getattr(counts, name) + 1)
    return counts


def window_start(today: date, months: int = 1) -> date:
    """Same day `months` calendar months earlier, clamped to the month length."""
    month_index = today.year * 12 + (today.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(today.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def aggregate_stats(
    records: Iterable[WeekRequestRecord],
    since: date,
    catalog: ShiftCatalog,
) -> list[UserStats]:
    """
    Sum category counts per user over approved requests whose week starts on
    or after `since`. `total` is the raw number of selections, including
    selections of unknown shifts.
    """
    per_user: dict[int, UserStats] = {}

    for record in records:
        if record.status != RequestStatus.APPROVED or record.week_start < since:
            continue
        stats = per_user.get(record.user_id)
        if stats is None:
            stats = UserStats(user_id=record.user_id, user_name=record.user_name)
            per_user[record.user_id] = stats
        elif stats.user_name is None:
            stats.user_name = record.user_name
        stats.counts = stats.counts + count_by_category(record.selections, catalog)
        stats.total += len(record.selections)

    return sorted(per_user.values(), key=lambda s: (-s.total, s.user_id))
