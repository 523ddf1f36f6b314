"""
Shift catalog: the fixed reference list of schedulable shifts.

The catalog is passed into every rule as a read-only object so tests can run
the rules against synthetic catalogs.
"""

from typing import Iterable, Optional, Sequence

from .types import Shift, ShiftCategory, ShiftSelection, ShiftType

WEEKDAYS = frozenset({0, 1, 2, 3, 4})  # Sunday-Thursday
FRIDAY = frozenset({5})
SATURDAY = frozenset({6})


class ShiftCatalog:
    """Ordered, immutable collection of shifts with O(1) lookup by id."""

    def __init__(self, shifts: Iterable[Shift], variant: Optional[str] = None):
        self.variant = variant
        self._shifts: tuple[Shift, ...] = tuple(shifts)
        self._by_id: dict[str, Shift] = {}
        for shift in self._shifts:
            if shift.id in self._by_id:
                raise ValueError(f"Duplicate shift id in catalog: {shift.id}")
            self._by_id[shift.id] = shift

    @property
    def shifts(self) -> tuple[Shift, ...]:
        return self._shifts

    def __len__(self) -> int:
        return len(self._shifts)

    def __contains__(self, shift_id: object) -> bool:
        return shift_id in self._by_id

    def shift_by_id(self, shift_id: str) -> Optional[Shift]:
        # Retired ids resolve to None and simply count toward nothing
        return self._by_id.get(shift_id)

    def shifts_for_day(self, day_index: int, manager_view: bool = False) -> list[Shift]:
        return [
            s for s in self._shifts
            if s.runs_on(day_index) and (manager_view or s.employee_selectable)
        ]

    def has_type_on_day(
        self,
        selections: Sequence[ShiftSelection],
        day_index: int,
        shift_type: ShiftType,
    ) -> bool:
        """Check if any selection on the given day is a shift of the given type (any category)."""
        for sel in selections:
            if sel.day_index != day_index:
                continue
            shift = self.shift_by_id(sel.shift_id)
            if shift is not None and shift.type == shift_type:
                return True
        return False


def _weekday_shifts() -> list[Shift]:
    return [
        Shift("s1", "בוקר מוקדם", "06:30-14:30", ShiftType.MORNING, ShiftCategory.REGULAR, WEEKDAYS),
        Shift("s2", "בוקר", "07:45-16:00", ShiftType.MORNING, ShiftCategory.REGULAR, WEEKDAYS),
        Shift("s3", "בוקר", "08:30-15:00", ShiftType.MORNING, ShiftCategory.REGULAR, WEEKDAYS),
        Shift("s4", "צהריים", "12:00-20:00", ShiftType.NOON, ShiftCategory.REGULAR, WEEKDAYS),
        Shift("s5", "ערב", "14:30-23:00", ShiftType.EVENING, ShiftCategory.REGULAR, WEEKDAYS),
        Shift("s6", "לילה", "23:00-07:00", ShiftType.NIGHT, ShiftCategory.REGULAR, WEEKDAYS),
    ]


# Canonical catalog: friday morning rotates, weekend nights are premium,
# the remaining weekend slots are filled by the manager.
DEFAULT_SHIFTS: tuple[Shift, ...] = tuple(_weekday_shifts() + [
    Shift("s7", "שישי בוקר", "07:00-15:00", ShiftType.MORNING, ShiftCategory.ROTATION, FRIDAY),
    Shift("s8", "שישי ערב", "15:00-23:00", ShiftType.EVENING, ShiftCategory.MANAGER_ONLY, FRIDAY, False),
    Shift("s9", "שישי לילה", "23:00-07:00", ShiftType.NIGHT, ShiftCategory.PREMIUM, FRIDAY),
    Shift("s10", "שבת בוקר", "07:00-15:00", ShiftType.MORNING, ShiftCategory.MANAGER_ONLY, SATURDAY, False),
    Shift("s11", "שבת ערב", "15:00-23:00", ShiftType.EVENING, ShiftCategory.MANAGER_ONLY, SATURDAY, False),
    Shift("s12", "שבת ערב מאוחר", "18:00-23:00", ShiftType.EVENING, ShiftCategory.MANAGER_ONLY, SATURDAY, False),
    Shift("s13", "שבת לילה", "23:00-07:00", ShiftType.NIGHT, ShiftCategory.PREMIUM, SATURDAY),
])

# Every weekend slot is manager-assigned; no rotation or premium shifts exist.
WEEKEND_MANAGER_ONLY_SHIFTS: tuple[Shift, ...] = tuple(_weekday_shifts() + [
    Shift("s7", "שישי בוקר", "07:00-15:00", ShiftType.MORNING, ShiftCategory.MANAGER_ONLY, FRIDAY, False),
    Shift("s8", "שישי ערב", "15:00-23:00", ShiftType.EVENING, ShiftCategory.MANAGER_ONLY, FRIDAY, False),
    Shift("s9", "שישי לילה", "23:00-07:00", ShiftType.NIGHT, ShiftCategory.MANAGER_ONLY, FRIDAY, False),
    Shift("s10", "שבת בוקר", "07:00-15:00", ShiftType.MORNING, ShiftCategory.MANAGER_ONLY, SATURDAY, False),
    Shift("s11", "שבת ערב", "15:00-23:00", ShiftType.EVENING, ShiftCategory.MANAGER_ONLY, SATURDAY, False),
    Shift("s12", "שבת ערב מאוחר", "18:00-23:00", ShiftType.EVENING, ShiftCategory.MANAGER_ONLY, SATURDAY, False),
    Shift("s13", "שבת לילה", "23:00-07:00", ShiftType.NIGHT, ShiftCategory.MANAGER_ONLY, SATURDAY, False),
])

CATALOG_VARIANTS = {
    "extended": DEFAULT_SHIFTS,
    "weekend_manager_only": WEEKEND_MANAGER_ONLY_SHIFTS,
}


def build_catalog(variant: str = "extended") -> ShiftCatalog:
    try:
        shifts = CATALOG_VARIANTS[variant]
    except KeyError:
        raise ValueError(f"Unknown catalog variant: {variant}") from None
    return ShiftCatalog(shifts, variant)
