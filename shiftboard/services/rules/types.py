"""
Internal data types for the shift rules.
decoupled from SQLAlchemy models so the rules run without a database.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import NamedTuple, Optional


class ShiftType(str, Enum):
    MORNING = "MORNING"
    NOON = "NOON"
    EVENING = "EVENING"
    NIGHT = "NIGHT"


class ShiftCategory(str, Enum):
    REGULAR = "REGULAR"
    ROTATION = "ROTATION"  # friday morning, rotated
    PREMIUM = "PREMIUM"  # friday/saturday night
    MANAGER_ONLY = "MANAGER_ONLY"


class Role(str, Enum):
    MANAGER = "MANAGER"
    SHIFT_MANAGER = "SHIFT_MANAGER"
    EMPLOYEE = "EMPLOYEE"


class RequestStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class SwapStatus(str, Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    MANAGER_APPROVED = "MANAGER_APPROVED"
    MANAGER_REJECTED = "MANAGER_REJECTED"


class IssueKind(str, Enum):
    QUOTA = "QUOTA"
    POLICY = "POLICY"
    DUPLICATE = "DUPLICATE"


@dataclass(frozen=True)
class Shift:
    """A catalog shift. Never changes at runtime."""
    id: str
    label: str
    time_range: str
    type: ShiftType
    category: ShiftCategory
    days: frozenset[int]  # 0=Sunday .. 6=Saturday
    employee_selectable: bool = True

    def runs_on(self, day_index: int) -> bool:
        return day_index in self.days


@dataclass(frozen=True)
class ShiftSelection:
    """One claim of one shift on one day of a week."""
    day_index: int  # 0-6 within the week
    shift_id: str
    note: Optional[str] = None

    @property
    def cell(self) -> "Cell":
        return Cell(self.day_index, self.shift_id)


class Cell(NamedTuple):
    """A (day, shift) slot of the weekly roster grid."""
    day_index: int
    shift_id: str


@dataclass(frozen=True)
class Issue:
    kind: IssueKind
    code: str
    params: dict = field(default_factory=dict)


@dataclass
class ValidationResult:
    errors: list[Issue] = field(default_factory=list)
    warnings: list[Issue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return len(self.errors) == 0

    def merged(self, other: "ValidationResult") -> "ValidationResult":
        return ValidationResult(
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings,
        )


@dataclass
class CategoryCounts:
    morning: int = 0
    noon: int = 0
    evening: int = 0
    night: int = 0
    rotation: int = 0
    premium: int = 0
    manager_only: int = 0

    def __add__(self, other: "CategoryCounts") -> "CategoryCounts":
        return CategoryCounts(
            morning=self.morning + other.morning,
            noon=self.noon + other.noon,
            evening=self.evening + other.evening,
            night=self.night + other.night,
            rotation=self.rotation + other.rotation,
            premium=self.premium + other.premium,
            manager_only=self.manager_only + other.manager_only,
        )


@dataclass
class WeekRequestRecord:
    """A stored weekly request, as seen by the aggregator."""
    user_id: int
    week_start: date  # Sunday
    status: RequestStatus
    selections: list[ShiftSelection]
    user_name: Optional[str] = None


@dataclass
class UserStats:
    user_id: int
    user_name: Optional[str]
    counts: CategoryCounts = field(default_factory=CategoryCounts)
    total: int = 0
