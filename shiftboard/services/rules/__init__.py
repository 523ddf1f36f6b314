"""
Shift rules package: the pure core of weekly requests.

Usage:
    from shiftboard.services.rules import build_catalog, validate_selections, ShiftSelection

    catalog = build_catalog("extended")
    result = validate_selections(
        [ShiftSelection(0, "s1"), ShiftSelection(1, "s2"), ShiftSelection(2, "s4")],
        catalog,
    )
    result.valid  # True

    # Manual roster builder
    from shiftboard.services.rules import ScheduleGrid, Cell

    grid = ScheduleGrid(saved={7: [ShiftSelection(0, "s1")]})
    grid.add_to_cell(Cell(1, "s4"), 7)
    writes = grid.pending_writes()
"""

from .types import (
    CategoryCounts,
    Cell,
    Issue,
    IssueKind,
    RequestStatus,
    Role,
    Shift,
    ShiftCategory,
    ShiftSelection,
    ShiftType,
    SwapStatus,
    UserStats,
    ValidationResult,
    WeekRequestRecord,
)
from .catalog import ShiftCatalog, build_catalog, DEFAULT_SHIFTS
from .validation import QuotaRules, rules_for, validate_selections, check_selectable, find_duplicates
from .stats import count_by_category, aggregate_stats, window_start
from .grid import ScheduleGrid, to_grid, to_per_user
from .lifecycle import (
    is_elevated,
    is_manager,
    initial_request_status,
    resubmission_status,
    review_transition,
    respond_transition,
    finalize_transition,
    ensure_distinct_parties,
)
from .deadlines import SubmissionWindow, AutoDeadline, ExplicitDeadline
from .messages import render_issue, render_error

__all__ = [
    # Types
    "CategoryCounts",
    "Cell",
    "Issue",
    "IssueKind",
    "RequestStatus",
    "Role",
    "Shift",
    "ShiftCategory",
    "ShiftSelection",
    "ShiftType",
    "SwapStatus",
    "UserStats",
    "ValidationResult",
    "WeekRequestRecord",
    # Catalog
    "ShiftCatalog",
    "build_catalog",
    "DEFAULT_SHIFTS",
    # Validation / stats
    "QuotaRules",
    "rules_for",
    "validate_selections",
    "check_selectable",
    "find_duplicates",
    "count_by_category",
    "aggregate_stats",
    "window_start",
    # Grid
    "ScheduleGrid",
    "to_grid",
    "to_per_user",
    # Lifecycles
    "is_elevated",
    "is_manager",
    "initial_request_status",
    "resubmission_status",
    "review_transition",
    "respond_transition",
    "finalize_transition",
    "ensure_distinct_parties",
    # Submission window
    "SubmissionWindow",
    "AutoDeadline",
    "ExplicitDeadline",
    # Messages
    "render_issue",
    "render_error",
]
