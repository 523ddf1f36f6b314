import pytest
from datetime import date

from shiftboard.services.rules.catalog import build_catalog, ShiftCatalog
from shiftboard.services.rules.types import (
    RequestStatus,
    ShiftSelection,
    WeekRequestRecord,
)


@pytest.fixture
def catalog() -> ShiftCatalog:
    return build_catalog("extended")


@pytest.fixture
def weekend_catalog() -> ShiftCatalog:
    return build_catalog("weekend_manager_only")


@pytest.fixture
def test_sunday() -> date:
    # fixed Sunday for deterministic tests
    return date(2025, 1, 19)


@pytest.fixture
def minimum_selections() -> list[ShiftSelection]:
    # exactly the baseline: 2 regular mornings + 1 regular noon
    return [
        ShiftSelection(0, "s1"),
        ShiftSelection(1, "s2"),
        ShiftSelection(2, "s4"),
    ]


@pytest.fixture
def generous_selections() -> list[ShiftSelection]:
    # beyond the minimum, so nights and weekend shifts are allowed
    return [
        ShiftSelection(0, "s1"),
        ShiftSelection(1, "s2"),
        ShiftSelection(3, "s3"),
        ShiftSelection(2, "s4"),
        ShiftSelection(4, "s6"),
        ShiftSelection(5, "s9"),
    ]


@pytest.fixture
def stats_records(test_sunday) -> list[WeekRequestRecord]:
    # user 1: two approved weeks; user 2: one approved + one pending; user 3: rejected only
    return [
        WeekRequestRecord(1, test_sunday, RequestStatus.APPROVED,
                          [ShiftSelection(0, "s1"), ShiftSelection(1, "s2"), ShiftSelection(2, "s4")], "Avi"),
        WeekRequestRecord(1, date(2025, 1, 12), RequestStatus.APPROVED,
                          [ShiftSelection(0, "s1"), ShiftSelection(1, "s1"), ShiftSelection(2, "s4"),
                           ShiftSelection(5, "s7")], "Avi"),
        WeekRequestRecord(2, test_sunday, RequestStatus.APPROVED,
                          [ShiftSelection(0, "s3"), ShiftSelection(1, "s3"), ShiftSelection(3, "s3"),
                           ShiftSelection(2, "s4"), ShiftSelection(4, "s6"), ShiftSelection(6, "s13"),
                           ShiftSelection(3, "s5")], "Maya"),
        WeekRequestRecord(2, date(2025, 1, 26), RequestStatus.PENDING,
                          [ShiftSelection(0, "s1")], "Maya"),
        WeekRequestRecord(3, test_sunday, RequestStatus.REJECTED,
                          [ShiftSelection(0, "s1")], "Yossi"),
    ]
