"""
Schedule grid model for the manual roster builder.

Two shapes of the same week:
    per-user:  {user_id: [ShiftSelection, ...]}      (stored, one row per user)
    per-cell:  {Cell(day, shift_id): [user_id, ...]}  (edited in the grid)
"""

from collections import Counter
from typing import Mapping, Optional, Sequence

from .types import Cell, ShiftSelection

PerUser = dict[int, list[ShiftSelection]]
Grid = dict[Cell, list[int]]


def to_grid(per_user: Mapping[int, Sequence[ShiftSelection]]) -> Grid:
    """Per-user selections -> cell occupants. A user appears at most once per cell."""
    grid: Grid = {}
    for user_id, selections in per_user.items():
        for sel in selections:
            occupants = grid.setdefault(sel.cell, [])
            if user_id not in occupants:
                occupants.append(user_id)
    return grid


def to_per_user(grid: Mapping[Cell, Sequence[int]]) -> PerUser:
    """Cell occupants -> per-user selections (notes are not carried by the grid)."""
    per_user: PerUser = {}
    for cell, user_ids in grid.items():
        for user_id in user_ids:
            per_user.setdefault(user_id, []).append(
                ShiftSelection(day_index=cell.day_index, shift_id=cell.shift_id)
            )
    return per_user


def assignment_triples(per_user: Mapping[int, Sequence[ShiftSelection]]) -> Counter:
    """Multiset of (user, day, shift) triples, ignoring order and notes."""
    return Counter(
        (user_id, sel.day_index, sel.shift_id)
        for user_id, selections in per_user.items()
        for sel in selections
    )


class ScheduleGrid:
    """
    In-memory working copy of one week's roster.

    Mutations mark the grid dirty until the pending writes are saved back
    to per-user storage. The last-saved snapshot is only used to find which
    users need writing; it is not a rollback point.
    """

    def __init__(self, saved: Optional[Mapping[int, Sequence[ShiftSelection]]] = None):
        self._saved: PerUser = {uid: list(sels) for uid, sels in (saved or {}).items()}
        self.cells: Grid = to_grid(self._saved)
        self.dirty = False

    @property
    def saved(self) -> PerUser:
        return {uid: list(sels) for uid, sels in self._saved.items()}

    def occupants(self, cell: Cell) -> list[int]:
        return list(self.cells.get(cell, []))

    def add_to_cell(self, cell: Cell, user_id: int) -> None:
        occupants = self.cells.get(cell, [])
        if user_id in occupants:
            return
        self.cells[cell] = occupants + [user_id]
        self.dirty = True

    def remove_from_cell(self, cell: Cell, user_id: int) -> None:
        remaining = [uid for uid in self.cells.get(cell, []) if uid != user_id]
        if remaining:
            self.cells[cell] = remaining
        else:
            self.cells.pop(cell, None)
        self.dirty = True

    def replace(self, cells: Mapping[Cell, Sequence[int]]) -> None:
        """Swap in a whole grid (as sent by a client), deduplicated and without empty cells."""
        self.cells = to_grid(to_per_user({c: u for c, u in cells.items() if u}))
        self.dirty = True

    def to_per_user(self) -> PerUser:
        return to_per_user(self.cells)

    def pending_writes(self) -> PerUser:
        """
        What each user's stored row should become. Covers previously saved
        users too, so someone removed from every cell is written as empty.
        """
        current = self.to_per_user()
        user_ids = set(current) | set(self._saved)
        return {uid: current.get(uid, []) for uid in sorted(user_ids)}

    def mark_saved(self, written: Mapping[int, Sequence[ShiftSelection]]) -> None:
        for user_id, selections in written.items():
            if selections:
                self._saved[user_id] = list(selections)
            else:
                self._saved.pop(user_id, None)
        self.dirty = assignment_triples(self._saved) != assignment_triples(self.to_per_user())
