"""
Manual assignment service: the manager's hand-built roster for a week.

The roster is edited as a grid of cells but stored as one row per user.
Each user's row is written in its own transaction, so a save can succeed
for some users and fail for others; the report says which.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Mapping, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shiftboard.core.errors import BadRequestError, NotFoundError, ShiftboardError, StorageError
from shiftboard.db.database import commit_or_raise
from shiftboard.db.models.manual_assignments import ManualAssignments
from shiftboard.db.models.profiles import Profiles
from shiftboard.services.rules.catalog import ShiftCatalog
from shiftboard.services.rules.grid import ScheduleGrid
from shiftboard.services.rules.lifecycle import require_manager
from shiftboard.services.rules.types import Cell, ShiftSelection
from shiftboard.services.rules.weeks import ensure_week_start
from shiftboard.services.selections import selections_from_json, selections_to_json

logger = logging.getLogger(__name__)


@dataclass
class SaveReport:
    week_start: date
    grid: ScheduleGrid
    saved: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.failed


def load_stored_assignments(db: Session, week_start: date) -> dict[int, list[ShiftSelection]]:
    rows = db.query(ManualAssignments).filter(ManualAssignments.week_start == week_start).order_by(
        ManualAssignments.user_id.asc()
    ).all()
    return {
        row.user_id: selections_from_json(row.selections)
        for row in rows
        if row.selections
    }


def load_schedule_grid(db: Session, actor: Profiles, week_start: date) -> ScheduleGrid:
    require_manager(actor.role)
    ensure_week_start(week_start)
    return ScheduleGrid(saved=load_stored_assignments(db, week_start))


def _check_cells(db: Session, cells: Mapping[Cell, Sequence[int]], catalog: ShiftCatalog) -> None:
    for cell in cells:
        shift = catalog.shift_by_id(cell.shift_id)
        if shift is None:
            raise BadRequestError("unknown_shift", shift_id=cell.shift_id)
        if not shift.runs_on(cell.day_index):
            raise BadRequestError("invalid_day", day=cell.day_index, shift_id=cell.shift_id)

    user_ids = {uid for users in cells.values() for uid in users}
    if not user_ids:
        return
    found = {uid for (uid,) in db.query(Profiles.id).filter(Profiles.id.in_(user_ids)).all()}
    missing = sorted(user_ids - found)
    if missing:
        raise NotFoundError("user_not_found", user_id=missing[0])


def _write_user_row(
    db: Session,
    week_start: date,
    user_id: int,
    selections: list[ShiftSelection],
    actor_id: int,
) -> None:
    """Upsert one user's row. An insert that races another writer is retried as an update."""
    for attempt in range(2):
        row = db.query(ManualAssignments).filter(
            ManualAssignments.week_start == week_start,
            ManualAssignments.user_id == user_id,
        ).first()
        if row is None:
            row = ManualAssignments(week_start=week_start, user_id=user_id)
            db.add(row)
        row.selections = selections_to_json(selections)
        row.updated_by_user_id = actor_id
        try:
            commit_or_raise(db)
            return
        except IntegrityError:
            db.rollback()
            if attempt:
                raise StorageError() from None


def _write_pending(db: Session, actor: Profiles, week_start: date, grid: ScheduleGrid) -> SaveReport:
    report = SaveReport(week_start=week_start, grid=grid)
    written: dict[int, list[ShiftSelection]] = {}

    for user_id, selections in grid.pending_writes().items():
        try:
            _write_user_row(db, week_start, user_id, selections, actor.id)
        except ShiftboardError as e:
            logger.error(f"Failed to save assignments for user {user_id} week {week_start}: {e.code}")
            report.failed.append(user_id)
            continue
        written[user_id] = selections
        report.saved.append(user_id)

    grid.mark_saved(written)
    if report.failed:
        logger.warning(f"Partial save for week {week_start}: failed users {report.failed}")
    else:
        logger.info(f"Saved assignments for week {week_start} ({len(report.saved)} users)")
    return report


def save_schedule_grid(
    db: Session,
    actor: Profiles,
    week_start: date,
    cells: Mapping[Cell, Sequence[int]],
    catalog: ShiftCatalog,
) -> SaveReport:
    """Replace the week's roster with `cells`. Users no longer on it are written as empty."""
    grid = load_schedule_grid(db, actor, week_start)
    _check_cells(db, cells, catalog)
    grid.replace(cells)
    return _write_pending(db, actor, week_start, grid)


def assign_cell(
    db: Session,
    actor: Profiles,
    week_start: date,
    cell: Cell,
    user_id: int,
    catalog: ShiftCatalog,
) -> SaveReport:
    grid = load_schedule_grid(db, actor, week_start)
    _check_cells(db, {cell: [user_id]}, catalog)
    grid.add_to_cell(cell, user_id)
    return _write_pending(db, actor, week_start, grid)


def unassign_cell(
    db: Session,
    actor: Profiles,
    week_start: date,
    cell: Cell,
    user_id: int,
) -> SaveReport:
    grid = load_schedule_grid(db, actor, week_start)
    grid.remove_from_cell(cell, user_id)
    return _write_pending(db, actor, week_start, grid)
