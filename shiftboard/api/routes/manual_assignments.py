from datetime import date
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from shiftboard.api.deps import get_catalog, get_db, require_manager
from shiftboard.db.models.profiles import Profiles
from shiftboard.schemas.manual_assignments import (
    CellAssignment,
    CellChange,
    SaveReportResponse,
    ScheduleGridResponse,
    ScheduleGridUpdate,
)
from shiftboard.services import manual_assignments as assignment_service
from shiftboard.services.manual_assignments import SaveReport
from shiftboard.services.rules.catalog import ShiftCatalog
from shiftboard.services.rules.grid import ScheduleGrid
from shiftboard.services.rules.types import Cell

router = APIRouter(prefix="/manual-assignments", tags=["manual-assignments"])


def _cells(grid: ScheduleGrid) -> list[CellAssignment]:
    return [
        CellAssignment(day_index=cell.day_index, shift_id=cell.shift_id, user_ids=users)
        for cell, users in sorted(grid.cells.items())
    ]


def _report(report: SaveReport, response: Response) -> SaveReportResponse:
    if not report.complete:
        response.status_code = status.HTTP_207_MULTI_STATUS
    return SaveReportResponse(
        week_start=report.week_start,
        saved=report.saved,
        failed=report.failed,
        complete=report.complete,
        cells=_cells(report.grid),
    )


@router.get("/{week_start}", response_model=ScheduleGridResponse)
def get_schedule_grid(
    week_start: date,
    db: Session = Depends(get_db),
    current_user: Profiles = Depends(require_manager),
):
    grid = assignment_service.load_schedule_grid(db, current_user, week_start)
    return ScheduleGridResponse(week_start=week_start, cells=_cells(grid))


@router.put("/{week_start}", response_model=SaveReportResponse)
def save_schedule_grid(
    week_start: date,
    payload: ScheduleGridUpdate,
    response: Response,
    db: Session = Depends(get_db),
    current_user: Profiles = Depends(require_manager),
    catalog: ShiftCatalog = Depends(get_catalog),
):
    """Replace the whole week. Answers 207 when only some users' rows were saved."""
    cells: dict[Cell, list[int]] = {}
    for item in payload.cells:
        cells.setdefault(Cell(item.day_index, item.shift_id), []).extend(item.user_ids)
    report = assignment_service.save_schedule_grid(db, current_user, week_start, cells, catalog)
    return _report(report, response)


@router.post("/{week_start}/cells", response_model=SaveReportResponse)
def assign_cell(
    week_start: date,
    payload: CellChange,
    response: Response,
    db: Session = Depends(get_db),
    current_user: Profiles = Depends(require_manager),
    catalog: ShiftCatalog = Depends(get_catalog),
):
    report = assignment_service.assign_cell(
        db, current_user, week_start, Cell(payload.day_index, payload.shift_id), payload.user_id, catalog
    )
    return _report(report, response)


@router.delete("/{week_start}/cells", response_model=SaveReportResponse)
def unassign_cell(
    week_start: date,
    payload: CellChange,
    response: Response,
    db: Session = Depends(get_db),
    current_user: Profiles = Depends(require_manager),
):
    report = assignment_service.unassign_cell(
        db, current_user, week_start, Cell(payload.day_index, payload.shift_id), payload.user_id
    )
    return _report(report, response)
