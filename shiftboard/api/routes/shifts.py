from typing import List
from fastapi import APIRouter, Depends, Path

from shiftboard.api.deps import get_catalog, get_current_user, get_locale
from shiftboard.api.rendering import validation_report
from shiftboard.db.models.profiles import Profiles
from shiftboard.schemas.catalog import ShiftResponse, ValidateSelectionsRequest
from shiftboard.schemas.selections import ValidationReport
from shiftboard.services.rules.catalog import ShiftCatalog
from shiftboard.services.rules.lifecycle import is_elevated
from shiftboard.services.week_requests import validate_for_role

router = APIRouter(prefix="/shifts", tags=["shifts"])


@router.get("", response_model=List[ShiftResponse])
def list_shifts(catalog: ShiftCatalog = Depends(get_catalog)):
    return [ShiftResponse.from_shift(shift) for shift in catalog.shifts]


@router.get("/day/{day_index}", response_model=List[ShiftResponse])
def list_shifts_for_day(
    day_index: int = Path(ge=0, le=6),
    catalog: ShiftCatalog = Depends(get_catalog),
    current_user: Profiles = Depends(get_current_user),
):
    """Employees see only the shifts they may pick; managers see everything running that day"""
    shifts = catalog.shifts_for_day(day_index, manager_view=is_elevated(current_user.role))
    return [ShiftResponse.from_shift(shift) for shift in shifts]


@router.post("/validate", response_model=ValidationReport)
def validate(
    payload: ValidateSelectionsRequest,
    catalog: ShiftCatalog = Depends(get_catalog),
    current_user: Profiles = Depends(get_current_user),
    locale: str = Depends(get_locale),
):
    """Dry run of the submission rules. Never writes anything."""
    selections = [s.to_selection() for s in payload.selections]
    result = validate_for_role(selections, catalog, current_user.role)
    return validation_report(result, selections, catalog, locale)
