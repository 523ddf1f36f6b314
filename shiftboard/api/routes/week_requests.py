from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shiftboard.api.deps import (
    get_catalog,
    get_current_user,
    get_db,
    get_locale,
    get_submission_window,
    require_elevated,
)
from shiftboard.api.rendering import validation_report
from shiftboard.core.config import settings
from shiftboard.db.models.profiles import Profiles
from shiftboard.db.models.week_requests import WeekRequests
from shiftboard.schemas.selections import ValidationReport
from shiftboard.schemas.week_requests import WeekRequestResponse, WeekRequestReview, WeekRequestSubmit
from shiftboard.services import week_requests as request_service
from shiftboard.services.rules.catalog import ShiftCatalog
from shiftboard.services.rules.deadlines import SubmissionWindow
from shiftboard.services.rules.types import RequestStatus

router = APIRouter(prefix="/week-requests", tags=["week-requests"])


def _response(request: WeekRequests, user_name: Optional[str] = None) -> WeekRequestResponse:
    response = WeekRequestResponse.model_validate(request)
    if user_name is not None:
        response.user_name = user_name
    return response


@router.put("/{week_start}", response_model=WeekRequestResponse)
def submit_week_request(
    week_start: date,
    payload: WeekRequestSubmit,
    db: Session = Depends(get_db),
    current_user: Profiles = Depends(get_current_user),
    catalog: ShiftCatalog = Depends(get_catalog),
    window: SubmissionWindow = Depends(get_submission_window),
):
    """Create or replace the current user's request for the week starting on `week_start` (a Sunday)"""
    request = request_service.submit_week_request(
        db,
        current_user,
        week_start,
        [s.to_selection() for s in payload.selections],
        catalog,
        window,
    )
    return _response(request, current_user.name)


@router.get("/me", response_model=List[WeekRequestResponse])
def list_my_week_requests(
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: Profiles = Depends(get_current_user),
):
    return [
        _response(r, current_user.name)
        for r in request_service.list_my_week_requests(db, current_user, limit)
    ]


@router.get("/week/{week_start}", response_model=List[WeekRequestResponse])
def list_week_requests(
    week_start: date,
    request_status: Optional[RequestStatus] = None,
    db: Session = Depends(get_db),
    current_user: Profiles = Depends(require_elevated),
):
    rows = request_service.list_week_requests_for_week(db, current_user, week_start, request_status)
    return [_response(request, name) for request, name in rows]


@router.get("/{request_id}", response_model=WeekRequestResponse)
def get_week_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: Profiles = Depends(get_current_user),
):
    """Own request, or any request for managers"""
    return _response(request_service.get_week_request(db, current_user, request_id))


@router.get("/{request_id}/validation", response_model=ValidationReport)
def get_week_request_validation(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: Profiles = Depends(get_current_user),
    catalog: ShiftCatalog = Depends(get_catalog),
    locale: str = Depends(get_locale),
):
    selections, result = request_service.validate_week_request(db, current_user, request_id, catalog)
    return validation_report(result, selections, catalog, locale)


@router.patch("/{request_id}/approve", response_model=WeekRequestResponse)
def approve_week_request(
    request_id: int,
    payload: WeekRequestReview,
    db: Session = Depends(get_db),
    current_user: Profiles = Depends(require_elevated),
    catalog: ShiftCatalog = Depends(get_catalog),
):
    request = request_service.review_week_request(
        db,
        current_user,
        request_id,
        approve=True,
        catalog=catalog,
        note=payload.manager_note,
        expected_version=payload.expected_version,
        force=payload.force,
        enforce_validation=settings.ENFORCE_VALIDATION_ON_APPROVE,
    )
    return _response(request)


@router.patch("/{request_id}/reject", response_model=WeekRequestResponse)
def reject_week_request(
    request_id: int,
    payload: WeekRequestReview,
    db: Session = Depends(get_db),
    current_user: Profiles = Depends(require_elevated),
    catalog: ShiftCatalog = Depends(get_catalog),
):
    """A note is mandatory when rejecting"""
    request = request_service.review_week_request(
        db,
        current_user,
        request_id,
        approve=False,
        catalog=catalog,
        note=payload.manager_note,
        expected_version=payload.expected_version,
    )
    return _response(request)
