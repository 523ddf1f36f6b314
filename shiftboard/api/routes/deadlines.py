from datetime import date
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shiftboard.api.deps import get_current_user, get_db, get_submission_window, require_manager
from shiftboard.core.config import settings
from shiftboard.db.models.profiles import Profiles
from shiftboard.schemas.deadlines import DeadlineResponse, DeadlineSet
from shiftboard.services import deadlines as deadline_service
from shiftboard.services.rules.deadlines import SubmissionWindow

router = APIRouter(prefix="/deadlines", tags=["deadlines"])


def _status(window: SubmissionWindow, week_start: date) -> DeadlineResponse:
    deadline, is_open = deadline_service.submission_status(window, week_start)
    return DeadlineResponse(
        week_start=week_start,
        mode=settings.DEADLINE_MODE,
        deadline=deadline,
        is_open=is_open,
    )


@router.get("/{week_start}", response_model=DeadlineResponse)
def get_deadline(
    week_start: date,
    current_user: Profiles = Depends(get_current_user),
    window: SubmissionWindow = Depends(get_submission_window),
):
    return _status(window, week_start)


@router.put("/{week_start}", response_model=DeadlineResponse)
def set_deadline(
    week_start: date,
    payload: DeadlineSet,
    db: Session = Depends(get_db),
    current_user: Profiles = Depends(require_manager),
    window: SubmissionWindow = Depends(get_submission_window),
):
    """Only meaningful in explicit deadline mode; auto mode ignores stored deadlines"""
    deadline_service.set_deadline(
        db, current_user, week_start, payload.deadline, deadline_service.local_timezone(settings)
    )
    return _status(window, week_start)
