"""
Weekly request service: submission, review and lookup of WeekRequests.
Authorization and validation run before anything is written.
"""

import logging
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shiftboard.core.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    StorageError,
    SubmissionClosedError,
    ValidationFailed,
)
from shiftboard.db.database import commit_or_raise
from shiftboard.db.models.profiles import Profiles
from shiftboard.db.models.week_requests import WeekRequests
from shiftboard.services.rules.catalog import ShiftCatalog
from shiftboard.services.rules.deadlines import SubmissionWindow
from shiftboard.services.rules.lifecycle import (
    initial_request_status,
    is_elevated,
    require_elevated,
    resubmission_status,
    review_transition,
)
from shiftboard.services.rules.types import RequestStatus, Role, ShiftSelection, ValidationResult
from shiftboard.services.rules.validation import check_selectable, validate_selections
from shiftboard.services.rules.weeks import ensure_week_start
from shiftboard.services.selections import selections_from_json, selections_to_json

logger = logging.getLogger(__name__)


def validate_for_role(
    selections: list[ShiftSelection],
    catalog: ShiftCatalog,
    role: Role,
) -> ValidationResult:
    """Quota/policy rules, plus the selectable-shift check for rank-and-file employees."""
    result = validate_selections(selections, catalog)
    if not is_elevated(role):
        result = result.merged(check_selectable(selections, catalog))
    return result


def _find_request(db: Session, user_id: int, week_start: date) -> Optional[WeekRequests]:
    return db.query(WeekRequests).filter(
        WeekRequests.user_id == user_id,
        WeekRequests.week_start == week_start,
    ).first()


def _load_request(db: Session, request_id: int) -> WeekRequests:
    request = db.query(WeekRequests).filter(WeekRequests.id == request_id).first()
    if not request:
        raise NotFoundError("request_not_found", request_id=request_id)
    return request


def _resubmit(db: Session, request: WeekRequests, actor: Profiles, selections: list[ShiftSelection]) -> WeekRequests:
    request.status = resubmission_status(request.status, actor.role)
    request.selections = selections_to_json(selections)
    commit_or_raise(db)
    db.refresh(request)
    logger.info(f"Week request {request.id} resubmitted by user {actor.id} ({request.status.value})")
    return request


def submit_week_request(
    db: Session,
    actor: Profiles,
    week_start: date,
    selections: list[ShiftSelection],
    catalog: ShiftCatalog,
    window: SubmissionWindow,
    now: Optional[datetime] = None,
) -> WeekRequests:
    """
    Create or update the actor's request for a week.

    Employees start at PENDING and can only edit while PENDING; elevated
    roles are approved immediately and may always edit. At most one request
    exists per (user, week): an insert that loses a race becomes an update.
    """
    ensure_week_start(week_start)
    now = now or datetime.now(timezone.utc)

    if not is_elevated(actor.role) and not window.is_submission_open(week_start, now):
        raise SubmissionClosedError(week_start=week_start.isoformat())

    result = validate_for_role(selections, catalog, actor.role)
    if not result.valid:
        raise ValidationFailed(result)

    existing = _find_request(db, actor.id, week_start)
    if existing is not None:
        return _resubmit(db, existing, actor, selections)

    request = WeekRequests(
        user_id=actor.id,
        week_start=week_start,
        selections=selections_to_json(selections),
        status=initial_request_status(actor.role),
    )
    db.add(request)
    try:
        commit_or_raise(db)
    except IntegrityError:
        db.rollback()
        logger.warning(f"Concurrent submission for user {actor.id} week {week_start}; updating existing row")
        existing = _find_request(db, actor.id, week_start)
        if existing is None:
            raise StorageError() from None
        return _resubmit(db, existing, actor, selections)

    db.refresh(request)
    logger.info(f"Week request {request.id} created by user {actor.id} ({request.status.value})")
    return request


def review_week_request(
    db: Session,
    actor: Profiles,
    request_id: int,
    approve: bool,
    catalog: ShiftCatalog,
    note: Optional[str] = None,
    expected_version: Optional[int] = None,
    force: bool = False,
    enforce_validation: bool = True,
) -> WeekRequests:
    """Approve or reject a request. Managers may re-review requests in any state."""
    require_elevated(actor.role)
    request = _load_request(db, request_id)

    if expected_version is not None and request.version != expected_version:
        raise ConflictError("stale_write", expected=expected_version, actual=request.version)

    validation = None
    if approve and enforce_validation:
        validation = validate_selections(selections_from_json(request.selections), catalog)

    request.status = review_transition(actor.role, approve, note, validation, force)
    request.manager_note = note.strip() if note and note.strip() else None
    request.reviewed_by_user_id = actor.id
    commit_or_raise(db)
    db.refresh(request)
    logger.info(f"Week request {request.id} {request.status.value} by user {actor.id}")
    return request


def get_week_request(db: Session, actor: Profiles, request_id: int) -> WeekRequests:
    request = _load_request(db, request_id)
    if request.user_id != actor.id and not is_elevated(actor.role):
        raise AuthorizationError()
    return request


def validate_week_request(
    db: Session,
    actor: Profiles,
    request_id: int,
    catalog: ShiftCatalog,
) -> tuple[list[ShiftSelection], ValidationResult]:
    """Re-run the quota rules against a stored request, e.g. before a manager reviews it."""
    request = get_week_request(db, actor, request_id)
    selections = selections_from_json(request.selections)
    return selections, validate_selections(selections, catalog)


def list_week_requests_for_week(
    db: Session,
    actor: Profiles,
    week_start: date,
    status: Optional[RequestStatus] = None,
) -> list[tuple[WeekRequests, str]]:
    """All requests of a week with the requester's name, for managers."""
    require_elevated(actor.role)
    query = db.query(WeekRequests, Profiles.name).join(
        Profiles, Profiles.id == WeekRequests.user_id
    ).filter(WeekRequests.week_start == week_start)

    if status:
        query = query.filter(WeekRequests.status == status)

    return [(req, name) for req, name in query.order_by(WeekRequests.submitted_at.asc()).all()]


def list_my_week_requests(db: Session, actor: Profiles, limit: int = 100) -> list[WeekRequests]:
    return db.query(WeekRequests).filter(
        WeekRequests.user_id == actor.id
    ).order_by(WeekRequests.week_start.desc()).limit(limit).all()
