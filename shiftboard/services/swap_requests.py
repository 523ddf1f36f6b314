"""
Swap request service.

A swap moves through PENDING -> ACCEPTED/REJECTED (target) and then
ACCEPTED -> MANAGER_APPROVED/MANAGER_REJECTED (manager). Terminal states
never change. Concurrent actors are serialized by the row version.
"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from shiftboard.core.errors import AuthorizationError, BadRequestError, ConflictError, NotFoundError
from shiftboard.db.database import commit_or_raise
from shiftboard.db.models.profiles import Profiles
from shiftboard.db.models.swap_requests import SwapRequests
from shiftboard.services.rules.catalog import ShiftCatalog
from shiftboard.services.rules.lifecycle import (
    ensure_distinct_parties,
    finalize_transition,
    is_elevated,
    require_elevated,
    respond_transition,
)
from shiftboard.services.rules.types import ShiftSelection, SwapStatus
from shiftboard.services.rules.weeks import ensure_week_start
from shiftboard.services.selections import swap_shift_to_json

logger = logging.getLogger(__name__)


def _load_swap(db: Session, swap_id: int) -> SwapRequests:
    swap = db.query(SwapRequests).filter(SwapRequests.id == swap_id).first()
    if not swap:
        raise NotFoundError("swap_not_found", swap_id=swap_id)
    return swap


def _check_version(swap: SwapRequests, expected_version: Optional[int]) -> None:
    if expected_version is not None and swap.version != expected_version:
        raise ConflictError("stale_write", expected=expected_version, actual=swap.version)


def _check_shift(catalog: ShiftCatalog, week_start: date, selection: ShiftSelection) -> None:
    ensure_week_start(week_start)
    shift = catalog.shift_by_id(selection.shift_id)
    if shift is None:
        raise BadRequestError("unknown_shift", shift_id=selection.shift_id)
    if not shift.runs_on(selection.day_index):
        raise BadRequestError("invalid_day", day=selection.day_index, shift_id=selection.shift_id)


def create_swap_request(
    db: Session,
    actor: Profiles,
    target_id: int,
    requester_shift: tuple[date, ShiftSelection],
    target_shift: tuple[date, ShiftSelection],
    catalog: ShiftCatalog,
    note: Optional[str] = None,
) -> SwapRequests:
    ensure_distinct_parties(actor.id, target_id)

    target = db.query(Profiles).filter(Profiles.id == target_id).first()
    if not target:
        raise NotFoundError("user_not_found", user_id=target_id)

    for week_start, selection in (requester_shift, target_shift):
        _check_shift(catalog, week_start, selection)

    swap = SwapRequests(
        requester_id=actor.id,
        target_id=target_id,
        requester_shift=swap_shift_to_json(*requester_shift),
        target_shift=swap_shift_to_json(*target_shift),
        note=note.strip() if note and note.strip() else None,
        status=SwapStatus.PENDING,
    )
    db.add(swap)
    commit_or_raise(db)
    db.refresh(swap)
    logger.info(f"Swap request {swap.id} created: user {actor.id} -> user {target_id}")
    return swap


def respond_to_swap(
    db: Session,
    actor: Profiles,
    swap_id: int,
    accept: bool,
    note: Optional[str] = None,
    expected_version: Optional[int] = None,
) -> SwapRequests:
    """Target accepts or rejects. Rejecting needs a note."""
    swap = _load_swap(db, swap_id)
    _check_version(swap, expected_version)

    swap.status = respond_transition(swap.status, actor.id, actor.role, swap.target_id, accept, note)
    if note and note.strip():
        swap.response_note = note.strip()
    swap.last_actioned_by = actor.id
    commit_or_raise(db)
    db.refresh(swap)
    logger.info(f"Swap request {swap.id} {swap.status.value} by user {actor.id}")
    return swap


def finalize_swap(
    db: Session,
    actor: Profiles,
    swap_id: int,
    approve: bool,
    note: Optional[str] = None,
    expected_version: Optional[int] = None,
) -> SwapRequests:
    """Manager ratifies an accepted swap."""
    require_elevated(actor.role)
    swap = _load_swap(db, swap_id)
    _check_version(swap, expected_version)

    swap.status = finalize_transition(swap.status, actor.role, approve, note)
    if note and note.strip():
        swap.response_note = note.strip()
    swap.last_actioned_by = actor.id
    commit_or_raise(db)
    db.refresh(swap)
    logger.info(f"Swap request {swap.id} {swap.status.value} by user {actor.id}")
    return swap


def get_swap_request(db: Session, actor: Profiles, swap_id: int) -> SwapRequests:
    swap = _load_swap(db, swap_id)
    if actor.id not in (swap.requester_id, swap.target_id) and not is_elevated(actor.role):
        raise AuthorizationError()
    return swap


def list_swap_requests(
    db: Session,
    actor: Profiles,
    status: Optional[SwapStatus] = None,
    limit: int = 100,
    requester_id: Optional[int] = None,
    target_id: Optional[int] = None,
) -> list[SwapRequests]:
    """Elevated roles see every swap; everyone else sees the ones they are party to."""
    query = db.query(SwapRequests)

    if not is_elevated(actor.role):
        query = query.filter(
            or_(SwapRequests.requester_id == actor.id, SwapRequests.target_id == actor.id)
        )
    if status:
        query = query.filter(SwapRequests.status == status)
    if requester_id is not None:
        query = query.filter(SwapRequests.requester_id == requester_id)
    if target_id is not None:
        query = query.filter(SwapRequests.target_id == target_id)

    return query.order_by(SwapRequests.created_at.desc(), SwapRequests.id.desc()).limit(limit).all()


def list_awaiting_manager(db: Session, actor: Profiles) -> list[SwapRequests]:
    require_elevated(actor.role)
    return db.query(SwapRequests).filter(
        SwapRequests.status == SwapStatus.ACCEPTED
    ).order_by(SwapRequests.created_at.asc()).all()
