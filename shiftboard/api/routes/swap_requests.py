from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from shiftboard.api.deps import get_catalog, get_current_user, get_db, require_elevated
from shiftboard.db.models.profiles import Profiles
from shiftboard.schemas.swap_requests import (
    SwapFinalizeAction,
    SwapRequestCreate,
    SwapRequestResponse,
    SwapResponseAction,
)
from shiftboard.services import swap_requests as swap_service
from shiftboard.services.rules.catalog import ShiftCatalog
from shiftboard.services.rules.types import SwapStatus

router = APIRouter(prefix="/swap-requests", tags=["swap-requests"])


@router.post("", response_model=SwapRequestResponse, status_code=status.HTTP_201_CREATED)
def create_swap_request(
    payload: SwapRequestCreate,
    db: Session = Depends(get_db),
    current_user: Profiles = Depends(get_current_user),
    catalog: ShiftCatalog = Depends(get_catalog),
):
    return swap_service.create_swap_request(
        db,
        current_user,
        payload.target_id,
        (payload.requester_shift.week_start, payload.requester_shift.to_selection()),
        (payload.target_shift.week_start, payload.target_shift.to_selection()),
        catalog,
        note=payload.note,
    )


@router.get("", response_model=List[SwapRequestResponse])
def list_swap_requests(
    swap_status: Optional[SwapStatus] = None,
    requester_id: Optional[int] = None,
    target_id: Optional[int] = None,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: Profiles = Depends(get_current_user),
):
    """Managers see all swaps, everyone else only swaps they are part of"""
    return swap_service.list_swap_requests(
        db, current_user, swap_status, limit, requester_id=requester_id, target_id=target_id
    )


@router.get("/awaiting-manager", response_model=List[SwapRequestResponse])
def list_awaiting_manager(
    db: Session = Depends(get_db),
    current_user: Profiles = Depends(require_elevated),
):
    return swap_service.list_awaiting_manager(db, current_user)


@router.get("/{swap_id}", response_model=SwapRequestResponse)
def get_swap_request(
    swap_id: int,
    db: Session = Depends(get_db),
    current_user: Profiles = Depends(get_current_user),
):
    return swap_service.get_swap_request(db, current_user, swap_id)


@router.patch("/{swap_id}/respond", response_model=SwapRequestResponse)
def respond_to_swap(
    swap_id: int,
    payload: SwapResponseAction,
    db: Session = Depends(get_db),
    current_user: Profiles = Depends(get_current_user),
):
    return swap_service.respond_to_swap(
        db, current_user, swap_id, payload.accept, payload.note, payload.expected_version
    )


@router.patch("/{swap_id}/finalize", response_model=SwapRequestResponse)
def finalize_swap(
    swap_id: int,
    payload: SwapFinalizeAction,
    db: Session = Depends(get_db),
    current_user: Profiles = Depends(require_elevated),
):
    return swap_service.finalize_swap(
        db, current_user, swap_id, payload.approve, payload.note, payload.expected_version
    )
