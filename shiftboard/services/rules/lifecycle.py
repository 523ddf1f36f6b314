"""
State machines for weekly requests and swap requests.

Weekly request:  PENDING -> APPROVED | REJECTED
    (elevated roles start at APPROVED; managers may re-review any state)
Swap request:    PENDING -> ACCEPTED -> MANAGER_APPROVED | MANAGER_REJECTED
                 PENDING -> REJECTED
"""

from typing import Optional

from shiftboard.core.errors import (
    AuthorizationError,
    BadRequestError,
    ConflictError,
    InvalidTransitionError,
    NoteRequiredError,
    ValidationFailed,
)

from .types import RequestStatus, Role, SwapStatus, ValidationResult

# Every Role must appear in both tables; a missing entry raises instead of
# silently falling through to "not allowed".
_ELEVATED = {
    Role.MANAGER: True,
    Role.SHIFT_MANAGER: True,
    Role.EMPLOYEE: False,
}

_MANAGER = {
    Role.MANAGER: True,
    Role.SHIFT_MANAGER: False,
    Role.EMPLOYEE: False,
}


def _lookup(table: dict, role: Role) -> bool:
    try:
        return table[Role(role)]
    except (KeyError, ValueError):
        raise ValueError(f"Unhandled role: {role!r}") from None


def is_elevated(role: Role) -> bool:
    """Manager or shift manager."""
    return _lookup(_ELEVATED, role)


def is_manager(role: Role) -> bool:
    return _lookup(_MANAGER, role)


def require_elevated(role: Role) -> None:
    if not is_elevated(role):
        raise AuthorizationError("manager_required")


def require_manager(role: Role) -> None:
    if not is_manager(role):
        raise AuthorizationError("manager_required")


def _has_note(note: Optional[str]) -> bool:
    return bool(note and note.strip())


# ==================== Weekly requests ====================

def initial_request_status(role: Role) -> RequestStatus:
    return RequestStatus.APPROVED if is_elevated(role) else RequestStatus.PENDING


def resubmission_status(existing: RequestStatus, role: Role) -> RequestStatus:
    """Status after the owner resubmits. Employees are locked out once reviewed."""
    if is_elevated(role):
        return RequestStatus.APPROVED
    if existing != RequestStatus.PENDING:
        raise ConflictError("request_locked", status=existing.value)
    return RequestStatus.PENDING


def review_transition(
    actor_role: Role,
    approve: bool,
    note: Optional[str] = None,
    validation: Optional[ValidationResult] = None,
    force: bool = False,
) -> RequestStatus:
    """
    Decide the outcome of a manager review. Allowed from any current state.
    Approving a request that currently fails validation needs `force`.
    """
    require_elevated(actor_role)

    if not approve:
        if not _has_note(note):
            raise NoteRequiredError()
        return RequestStatus.REJECTED

    if validation is not None and not validation.valid and not force:
        raise ValidationFailed(validation, "approve_invalid_request")
    return RequestStatus.APPROVED


# ==================== Swap requests ====================

SWAP_TRANSITIONS: dict[SwapStatus, frozenset[SwapStatus]] = {
    SwapStatus.PENDING: frozenset({SwapStatus.ACCEPTED, SwapStatus.REJECTED}),
    SwapStatus.ACCEPTED: frozenset({SwapStatus.MANAGER_APPROVED, SwapStatus.MANAGER_REJECTED}),
    SwapStatus.REJECTED: frozenset(),
    SwapStatus.MANAGER_APPROVED: frozenset(),
    SwapStatus.MANAGER_REJECTED: frozenset(),
}


def can_transition(current: SwapStatus, new: SwapStatus) -> bool:
    return new in SWAP_TRANSITIONS[current]


def is_terminal(status: SwapStatus) -> bool:
    return not SWAP_TRANSITIONS[status]


def _ensure_transition(current: SwapStatus, new: SwapStatus) -> SwapStatus:
    if not can_transition(current, new):
        raise InvalidTransitionError(current=current.value, requested=new.value)
    return new


def ensure_distinct_parties(requester_id: int, target_id: int) -> None:
    if requester_id == target_id:
        raise BadRequestError("swap_with_self")


def respond_transition(
    current: SwapStatus,
    actor_id: int,
    actor_role: Role,
    target_id: int,
    accept: bool,
    note: Optional[str] = None,
) -> SwapStatus:
    """Target's answer to a swap. Elevated roles may answer on the target's behalf."""
    if actor_id != target_id and not is_elevated(actor_role):
        raise AuthorizationError("not_swap_target")

    new = _ensure_transition(current, SwapStatus.ACCEPTED if accept else SwapStatus.REJECTED)
    if not accept and not _has_note(note):
        raise NoteRequiredError()
    return new


def finalize_transition(
    current: SwapStatus,
    actor_role: Role,
    approve: bool,
    note: Optional[str] = None,
) -> SwapStatus:
    """Manager ratification. Only reachable once the target accepted."""
    require_elevated(actor_role)

    new = _ensure_transition(current, SwapStatus.MANAGER_APPROVED if approve else SwapStatus.MANAGER_REJECTED)
    if not approve and not _has_note(note):
        raise NoteRequiredError()
    return new
