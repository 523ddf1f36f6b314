"""
Domain errors. Each carries a locale-independent code (plus params) that is
rendered into a user-facing message at the HTTP edge.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from shiftboard.services.rules.types import ValidationResult


class ShiftboardError(Exception):
    status_code = 400
    default_code = "error"

    def __init__(self, code: Optional[str] = None, **params):
        self.code = code or self.default_code
        self.params = params
        super().__init__(self.code)


class BadRequestError(ShiftboardError):
    status_code = 400
    default_code = "bad_request"


class NoteRequiredError(BadRequestError):
    default_code = "note_required"


class ValidationFailed(ShiftboardError):
    """Selections broke a quota or policy rule. Carries the full verdict."""
    status_code = 422
    default_code = "validation_failed"

    def __init__(self, result: "ValidationResult", code: Optional[str] = None, **params):
        super().__init__(code, **params)
        self.result = result


class AuthenticationError(ShiftboardError):
    status_code = 401
    default_code = "not_authenticated"


class AuthorizationError(ShiftboardError):
    status_code = 403
    default_code = "forbidden"


class NotFoundError(ShiftboardError):
    status_code = 404
    default_code = "not_found"


class ConflictError(ShiftboardError):
    status_code = 409
    default_code = "conflict"


class InvalidTransitionError(ConflictError):
    default_code = "invalid_transition"


class SubmissionClosedError(ConflictError):
    default_code = "submission_closed"


class StorageError(ShiftboardError):
    """The database failed. Safe to retry; nothing is retried automatically."""
    status_code = 503
    default_code = "storage_error"
