from typing import Generator, Optional
from fastapi import Depends, Header
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from shiftboard.api.rendering import resolve_locale
from shiftboard.core.config import settings
from shiftboard.core.errors import AuthenticationError, AuthorizationError
from shiftboard.core.security import decode_access_token
from shiftboard.db.database import SessionLocal
from shiftboard.db.models.profiles import Profiles
from shiftboard.services.deadlines import build_submission_window
from shiftboard.services.rules.catalog import ShiftCatalog, build_catalog
from shiftboard.services.rules.deadlines import SubmissionWindow
from shiftboard.services.rules.lifecycle import is_elevated, is_manager
from shiftboard.services.users import CredentialStore, DatabaseCredentialStore

security = HTTPBearer(auto_error=False)

_catalog = build_catalog(settings.CATALOG_VARIANT)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_catalog() -> ShiftCatalog:
    return _catalog


def get_submission_window(db: Session = Depends(get_db)) -> SubmissionWindow:
    return build_submission_window(db, settings)


def get_credential_store(db: Session = Depends(get_db)) -> CredentialStore:
    return DatabaseCredentialStore(db)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> Profiles:
    if credentials is None:
        raise AuthenticationError()

    token_data = decode_access_token(credentials.credentials)
    if token_data is None:
        raise AuthenticationError()

    user = db.query(Profiles).filter(Profiles.id == token_data.user_id).first()
    if not user:
        raise AuthenticationError()

    # a role change invalidates tokens issued under the old role
    if token_data.role is not None and token_data.role != user.role:
        raise AuthenticationError("token_outdated")

    return user


def require_elevated(current_user: Profiles = Depends(get_current_user)) -> Profiles:
    """Require MANAGER or SHIFT_MANAGER role"""
    if not is_elevated(current_user.role):
        raise AuthorizationError("manager_required")
    return current_user


def require_manager(current_user: Profiles = Depends(get_current_user)) -> Profiles:
    """Require MANAGER role"""
    if not is_manager(current_user.role):
        raise AuthorizationError("manager_required")
    return current_user


def get_locale(accept_language: Optional[str] = Header(None)) -> str:
    return resolve_locale(accept_language)
