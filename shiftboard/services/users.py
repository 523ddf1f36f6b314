"""
User administration and login.

Credentials and profiles live in separate stores and are never written in
one transaction. Creating a user writes the credential first; if the profile
write then fails, the credential is deleted again so no orphan login remains.
"""

import logging
from typing import Optional, Protocol

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shiftboard.core.errors import (
    AuthenticationError,
    BadRequestError,
    ConflictError,
    NotFoundError,
    StorageError,
)
from shiftboard.core.security import get_password_hash, verify_password
from shiftboard.db.database import commit_or_raise
from shiftboard.db.models.credentials import Credentials
from shiftboard.db.models.manual_assignments import ManualAssignments
from shiftboard.db.models.profiles import Profiles
from shiftboard.db.models.swap_requests import SwapRequests
from shiftboard.db.models.week_deadlines import WeekDeadlines
from shiftboard.db.models.week_requests import WeekRequests
from shiftboard.services.rules.lifecycle import require_manager
from shiftboard.services.rules.types import Role

logger = logging.getLogger(__name__)


class CredentialStore(Protocol):
    def create(self, email: str, password: str) -> int: ...

    def delete(self, user_id: int) -> None: ...

    def verify(self, email: str, password: str) -> Optional[int]: ...

    def set_password(self, user_id: int, password: str) -> None: ...


class DatabaseCredentialStore:
    """Credentials table accessed through the request session, one commit per call."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, email: str, password: str) -> int:
        if self.db.query(Credentials).filter(Credentials.email == email).first():
            raise ConflictError("email_taken", email=email)
        credential = Credentials(email=email, password_hash=get_password_hash(password))
        self.db.add(credential)
        try:
            commit_or_raise(self.db)
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("email_taken", email=email) from None
        self.db.refresh(credential)
        return credential.id

    def delete(self, user_id: int) -> None:
        if self.stage_delete(user_id):
            commit_or_raise(self.db)

    def stage_delete(self, user_id: int) -> bool:
        """Mark the credential for deletion in the current transaction without committing."""
        credential = self.db.query(Credentials).filter(Credentials.id == user_id).first()
        if not credential:
            return False
        self.db.delete(credential)
        return True

    def verify(self, email: str, password: str) -> Optional[int]:
        credential = self.db.query(Credentials).filter(Credentials.email == email).first()
        if not credential or not verify_password(password, credential.password_hash):
            return None
        return credential.id

    def set_password(self, user_id: int, password: str) -> None:
        credential = self.db.query(Credentials).filter(Credentials.id == user_id).first()
        if not credential:
            raise NotFoundError("user_not_found", user_id=user_id)
        credential.password_hash = get_password_hash(password)
        commit_or_raise(self.db)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _check_password(password: str, min_length: int) -> None:
    if len(password) < min_length:
        raise BadRequestError("password_too_short", min_length=min_length)


def _load_profile(db: Session, user_id: int) -> Profiles:
    profile = db.query(Profiles).filter(Profiles.id == user_id).first()
    if not profile:
        raise NotFoundError("user_not_found", user_id=user_id)
    return profile


def authenticate(db: Session, email: str, password: str, credentials: CredentialStore) -> Profiles:
    user_id = credentials.verify(_normalize_email(email), password)
    if user_id is None:
        raise AuthenticationError("invalid_credentials")
    profile = db.query(Profiles).filter(Profiles.id == user_id).first()
    if not profile:
        logger.warning(f"Credential {user_id} has no profile")
        raise AuthenticationError("invalid_credentials")
    return profile


def list_users(db: Session) -> list[Profiles]:
    return db.query(Profiles).order_by(Profiles.name.asc(), Profiles.id.asc()).all()


def create_user(
    db: Session,
    actor: Profiles,
    name: str,
    email: str,
    password: str,
    role: Role,
    credentials: CredentialStore,
    min_password_length: int = 6,
) -> Profiles:
    require_manager(actor.role)
    _check_password(password, min_password_length)
    email = _normalize_email(email)
    name = name.strip()
    if not name:
        raise BadRequestError("missing_fields")

    if db.query(Profiles).filter(Profiles.email == email).first():
        raise ConflictError("email_taken", email=email)

    user_id = credentials.create(email, password)

    profile = Profiles(id=user_id, email=email, name=name, role=role, must_change_password=True)
    db.add(profile)
    try:
        commit_or_raise(db)
    except (IntegrityError, StorageError) as e:
        db.rollback()
        logger.error(f"Profile write failed for {email}; removing credential {user_id}")
        credentials.delete(user_id)
        if isinstance(e, IntegrityError):
            raise ConflictError("email_taken", email=email) from None
        raise

    db.refresh(profile)
    logger.info(f"User {profile.id} ({profile.role.value}) created by user {actor.id}")
    return profile


def delete_user(db: Session, actor: Profiles, user_id: int, credentials: CredentialStore) -> None:
    """
    Remove a user together with their requests, swaps, assignments and credential.
    A credential store on the same session is deleted in the same commit;
    any other store is cleaned up after the profile is gone.
    """
    require_manager(actor.role)
    if user_id == actor.id:
        raise BadRequestError("cannot_delete_self")

    profile = _load_profile(db, user_id)

    db.query(WeekRequests).filter(WeekRequests.user_id == user_id).delete(synchronize_session=False)
    db.query(ManualAssignments).filter(ManualAssignments.user_id == user_id).delete(synchronize_session=False)
    db.query(SwapRequests).filter(
        or_(SwapRequests.requester_id == user_id, SwapRequests.target_id == user_id)
    ).delete(synchronize_session=False)

    # keep other users' rows, just drop the reference
    db.query(WeekRequests).filter(WeekRequests.reviewed_by_user_id == user_id).update(
        {WeekRequests.reviewed_by_user_id: None}, synchronize_session=False
    )
    db.query(SwapRequests).filter(SwapRequests.last_actioned_by == user_id).update(
        {SwapRequests.last_actioned_by: None}, synchronize_session=False
    )
    db.query(ManualAssignments).filter(ManualAssignments.updated_by_user_id == user_id).update(
        {ManualAssignments.updated_by_user_id: None}, synchronize_session=False
    )
    db.query(WeekDeadlines).filter(WeekDeadlines.created_by == user_id).update(
        {WeekDeadlines.created_by: None}, synchronize_session=False
    )
    db.delete(profile)
    shared = isinstance(credentials, DatabaseCredentialStore) and credentials.db is db
    if shared:
        credentials.stage_delete(user_id)
    commit_or_raise(db)

    if not shared:
        credentials.delete(user_id)
    logger.info(f"User {user_id} deleted by user {actor.id}")


def update_role(db: Session, actor: Profiles, user_id: int, role: Role) -> Profiles:
    require_manager(actor.role)
    profile = _load_profile(db, user_id)
    profile.role = role
    commit_or_raise(db)
    db.refresh(profile)
    logger.info(f"User {user_id} role set to {role.value} by user {actor.id}")
    return profile


def change_password(
    db: Session,
    actor: Profiles,
    new_password: str,
    credentials: CredentialStore,
    min_password_length: int = 6,
) -> Profiles:
    _check_password(new_password, min_password_length)
    credentials.set_password(actor.id, new_password)
    actor.must_change_password = False
    commit_or_raise(db)
    db.refresh(actor)
    return actor
