from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shiftboard.api.deps import get_db, get_current_user, get_credential_store
from shiftboard.core.config import settings
from shiftboard.core.security import create_access_token
from shiftboard.db.models.profiles import Profiles
from shiftboard.schemas.auth import Token, LoginRequest, PasswordChange
from shiftboard.schemas.users import UserResponse
from shiftboard.services.users import CredentialStore, authenticate, change_password

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=Token)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    credentials: CredentialStore = Depends(get_credential_store),
):
    user = authenticate(db, payload.email, payload.password, credentials)
    token = create_access_token(data={"sub": user.id, "email": user.email, "role": user.role})
    return Token(access_token=token)


@router.post("/change-password", response_model=UserResponse)
def change_own_password(
    payload: PasswordChange,
    db: Session = Depends(get_db),
    current_user: Profiles = Depends(get_current_user),
    credentials: CredentialStore = Depends(get_credential_store),
):
    """Also clears the must-change-password flag set on new accounts"""
    return change_password(db, current_user, payload.new_password, credentials, settings.MIN_PASSWORD_LENGTH)
