from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from shiftboard.api.deps import get_db, get_current_user, get_credential_store, require_manager
from shiftboard.core.config import settings
from shiftboard.db.models.profiles import Profiles
from shiftboard.schemas.users import UserCreate, RoleUpdate, UserResponse
from shiftboard.services import users as user_service
from shiftboard.services.users import CredentialStore

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
def get_me(current_user: Profiles = Depends(get_current_user)):
    return current_user


@router.get("", response_model=List[UserResponse])
def list_users(
    db: Session = Depends(get_db),
    current_user: Profiles = Depends(get_current_user),
):
    """Everyone can list colleagues (needed to pick a swap partner)"""
    return user_service.list_users(db)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    current_user: Profiles = Depends(require_manager),
    credentials: CredentialStore = Depends(get_credential_store),
):
    return user_service.create_user(
        db,
        current_user,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        role=payload.role,
        credentials=credentials,
        min_password_length=settings.MIN_PASSWORD_LENGTH,
    )


@router.patch("/{user_id}/role", response_model=UserResponse)
def update_role(
    user_id: int,
    payload: RoleUpdate,
    db: Session = Depends(get_db),
    current_user: Profiles = Depends(require_manager),
):
    return user_service.update_role(db, current_user, user_id, payload.role)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: Profiles = Depends(require_manager),
    credentials: CredentialStore = Depends(get_credential_store),
):
    user_service.delete_user(db, current_user, user_id, credentials)
