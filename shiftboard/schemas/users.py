from pydantic import BaseModel, Field
from datetime import datetime

from shiftboard.services.rules.types import Role


class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str
    role: Role = Role.EMPLOYEE


class RoleUpdate(BaseModel):
    role: Role


class UserResponse(BaseModel):
    id: int
    email: str
    name: str
    role: Role
    must_change_password: bool
    created_at: datetime

    class Config:
        from_attributes = True
