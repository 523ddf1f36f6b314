from pydantic import BaseModel


class LoginRequest(BaseModel):
    email: str
    password: str


class PasswordChange(BaseModel):
    new_password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
