from typing import Optional

from pydantic import EmailStr, Field

from .base import CamelModel


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginRequest(CamelModel):
    email: str
    password: str


class RefreshRequest(CamelModel):
    refresh_token: Optional[str] = None


class UserOut(CamelModel):
    id: str
    email: str
    # password_hash and refresh tokens never leave the server


class AuthResponse(CamelModel):
    access_token: str
    refresh_token: str
    user: UserOut
