# app/schemas/user.py
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from sqlmodel import SQLModel

Role = Literal["customer", "admin"]

MIN_PASSWORD_LENGTH = 6


def _validate_password(v: str) -> str:
    if len(v) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"password must be at least {MIN_PASSWORD_LENGTH} characters")
    return v


class UserRead(SQLModel):
    """Response schema returned to clients (never includes the password)."""

    id: int
    name: str
    email: str
    phone: str | None = None
    role: Role
    created_at: datetime


class RegisterRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    email: EmailStr
    password: str
    phone: str | None = Field(default=None, max_length=20)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return _validate_password(v)


class LoginRequest(SQLModel):
    email: EmailStr
    password: str


class AuthResponse(BaseModel):
    """
    Login/register response. Key names match what the SPA stores
    (`token`, `refreshToken`).
    """

    model_config = ConfigDict(populate_by_name=True)

    user: UserRead
    token: str
    refresh_token: str = Field(alias="refreshToken")


class RefreshRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    refresh_token: str = Field(alias="refreshToken")


class TokenPair(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str
    refresh_token: str = Field(alias="refreshToken")


class ProfileUpdate(BaseModel):
    """
    Partial profile update.

    Changing the password requires the current one.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=20)
    email: EmailStr | None = None
    current_password: str | None = Field(default=None, alias="currentPassword")
    new_password: str | None = Field(default=None, alias="newPassword")

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("new_password")
    @classmethod
    def check_password(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return _validate_password(v)


class ForgotPasswordRequest(SQLModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str
    new_password: str = Field(alias="newPassword")

    @field_validator("new_password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return _validate_password(v)


class UserRoleUpdate(SQLModel):
    """
    Admin-only role update schema.
    """

    model_config = ConfigDict(extra="forbid")
    role: Role


class CustomerRead(UserRead):
    order_count: int = 0
    total_spent: float = 0.0


class CustomerPage(SQLModel):
    customers: list[CustomerRead]
    page: int
    pages: int
    total: int
