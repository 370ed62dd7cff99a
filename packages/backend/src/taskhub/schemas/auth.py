"""Schemas for registration, login and user management.

Field checks here are the thin input-format layer (non-blank, length);
they never make an authorization decision.
"""

import uuid
from datetime import datetime

from pydantic import Field, field_validator

from taskhub.auth.identity import Role
from taskhub.config import settings
from taskhub.schemas.base import CamelModel

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


def _check_password_length(value: str) -> str:
    if len(value) < settings.password_min_length:
        raise ValueError(
            f"Password must be at least {settings.password_min_length} characters"
        )
    return value


class RegisterRequest(CamelModel):
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(..., max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    organization_name: str = Field(..., min_length=1, max_length=255)

    @field_validator("password")
    @classmethod
    def check_password_length(cls, value: str) -> str:
        return _check_password_length(value)


class LoginRequest(CamelModel):
    email: str
    password: str


class AuthResponse(CamelModel):
    """Identity summary + token returned by register and login."""

    token: str
    type: str = "Bearer"
    user_id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    role: Role
    tenant_id: uuid.UUID


class UserCreate(CamelModel):
    """ADMIN adds a user to their own tenant."""

    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(..., max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: Role = Role.MEMBER

    @field_validator("password")
    @classmethod
    def check_password_length(cls, value: str) -> str:
        return _check_password_length(value)


class RoleChange(CamelModel):
    role: Role


class UserRead(CamelModel):
    id: uuid.UUID
    tenant_id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    role: Role
    created_at: datetime
