"""Pydantic models for users and authentication."""

from datetime import datetime
from enum import Enum
from typing import Annotated

from pydantic import (
    BaseModel,
    EmailStr,
    StringConstraints,
    ValidationError,
    ValidatorFunctionWrapHandler,
    WrapValidator,
    field_validator,
)

from .common import CamelModel, Pagination

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
USERNAME_PATTERN = r"^[A-Za-z0-9_]+$"
PASSWORD_MIN_LENGTH = 6


class UserRole(str, Enum):
    """User role enumeration."""

    USER = "user"
    ADMIN = "admin"


Username = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True,
        min_length=USERNAME_MIN_LENGTH,
        max_length=USERNAME_MAX_LENGTH,
        pattern=USERNAME_PATTERN,
    ),
]


def normalize_email(value: object, handler: ValidatorFunctionWrapHandler) -> str:
    """Validate with email-validator, then lower-case the whole address."""
    if isinstance(value, str):
        value = value.strip()
    try:
        email = handler(value)
    except ValidationError:
        raise ValueError("Please provide a valid email") from None
    return email.lower()


Email = Annotated[EmailStr, WrapValidator(normalize_email)]


class RegisterRequest(BaseModel):
    """Request model for account registration."""

    username: Username
    email: Email
    password: str

    @field_validator("password")
    @classmethod
    def _password_strength(cls, v: str) -> str:
        if len(v) < PASSWORD_MIN_LENGTH:
            raise ValueError(
                f"Password must be at least {PASSWORD_MIN_LENGTH} characters long"
            )
        if not (
            any(c.islower() for c in v)
            and any(c.isupper() for c in v)
            and any(c.isdigit() for c in v)
        ):
            raise ValueError(
                "Password must contain at least one lowercase letter, "
                "one uppercase letter, and one number"
            )
        return v


class LoginRequest(BaseModel):
    """Request model for login."""

    email: Email
    password: Annotated[str, StringConstraints(min_length=1)]


class RoleUpdate(BaseModel):
    """Request model for changing a user's role."""

    role: UserRole


class UserResponse(CamelModel):
    """Public view of a user. The password hash never leaves the store."""

    id: str
    username: str
    email: str
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime


class UserRef(CamelModel):
    """User reference expanded inside task payloads."""

    id: str
    username: str
    email: str


class AuthData(BaseModel):
    user: UserResponse
    token: str


class MeData(BaseModel):
    user: UserResponse


class TokenData(BaseModel):
    token: str


class UserListData(BaseModel):
    users: list[UserResponse]
    pagination: Pagination
