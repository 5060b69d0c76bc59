"""Request/response schemas for registration, login and the session claim."""

import re
from typing import Literal

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.core.security import (
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
)

# Submitter, approver and reader.
RoleName = Literal["user", "manager", "accountant"]

ROLE_VALUES: frozenset[str] = frozenset({"user", "manager", "accountant"})

PHONE_PATTERN = re.compile(r"^[0-9]{10,15}$")


def normalize_email(value: str) -> str:
    """Trim and lower-case an email before validation or lookup."""
    return value.strip().lower()


def normalize_role(value: str) -> str:
    """Trim and lower-case a role name."""
    return value.strip().lower()


class RegisterRequest(BaseModel):
    """New account. The password is hashed before storage and never returned."""

    name: str = Field(..., description="Display name; also the order ownership key")
    email: EmailStr = Field(..., description="Unique email (case-insensitive)")
    phone: str = Field(..., description="Unique phone number, 10-15 digits")
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_LEN,
        description="Password",
    )
    role: RoleName = Field(..., description="user, manager or accountant")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        name = v.strip()
        if not (NAME_MIN_LEN <= len(name) <= NAME_MAX_LEN):
            raise ValueError(
                f"name must be between {NAME_MIN_LEN} and {NAME_MAX_LEN} characters"
            )
        return name

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email_field(cls, v: object) -> object:
        return normalize_email(v) if isinstance(v, str) else v

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        phone = v.strip()
        if not PHONE_PATTERN.match(phone):
            raise ValueError("Invalid phone number format.")
        return phone

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role_field(cls, v: object) -> object:
        return normalize_role(v) if isinstance(v, str) else v


class LoginRequest(BaseModel):
    """Credentials plus the role the caller is signing in as."""

    email: str = Field(..., description="Account email")
    password: str = Field(..., description="Password")
    role: str = Field(..., description="Role to sign in as")


class TokenResponse(BaseModel):
    """JWT access token returned after successful login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")


class SessionClaim(BaseModel):
    """Identity and role carried by a session token for its whole lifetime."""

    id: int
    name: str
    email: str
    role: RoleName

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str
