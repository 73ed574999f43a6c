"""
Marketplace — Pydantic V2 request/response schemas for the auth domain.

Separation of concerns:
  - *Request  models:  input from the client (strict extra="forbid")
  - *Response models:  output to the client (no write-only fields exposed)

JSON keys are camelCase on the wire; snake_case is accepted on input too.
"""
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from shared.constants import Role

from app.auth.constants import SELF_SERVICE_ROLES, AuthProvider


# ── Shared base ───────────────────────────────────────────────────────────────

class _Base(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class _ResponseBase(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


def _self_service_role(role: Role | None) -> Role | None:
    if role is not None and role not in SELF_SERVICE_ROLES:
        raise ValueError("role must be 'traveler' or 'service_provider'")
    return role


# ── Email + Password flow ─────────────────────────────────────────────────────

class RegisterRequest(_Base):
    """Body for POST /auth/register (email + password flow)."""

    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(default="", max_length=100)
    role: Role = Role.TRAVELER

    @field_validator("role")
    @classmethod
    def check_self_service_role(cls, role: Role | None) -> Role | None:
        return _self_service_role(role)


class LoginRequest(_Base):
    """Body for POST /auth/login."""

    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


# ── Google Sign-In ────────────────────────────────────────────────────────────

class GoogleSignInRequest(_Base):
    """
    Body for POST /auth/google.

    role is only consulted the first time a Google identity signs in; for
    returning or linked accounts it is ignored.
    """

    id_token: str = Field(min_length=1)
    role: Role | None = None

    @field_validator("role")
    @classmethod
    def check_self_service_role(cls, role: Role | None) -> Role | None:
        return _self_service_role(role)


# ── Password management ───────────────────────────────────────────────────────

class SetPasswordRequest(_Base):
    """Body for POST /users/me/password. current_password is omitted by Google-only accounts."""

    current_password: str | None = Field(default=None, max_length=128)
    new_password: str = Field(min_length=8, max_length=128)


# ── Response models ───────────────────────────────────────────────────────────

class UserResponse(_ResponseBase):
    """Account as returned to its owner after register / login / sign-in."""

    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    role: Role
    auth_provider: AuthProvider
    email_verified: bool
    is_active: bool
    created_at: datetime


class AuthResponse(_ResponseBase):
    """
    Returned by register / login / Google sign-in.

    While needs_role_selection is true, user and token are null: the client
    must repeat POST /auth/google with a role.
    """

    user: UserResponse | None = None
    token: str | None = None
    token_type: str = "bearer"
    expires_in: int | None = None  # access token lifetime in seconds
    needs_role_selection: bool = False
