"""
Admin domain — Pydantic V2 request/response schemas.
"""
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from shared.constants import Role
from shared.models import PaginatedResponse

from app.auth.constants import AuthProvider


class _Base(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ── Requests ─────────────────────────────────────────────────────────────────

class AdminCreateUserRequest(_Base):
    """Body for POST /admin/users — create an admin account."""

    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(default="", max_length=100)


class AdminChangeRoleRequest(_Base):
    """Body for PATCH /admin/users/{user_id}/role."""

    role: Role


# ── Responses ─────────────────────────────────────────────────────────────────

class AdminUserResponse(BaseModel):
    """Full user record as seen by admins."""

    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )

    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    role: Role
    auth_provider: AuthProvider
    google_linked: bool = False
    email_verified: bool
    is_active: bool
    last_login_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user) -> "AdminUserResponse":
        response = cls.model_validate(user)
        return response.model_copy(update={"google_linked": user.google_id is not None})


AdminUserListResponse = PaginatedResponse[AdminUserResponse]
