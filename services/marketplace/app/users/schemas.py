"""
Users domain — Pydantic V2 request/response schemas.
"""
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from shared.constants import Role

from app.auth.constants import AuthProvider


class _Base(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ── Request ───────────────────────────────────────────────────────────────────

class UpdateProfileRequest(_Base):
    """
    PATCH /users/me and PATCH /users/{user_id}. Only provided fields are written.

    role and user_type (camelCase: userType) are two spellings of the same
    field; whether a caller may set them is decided by the role policy.
    """

    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    role: Role | None = None
    user_type: Role | None = None


# ── Response ──────────────────────────────────────────────────────────────────

class ProfileResponse(BaseModel):
    """Own profile, returned to the account holder."""

    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )

    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    role: Role
    auth_provider: AuthProvider
    email_verified: bool
    is_active: bool
    last_login_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class PublicProfileResponse(BaseModel):
    """What any authenticated user may see about another account."""

    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )

    id: uuid.UUID
    first_name: str
    last_name: str
    role: Role
    created_at: datetime
