"""
Users domain — pure business logic (zero FastAPI imports).
"""
from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from shared.constants import Role

from app.auth.models import User
from app.auth.policy import requested_roles

# Columns a profile update may write; everything else in the request is ignored.
_PROFILE_FIELDS = ("first_name", "last_name")


async def update_profile(
    session: AsyncSession,
    user: User,
    fields: dict[str, Any],
) -> User:
    """
    Apply an already-authorized partial update.

    None values are skipped.  Role fields reaching this function have passed
    the role policy; the first one present wins.
    """
    for name in _PROFILE_FIELDS:
        value = fields.get(name)
        if value is not None:
            setattr(user, name, value)

    roles = requested_roles(fields)
    if roles:
        user.role = Role(roles[0])

    await session.flush()
    return user
