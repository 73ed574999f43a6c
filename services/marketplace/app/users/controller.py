"""
Users domain — request orchestration (thin glue between router and service).

Every profile write passes through the role policy in the mode its endpoint
declares: PATCH /users/me strips role fields, PATCH /users/{user_id} rejects.
"""
from __future__ import annotations

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from shared.models.user import CurrentUser

from app.auth import controller as auth_ctrl
from app.auth.models import User
from app.auth.policy import (
    RoleDenialReason,
    RoleGuardMode,
    check_role_change,
    strip_role_fields,
)
from app.auth.schemas import SetPasswordRequest
from app.auth.service import get_user_by_id
from app.exceptions import (
    AdminRequired,
    NotAccountOwner,
    RoleModificationForbidden,
    UserNotFound,
)
from app.users.schemas import ProfileResponse, PublicProfileResponse, UpdateProfileRequest
from app.users.service import update_profile

logger = logging.getLogger(__name__)

_DENIALS = {
    RoleDenialReason.ROLE_MODIFICATION_FORBIDDEN: RoleModificationForbidden,
    RoleDenialReason.ADMIN_REQUIRED: AdminRequired,
}


async def _load(session: AsyncSession, user_id: uuid.UUID) -> User:
    user = await get_user_by_id(session, user_id)
    if user is None:
        raise UserNotFound()
    return user


def guard_role_fields(
    actor: CurrentUser,
    target: User,
    fields: dict,
    mode: RoleGuardMode,
) -> dict:
    """Return the fields that may be applied, or raise when the policy rejects them."""
    if mode is RoleGuardMode.STRIP:
        return strip_role_fields(actor, fields)

    decision = check_role_change(actor, target.id, target.role, fields)
    if not decision.allowed:
        logger.warning(
            "Denied role change on user %s by %s (role=%s): %s",
            target.id,
            actor.id,
            actor.role.value,
            decision.reason.value,
        )
        raise _DENIALS[decision.reason]()
    return dict(fields)


async def get_me(session: AsyncSession, current_user: CurrentUser) -> ProfileResponse:
    user = await _load(session, current_user.id)
    return ProfileResponse.model_validate(user)


async def update_me(
    session: AsyncSession,
    current_user: CurrentUser,
    body: UpdateProfileRequest,
) -> ProfileResponse:
    user = await _load(session, current_user.id)
    fields = guard_role_fields(
        current_user, user, body.model_dump(exclude_unset=True), RoleGuardMode.STRIP
    )
    user = await update_profile(session, user, fields)
    return ProfileResponse.model_validate(user)


async def change_password(
    session: AsyncSession,
    current_user: CurrentUser,
    body: SetPasswordRequest,
) -> None:
    user = await _load(session, current_user.id)
    await auth_ctrl.set_password(session, user, body)


async def get_user(session: AsyncSession, user_id: uuid.UUID) -> PublicProfileResponse:
    user = await _load(session, user_id)
    return PublicProfileResponse.model_validate(user)


async def update_user(
    session: AsyncSession,
    current_user: CurrentUser,
    user_id: uuid.UUID,
    body: UpdateProfileRequest,
) -> ProfileResponse:
    user = await _load(session, user_id)
    fields = guard_role_fields(
        current_user, user, body.model_dump(exclude_unset=True), RoleGuardMode.REJECT
    )
    if user.id != current_user.id and not current_user.is_admin:
        raise NotAccountOwner()
    user = await update_profile(session, user, fields)
    return ProfileResponse.model_validate(user)
