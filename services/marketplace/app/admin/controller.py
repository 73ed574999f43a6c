"""
Admin domain — request orchestration layer.
"""
from __future__ import annotations

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from shared.constants import Role
from shared.models.user import CurrentUser

from app.admin.schemas import (
    AdminChangeRoleRequest,
    AdminCreateUserRequest,
    AdminUserListResponse,
    AdminUserResponse,
)
from app.admin.service import (
    create_admin_user as create_admin_user_svc,
    list_users as list_users_svc,
    set_active,
    set_role,
)
from app.auth.constants import AuthProvider
from app.auth.controller import raise_for_resolution
from app.auth.models import User
from app.auth.policy import RoleGuardMode
from app.auth.service import get_user_by_id
from app.exceptions import UserAlreadyActive, UserAlreadyInactive, UserNotFound
from app.users.controller import guard_role_fields

logger = logging.getLogger(__name__)


async def _load(session: AsyncSession, user_id: uuid.UUID) -> User:
    user = await get_user_by_id(session, user_id)
    if user is None:
        raise UserNotFound()
    return user


async def create_admin_user(
    session: AsyncSession,
    admin: CurrentUser,
    body: AdminCreateUserRequest,
) -> AdminUserResponse:
    resolution = await create_admin_user_svc(
        session,
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
    )
    raise_for_resolution(resolution)
    logger.info("Admin %s created admin account %s", admin.id, resolution.user.id)
    return AdminUserResponse.from_user(resolution.user)


async def list_users(
    session: AsyncSession,
    *,
    page: int,
    size: int,
    role: Role | None = None,
    auth_provider: AuthProvider | None = None,
    is_active: bool | None = None,
    search: str | None = None,
) -> AdminUserListResponse:
    users, total = await list_users_svc(
        session,
        page=page,
        size=size,
        role=role,
        auth_provider=auth_provider,
        is_active=is_active,
        search=search,
    )
    return AdminUserListResponse(
        items=[AdminUserResponse.from_user(u) for u in users],
        total=total,
        page=page,
        page_size=size,
    )


async def get_user_detail(
    session: AsyncSession,
    user_id: uuid.UUID,
) -> AdminUserResponse:
    user = await _load(session, user_id)
    return AdminUserResponse.from_user(user)


async def change_role(
    session: AsyncSession,
    admin: CurrentUser,
    user_id: uuid.UUID,
    body: AdminChangeRoleRequest,
) -> AdminUserResponse:
    user = await _load(session, user_id)
    guard_role_fields(admin, user, {"role": body.role}, RoleGuardMode.REJECT)
    previous = user.role
    user = await set_role(session, user, body.role)
    logger.info(
        "Admin %s changed role of %s from %s to %s",
        admin.id,
        user.id,
        previous.value,
        body.role.value,
    )
    return AdminUserResponse.from_user(user)


async def deactivate_user(
    session: AsyncSession,
    admin: CurrentUser,
    user_id: uuid.UUID,
) -> AdminUserResponse:
    user = await _load(session, user_id)
    if not await set_active(session, user, False):
        raise UserAlreadyInactive()
    logger.info("Admin %s deactivated user %s", admin.id, user.id)
    return AdminUserResponse.from_user(user)


async def activate_user(
    session: AsyncSession,
    admin: CurrentUser,
    user_id: uuid.UUID,
) -> AdminUserResponse:
    user = await _load(session, user_id)
    if not await set_active(session, user, True):
        raise UserAlreadyActive()
    logger.info("Admin %s reactivated user %s", admin.id, user.id)
    return AdminUserResponse.from_user(user)
