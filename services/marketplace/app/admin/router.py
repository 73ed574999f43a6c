"""
Admin domain — user management routes.

Routes:
  POST  /api/v1/admin/users                          Create an admin account
  GET   /api/v1/admin/users                          List users with filters
  GET   /api/v1/admin/users/{user_id}                Single user detail
  PATCH /api/v1/admin/users/{user_id}/role           Change a user's role
  PATCH /api/v1/admin/users/{user_id}/deactivate     Block sign-in
  PATCH /api/v1/admin/users/{user_id}/activate       Restore sign-in

Every route requires the admin role in the access token.
Zero business logic. Zero DB queries.
"""
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.admin import controller as ctrl
from app.admin.schemas import (
    AdminChangeRoleRequest,
    AdminCreateUserRequest,
    AdminUserListResponse,
    AdminUserResponse,
)
from app.auth.constants import AuthProvider
from app.auth.dependencies import require_admin
from app.database import get_db
from shared.constants import Role
from shared.models.user import CurrentUser

router = APIRouter(prefix="/admin/users", tags=["admin-users"])


@router.post(
    "",
    response_model=AdminUserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="[Admin] Create a new admin account",
    description="Creates a password account with the admin role and email_verified=True.",
)
async def create_admin_user(
    body: AdminCreateUserRequest,
    admin: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> AdminUserResponse:
    return await ctrl.create_admin_user(session, admin, body)


@router.get(
    "",
    response_model=AdminUserListResponse,
    summary="[Admin] List all users with filters and pagination",
)
async def list_users(
    page: int = Query(1, ge=1, description="Page number"),
    size: int = Query(20, ge=1, le=100, description="Items per page"),
    role: Role | None = Query(None, description="Filter by role"),
    auth_provider: AuthProvider | None = Query(
        None, alias="authProvider", description="Filter by sign-in method"
    ),
    is_active: bool | None = Query(None, alias="isActive", description="Filter by active status"),
    search: str | None = Query(None, max_length=200, description="Search by name or email"),
    admin: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> AdminUserListResponse:
    return await ctrl.list_users(
        session,
        page=page,
        size=size,
        role=role,
        auth_provider=auth_provider,
        is_active=is_active,
        search=search,
    )


@router.get(
    "/{user_id}",
    response_model=AdminUserResponse,
    summary="[Admin] Get a single user's full details",
)
async def get_user_detail(
    user_id: uuid.UUID,
    admin: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> AdminUserResponse:
    return await ctrl.get_user_detail(session, user_id)


@router.patch(
    "/{user_id}/role",
    response_model=AdminUserResponse,
    summary="[Admin] Change a user's role",
    description="Takes effect on the user's next sign-in; issued tokens keep the old role.",
)
async def change_role(
    user_id: uuid.UUID,
    body: AdminChangeRoleRequest,
    admin: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> AdminUserResponse:
    return await ctrl.change_role(session, admin, user_id, body)


@router.patch(
    "/{user_id}/deactivate",
    response_model=AdminUserResponse,
    summary="[Admin] Deactivate a user — blocks password and Google sign-in",
)
async def deactivate_user(
    user_id: uuid.UUID,
    admin: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> AdminUserResponse:
    return await ctrl.deactivate_user(session, admin, user_id)


@router.patch(
    "/{user_id}/activate",
    response_model=AdminUserResponse,
    summary="[Admin] Reactivate a user",
)
async def activate_user(
    user_id: uuid.UUID,
    admin: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> AdminUserResponse:
    return await ctrl.activate_user(session, admin, user_id)
