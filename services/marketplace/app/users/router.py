"""
Users domain — router.

Routes:
  GET    /api/v1/users/me            Get own full profile
  PATCH  /api/v1/users/me            Update own profile (role fields stripped)
  POST   /api/v1/users/me/password   Set or change own password
  GET    /api/v1/users/{user_id}     Get any user's public profile
  PATCH  /api/v1/users/{user_id}     Update a profile (role change rejected unless admin)

All routes require a valid Bearer token.
"""
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.auth.schemas import SetPasswordRequest
from app.database import get_db
from app.users import controller as ctrl
from app.users.schemas import ProfileResponse, PublicProfileResponse, UpdateProfileRequest
from shared.models.user import CurrentUser

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=ProfileResponse, summary="Get own profile")
async def get_me(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    return await ctrl.get_me(session, current_user)


@router.patch(
    "/me",
    response_model=ProfileResponse,
    summary="Update own profile (partial — only provided fields are written)",
    description="Role fields are silently ignored unless the caller is an admin.",
)
async def update_me(
    body: UpdateProfileRequest,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    return await ctrl.update_me(session, current_user, body)


@router.post(
    "/me/password",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Set or change own password",
    description=(
        "Google-only accounts may set a password without `currentPassword`; "
        "the account then accepts both sign-in methods."
    ),
)
async def change_password(
    body: SetPasswordRequest,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> Response:
    await ctrl.change_password(session, current_user, body)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{user_id}",
    response_model=PublicProfileResponse,
    summary="Get any user's public profile",
)
async def get_user(
    user_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> PublicProfileResponse:
    return await ctrl.get_user(session, user_id)


@router.patch(
    "/{user_id}",
    response_model=ProfileResponse,
    summary="Update a user's profile",
    description=(
        "Owners may edit their own name fields. Any role change by a non-admin "
        "is rejected with 403; the stored role is left untouched."
    ),
)
async def update_user(
    user_id: uuid.UUID,
    body: UpdateProfileRequest,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    return await ctrl.update_user(session, current_user, user_id, body)
