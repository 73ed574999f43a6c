"""
Marketplace — auth controller (request orchestration layer).

Responsibilities:
  - Receive validated input from the router.
  - Call service functions (which own business logic).
  - Translate AccountResolution errors into domain HTTP exceptions.
  - Mint the access token and compose the response model.

No framework validation logic here — that belongs in schemas.py.
No business logic here — that belongs in service.py.
"""
from __future__ import annotations

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from shared.auth.tokens import create_access_token

from app.auth.constants import AuthErrorCode
from app.auth.google import GoogleVerifier
from app.auth.models import User
from app.auth.schemas import (
    AuthResponse,
    GoogleSignInRequest,
    LoginRequest,
    RegisterRequest,
    SetPasswordRequest,
    UserResponse,
)
from app.auth.service import (
    AccountResolution,
    authenticate_user,
    register_user,
    resolve_google_account,
    set_password as set_password_service,
)
from app.config import Settings
from app.exceptions import (
    AccountConflict,
    CurrentPasswordMismatch,
    DuplicateEmail,
    InvalidCredentials,
    InvalidGoogleToken,
    RoleNotAllowed,
    UserInactive,
)

_ERRORS: dict[AuthErrorCode, type[HTTPException]] = {
    AuthErrorCode.INVALID_CREDENTIALS: InvalidCredentials,
    AuthErrorCode.DUPLICATE_EMAIL: DuplicateEmail,
    AuthErrorCode.ROLE_NOT_ALLOWED: RoleNotAllowed,
    AuthErrorCode.ACCOUNT_INACTIVE: UserInactive,
    AuthErrorCode.ACCOUNT_CONFLICT: AccountConflict,
}


# ── Helpers ───────────────────────────────────────────────────────────────────

def raise_for_resolution(resolution: AccountResolution) -> None:
    if resolution.error is not None:
        raise _ERRORS[resolution.error]()


def _issue_token(user: User, settings: Settings) -> str:
    return create_access_token(
        user_id=user.id,
        email=user.email,
        role=user.role,
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        expire_seconds=settings.jwt_expire_seconds,
    )


def _auth_response(user: User, settings: Settings) -> AuthResponse:
    return AuthResponse(
        user=UserResponse.model_validate(user),
        token=_issue_token(user, settings),
        expires_in=settings.jwt_expire_seconds,
    )


# ── Register ──────────────────────────────────────────────────────────────────

async def register(
    session: AsyncSession,
    body: RegisterRequest,
    settings: Settings,
) -> AuthResponse:
    resolution = await register_user(
        session,
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
        role=body.role,
    )
    raise_for_resolution(resolution)
    return _auth_response(resolution.user, settings)


# ── Login ─────────────────────────────────────────────────────────────────────

async def login(
    session: AsyncSession,
    body: LoginRequest,
    settings: Settings,
) -> AuthResponse:
    resolution = await authenticate_user(session, body.email, body.password)
    raise_for_resolution(resolution)
    return _auth_response(resolution.user, settings)


# ── Google Sign-In ────────────────────────────────────────────────────────────

async def google_sign_in(
    session: AsyncSession,
    body: GoogleSignInRequest,
    settings: Settings,
    verifier: GoogleVerifier,
) -> AuthResponse:
    identity = await verifier(body.id_token)
    if identity is None:
        raise InvalidGoogleToken()

    resolution = await resolve_google_account(session, identity, role=body.role)
    raise_for_resolution(resolution)
    if resolution.needs_role_selection:
        return AuthResponse(needs_role_selection=True)
    return _auth_response(resolution.user, settings)


# ── Password set / change ─────────────────────────────────────────────────────

async def set_password(
    session: AsyncSession,
    user: User,
    body: SetPasswordRequest,
) -> None:
    resolution = await set_password_service(
        session,
        user,
        new_password=body.new_password,
        current_password=body.current_password,
    )
    if resolution.error is AuthErrorCode.INVALID_CREDENTIALS:
        raise CurrentPasswordMismatch()
    raise_for_resolution(resolution)
