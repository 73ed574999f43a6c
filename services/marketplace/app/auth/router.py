"""
Marketplace — auth router.

Only HTTP concerns live here:
  - Route declarations, HTTP methods, status codes, response_model
  - Dependency injection (session, settings, Google verifier)
  - Forwarding to the controller

Zero business logic. Zero DB queries.
"""
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.rate_limit import limiter
from app.auth.controller import (
    google_sign_in as google_sign_in_controller,
    login as login_controller,
    register as register_controller,
)
from app.auth.dependencies import get_google_verifier
from app.auth.google import GoogleVerifier
from app.auth.schemas import (
    AuthResponse,
    GoogleSignInRequest,
    LoginRequest,
    RegisterRequest,
)
from app.config import Settings, get_settings
from app.database import get_db

router = APIRouter(prefix="/auth", tags=["auth"])


# ── Email + Password ──────────────────────────────────────────────────────────

@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account (email + password)",
)
@limiter.limit("10/hour")
async def register(
    request: Request,
    body: RegisterRequest,
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    return await register_controller(session, body, settings)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login with email + password",
)
@limiter.limit("10/minute")
async def login(
    request: Request,
    body: LoginRequest,
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    return await login_controller(session, body, settings)


# ── Google Sign-In ────────────────────────────────────────────────────────────

@router.post(
    "/google",
    response_model=AuthResponse,
    summary="Sign in with a Google ID token",
    description=(
        "Verifies the ID token with Google. Returning users get a token "
        "immediately. A brand-new identity without `role` gets "
        "`needsRoleSelection: true` and must repeat the call with a role."
    ),
)
@limiter.limit("20/minute")
async def google_sign_in(
    request: Request,
    body: GoogleSignInRequest,
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    verifier: GoogleVerifier = Depends(get_google_verifier),
) -> AuthResponse:
    return await google_sign_in_controller(session, body, settings, verifier)
