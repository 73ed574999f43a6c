"""
Marketplace — account resolver: pure business logic for authentication.

Rules:
  - Zero FastAPI imports.
  - Zero direct DB driver calls — only SQLAlchemy async session.
  - All I/O functions are async def.
  - Expected outcomes (bad password, duplicate email, pending role choice)
    come back as an AccountResolution; nothing is raised for them.
  - A resolution either leaves the session untouched or carries the full
    record change; the request-scoped transaction commits or rolls back as one.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shared.constants import Role

from app.auth.constants import SELF_SERVICE_ROLES, AuthErrorCode, AuthProvider
from app.auth.google import GoogleIdentity
from app.auth.models import User
from app.auth.utils import hash_password, normalize_email, verify_password

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AccountResolution:
    user: User | None = None
    error: AuthErrorCode | None = None
    # Brand-new Google identity without a chosen role: nothing was persisted.
    needs_role_selection: bool = False
    created: bool = False
    linked: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


def _failed(code: AuthErrorCode) -> AccountResolution:
    return AccountResolution(error=code)


def provider_for(user: User) -> AuthProvider:
    """Derive the auth_provider tag from the credentials present on the record."""
    has_password = user.password_hash is not None
    has_google = user.google_id is not None
    if has_password and has_google:
        return AuthProvider.BOTH
    if has_google:
        return AuthProvider.GOOGLE
    return AuthProvider.EMAIL


# ── User queries ──────────────────────────────────────────────────────────────

async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(
        select(User).where(func.lower(User.email) == normalize_email(email))
    )
    return result.scalar_one_or_none()


async def get_user_by_google_id(
    session: AsyncSession, google_id: str
) -> User | None:
    result = await session.execute(select(User).where(User.google_id == google_id))
    return result.scalar_one_or_none()


async def get_user_by_id(
    session: AsyncSession, user_id: uuid.UUID
) -> User | None:
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


# ── Audit: last login ─────────────────────────────────────────────────────────

async def record_login(session: AsyncSession, user: User) -> None:
    """Stamp last_login_at without ending the transaction."""
    user.last_login_at = datetime.now(timezone.utc)
    await session.flush()


async def insert_user(session: AsyncSession, user: User) -> AccountResolution:
    session.add(user)
    try:
        await session.flush()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email.
        await session.rollback()
        return _failed(AuthErrorCode.DUPLICATE_EMAIL)
    return AccountResolution(user=user, created=True)


# ── Registration (email + password) ──────────────────────────────────────────

async def register_user(
    session: AsyncSession,
    *,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    role: Role,
) -> AccountResolution:
    """
    Create a new account with auth_provider=email.

    Guard clauses run first — the happy path is last.  Admin accounts can
    never be self-registered.
    """
    if role not in SELF_SERVICE_ROLES:
        return _failed(AuthErrorCode.ROLE_NOT_ALLOWED)
    if await get_user_by_email(session, email) is not None:
        return _failed(AuthErrorCode.DUPLICATE_EMAIL)

    user = User(
        email=normalize_email(email),
        password_hash=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        role=role,
        auth_provider=AuthProvider.EMAIL,
    )
    return await insert_user(session, user)


# ── Authentication (email + password) ────────────────────────────────────────

async def authenticate_user(
    session: AsyncSession,
    email: str,
    password: str,
) -> AccountResolution:
    """
    Verify credentials and return the User.

    Unknown email, Google-only account (no password) and wrong password all
    produce the same INVALID_CREDENTIALS so the caller cannot tell them apart.
    """
    user = await get_user_by_email(session, email)
    if user is None or user.password_hash is None:
        return _failed(AuthErrorCode.INVALID_CREDENTIALS)
    if not verify_password(password, user.password_hash):
        return _failed(AuthErrorCode.INVALID_CREDENTIALS)
    if not user.is_active:
        return _failed(AuthErrorCode.ACCOUNT_INACTIVE)
    await record_login(session, user)
    return AccountResolution(user=user)


# ── Google sign-in ────────────────────────────────────────────────────────────

async def resolve_google_account(
    session: AsyncSession,
    identity: GoogleIdentity,
    *,
    role: Role | None = None,
) -> AccountResolution:
    """
    Find, link or create the account behind a verified Google identity.

    1. Known google_id     → returning user; the supplied role is ignored.
    2. Known email only    → link: attach google_id, auth_provider=both,
                             role and password hash untouched.
    3. Unknown identity    → needs a role choice; created once it arrives.

    The role is decided exactly once per account and never overwritten here.
    """
    user = await get_user_by_google_id(session, identity.google_id)
    if user is not None:
        if not user.is_active:
            return _failed(AuthErrorCode.ACCOUNT_INACTIVE)
        await record_login(session, user)
        return AccountResolution(user=user)

    user = await get_user_by_email(session, identity.email)
    if user is not None:
        if user.google_id is not None:
            # The email belongs to an account bound to a different Google identity.
            return _failed(AuthErrorCode.ACCOUNT_CONFLICT)
        if not user.is_active:
            return _failed(AuthErrorCode.ACCOUNT_INACTIVE)
        user.google_id = identity.google_id
        user.auth_provider = provider_for(user)
        user.email_verified = True
        await record_login(session, user)
        logger.info("Linked Google identity to user %s (auth_provider=%s)", user.id, user.auth_provider.value)
        return AccountResolution(user=user, linked=True)

    if role is None:
        return AccountResolution(needs_role_selection=True)
    if role not in SELF_SERVICE_ROLES:
        return _failed(AuthErrorCode.ROLE_NOT_ALLOWED)

    new_user = User(
        email=normalize_email(identity.email),
        google_id=identity.google_id,
        first_name=identity.first_name,
        last_name=identity.last_name,
        role=role,
        auth_provider=AuthProvider.GOOGLE,
        email_verified=identity.email_verified,
        last_login_at=datetime.now(timezone.utc),
    )
    resolution = await insert_user(session, new_user)
    if resolution.ok:
        logger.info("Created Google account %s with role %s", new_user.id, role.value)
    return resolution


# ── Password set / change ─────────────────────────────────────────────────────

async def set_password(
    session: AsyncSession,
    user: User,
    *,
    new_password: str,
    current_password: str | None = None,
) -> AccountResolution:
    """
    Set or change the account password.

    A Google-only account has no password to confirm; setting one links the
    email provider and moves auth_provider from google to both.  Any account
    that already has a password must confirm it first.
    """
    if user.password_hash is not None:
        if current_password is None or not verify_password(current_password, user.password_hash):
            return _failed(AuthErrorCode.INVALID_CREDENTIALS)

    user.password_hash = hash_password(new_password)
    user.auth_provider = provider_for(user)
    await session.flush()
    return AccountResolution(user=user)
