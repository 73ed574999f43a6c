"""
Marketplace — auth-specific FastAPI dependencies.

These wrap the shared auth dependencies and add marketplace context
(role guards, the account lookup for writes that reference the caller,
the Google ID token verifier).
"""
from __future__ import annotations

from functools import partial

from fastapi import Depends
from shared.auth.dependencies import get_current_user_required
from shared.models.user import CurrentUser
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.google import GoogleVerifier, verify_google_id_token
from app.auth.service import get_user_by_id
from app.config import Settings, get_settings
from app.database import get_db
from app.exceptions import AdminRequired, UnknownAccount, UserInactive


# ── Base user dependencies ────────────────────────────────────────────────────

# Alias the shared dependencies so routes import from here, not from shared
# directly.
get_current_user = get_current_user_required


async def get_current_account(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> CurrentUser:
    """
    Like get_current_user, but the token's subject must still exist and be active.

    Used by routes that write rows keyed by the caller's id (cart, listings),
    so a token for a deleted account never produces orphan rows.
    """
    user = await get_user_by_id(session, current_user.id)
    if user is None:
        raise UnknownAccount()
    if not user.is_active:
        raise UserInactive()
    return current_user


# ── Role guards ───────────────────────────────────────────────────────────────

def require_admin(
    current_user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """Raise 403 unless the token carries the admin role."""
    if not current_user.is_admin:
        raise AdminRequired()
    return current_user


# ── Google Sign-In ────────────────────────────────────────────────────────────

def get_google_verifier(settings: Settings = Depends(get_settings)) -> GoogleVerifier:
    """Tests override this dependency with a stub verifier."""
    return partial(verify_google_id_token, client_id=settings.google_client_id)
