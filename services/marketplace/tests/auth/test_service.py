import pytest

from app.auth.constants import AuthErrorCode, AuthProvider
from app.auth.google import GoogleIdentity
from app.auth.service import (
    authenticate_user,
    get_user_by_email,
    register_user,
    resolve_google_account,
    set_password,
)
from app.auth.utils import verify_password
from shared.constants import Role


def _identity(google_id: str = "g-100", email: str = "new@example.com") -> GoogleIdentity:
    return GoogleIdentity(
        google_id=google_id,
        email=email,
        first_name="Amani",
        last_name="Mushi",
        email_verified=True,
    )


# ── Registration ──────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_register_user(db_session) -> None:
    result = await register_user(
        db_session,
        email="  Svc@Example.com ",
        password="secret123",
        first_name="Neema",
        last_name="Kileo",
        role=Role.SERVICE_PROVIDER,
    )
    assert result.ok and result.created
    user = result.user
    assert user.email == "svc@example.com"
    assert user.role == Role.SERVICE_PROVIDER
    assert user.auth_provider == AuthProvider.EMAIL
    assert user.password_hash != "secret123"
    assert verify_password("secret123", user.password_hash)


@pytest.mark.asyncio
async def test_register_duplicate_email(db_session) -> None:
    await register_user(
        db_session, email="dup@example.com", password="password1",
        first_name="A", last_name="", role=Role.TRAVELER,
    )
    result = await register_user(
        db_session, email="DUP@example.com", password="password2",
        first_name="B", last_name="", role=Role.TRAVELER,
    )
    assert not result.ok
    assert result.error is AuthErrorCode.DUPLICATE_EMAIL
    assert result.user is None


@pytest.mark.asyncio
async def test_register_admin_role_not_allowed(db_session) -> None:
    result = await register_user(
        db_session, email="root@example.com", password="password1",
        first_name="Root", last_name="", role=Role.ADMIN,
    )
    assert result.error is AuthErrorCode.ROLE_NOT_ALLOWED
    assert await get_user_by_email(db_session, "root@example.com") is None


# ── Password login ────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_authenticate_user(db_session) -> None:
    await register_user(
        db_session, email="auth@example.com", password="mypassword",
        first_name="A", last_name="", role=Role.TRAVELER,
    )
    result = await authenticate_user(db_session, " AUTH@example.com", "mypassword")
    assert result.ok
    assert result.user.email == "auth@example.com"
    assert result.user.last_login_at is not None


@pytest.mark.asyncio
async def test_authenticate_wrong_password(db_session) -> None:
    await register_user(
        db_session, email="wrong@example.com", password="rightpass",
        first_name="A", last_name="", role=Role.TRAVELER,
    )
    result = await authenticate_user(db_session, "wrong@example.com", "wrongpass")
    assert result.error is AuthErrorCode.INVALID_CREDENTIALS
    assert result.user is None


@pytest.mark.asyncio
async def test_authenticate_unknown_email(db_session) -> None:
    result = await authenticate_user(db_session, "ghost@example.com", "whatever")
    assert result.error is AuthErrorCode.INVALID_CREDENTIALS


@pytest.mark.asyncio
async def test_authenticate_google_only_account_has_no_password(db_session, make_user) -> None:
    await make_user("g-only@example.com", password=None, google_id="g-1")
    result = await authenticate_user(db_session, "g-only@example.com", "anything")
    assert result.error is AuthErrorCode.INVALID_CREDENTIALS


@pytest.mark.asyncio
async def test_authenticate_inactive_account(db_session, make_user) -> None:
    await make_user("inactive@example.com", is_active=False)
    result = await authenticate_user(db_session, "inactive@example.com", "correct-horse-battery")
    assert result.error is AuthErrorCode.ACCOUNT_INACTIVE

    # A wrong password on an inactive account reveals nothing about its state.
    result = await authenticate_user(db_session, "inactive@example.com", "nope")
    assert result.error is AuthErrorCode.INVALID_CREDENTIALS


# ── Google sign-in ────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_google_new_identity_without_role_needs_selection(db_session) -> None:
    result = await resolve_google_account(db_session, _identity())
    assert result.ok
    assert result.needs_role_selection
    assert result.user is None
    assert await get_user_by_email(db_session, "new@example.com") is None


@pytest.mark.asyncio
async def test_google_new_identity_with_role_is_created(db_session) -> None:
    result = await resolve_google_account(db_session, _identity(), role=Role.SERVICE_PROVIDER)
    assert result.ok and result.created
    user = result.user
    assert user.role == Role.SERVICE_PROVIDER
    assert user.google_id == "g-100"
    assert user.auth_provider == AuthProvider.GOOGLE
    assert user.password_hash is None
    assert user.email_verified is True


@pytest.mark.asyncio
async def test_google_new_identity_with_admin_role_rejected(db_session) -> None:
    result = await resolve_google_account(db_session, _identity(), role=Role.ADMIN)
    assert result.error is AuthErrorCode.ROLE_NOT_ALLOWED
    assert await get_user_by_email(db_session, "new@example.com") is None


@pytest.mark.asyncio
async def test_google_returning_user_keeps_stored_role(db_session, make_user) -> None:
    await make_user("back@example.com", role=Role.SERVICE_PROVIDER, password=None, google_id="g-back")
    result = await resolve_google_account(
        db_session, _identity("g-back", "back@example.com"), role=Role.TRAVELER
    )
    assert result.ok
    assert not result.needs_role_selection
    assert not result.created
    assert result.user.role == Role.SERVICE_PROVIDER


@pytest.mark.asyncio
async def test_google_links_existing_password_account(db_session, make_user) -> None:
    existing = await make_user("link@example.com", role=Role.SERVICE_PROVIDER)
    original_hash = existing.password_hash

    result = await resolve_google_account(
        db_session, _identity("g-link", "link@example.com"), role=Role.TRAVELER
    )
    assert result.ok and result.linked
    user = result.user
    assert user.id == existing.id
    assert user.google_id == "g-link"
    assert user.auth_provider == AuthProvider.BOTH
    assert user.password_hash == original_hash
    assert user.role == Role.SERVICE_PROVIDER


@pytest.mark.asyncio
async def test_google_email_bound_to_other_identity_conflicts(db_session, make_user) -> None:
    await make_user("taken@example.com", password=None, google_id="g-original")
    result = await resolve_google_account(db_session, _identity("g-other", "taken@example.com"))
    assert result.error is AuthErrorCode.ACCOUNT_CONFLICT


@pytest.mark.asyncio
async def test_google_inactive_account_rejected(db_session, make_user) -> None:
    await make_user("off@example.com", password=None, google_id="g-off", is_active=False)
    result = await resolve_google_account(db_session, _identity("g-off", "off@example.com"))
    assert result.error is AuthErrorCode.ACCOUNT_INACTIVE


# ── Password set / change ─────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_google_only_user_setting_password_becomes_both(db_session, make_user) -> None:
    await make_user("setpw@example.com", password=None, google_id="g-setpw")
    user = await get_user_by_email(db_session, "setpw@example.com")

    result = await set_password(db_session, user, new_password="brand-new-pass")
    assert result.ok
    assert user.auth_provider == AuthProvider.BOTH
    assert verify_password("brand-new-pass", user.password_hash)

    login = await authenticate_user(db_session, "setpw@example.com", "brand-new-pass")
    assert login.ok


@pytest.mark.asyncio
async def test_change_password_requires_current_password(db_session, make_user) -> None:
    await make_user("change@example.com")
    user = await get_user_by_email(db_session, "change@example.com")

    missing = await set_password(db_session, user, new_password="another-pass")
    assert missing.error is AuthErrorCode.INVALID_CREDENTIALS

    wrong = await set_password(db_session, user, new_password="another-pass", current_password="bad")
    assert wrong.error is AuthErrorCode.INVALID_CREDENTIALS

    ok = await set_password(
        db_session, user, new_password="another-pass", current_password="correct-horse-battery"
    )
    assert ok.ok
    assert user.auth_provider == AuthProvider.EMAIL
