import pytest

from app.admin.service import create_admin_user, list_users, set_active
from app.auth.constants import AuthErrorCode, AuthProvider
from app.auth.service import get_user_by_email
from shared.constants import Role


async def _population(make_user) -> None:
    await make_user("t1@test.com")
    await make_user("t2@test.com", password=None, google_id="g-t2")
    await make_user("p1@test.com", role=Role.SERVICE_PROVIDER, google_id="g-p1")
    await make_user("p2@test.com", role=Role.SERVICE_PROVIDER, is_active=False)
    await make_user("a1@test.com", role=Role.ADMIN)


@pytest.mark.asyncio
async def test_filter_by_role_returns_exact_subset(db_session, make_user) -> None:
    await _population(make_user)
    users, total = await list_users(db_session, page=1, size=50, role=Role.SERVICE_PROVIDER)
    assert total == 2
    assert {u.email for u in users} == {"p1@test.com", "p2@test.com"}
    assert all(u.role == Role.SERVICE_PROVIDER for u in users)


@pytest.mark.asyncio
async def test_filter_by_auth_provider(db_session, make_user) -> None:
    await _population(make_user)
    google_only, total = await list_users(db_session, page=1, size=50, auth_provider=AuthProvider.GOOGLE)
    assert total == 1
    assert [u.email for u in google_only] == ["t2@test.com"]

    both, _ = await list_users(db_session, page=1, size=50, auth_provider=AuthProvider.BOTH)
    assert [u.email for u in both] == ["p1@test.com"]


@pytest.mark.asyncio
async def test_combined_filters_and_search(db_session, make_user) -> None:
    await _population(make_user)
    users, total = await list_users(
        db_session, page=1, size=50, role=Role.SERVICE_PROVIDER, is_active=True
    )
    assert total == 1 and users[0].email == "p1@test.com"

    found, _ = await list_users(db_session, page=1, size=50, search="a1@")
    assert [u.email for u in found] == ["a1@test.com"]


@pytest.mark.asyncio
async def test_search_treats_wildcards_literally(db_session, make_user) -> None:
    await _population(make_user)
    await make_user("under_score@test.com")

    percent, total = await list_users(db_session, page=1, size=50, search="%")
    assert total == 0 and percent == []

    underscore, _ = await list_users(db_session, page=1, size=50, search="_")
    assert [u.email for u in underscore] == ["under_score@test.com"]

    backslash, _ = await list_users(db_session, page=1, size=50, search="\\")
    assert backslash == []


@pytest.mark.asyncio
async def test_pagination(db_session, make_user) -> None:
    await _population(make_user)
    first, total = await list_users(db_session, page=1, size=2)
    second, _ = await list_users(db_session, page=2, size=2)
    third, _ = await list_users(db_session, page=3, size=2)
    assert total == 5
    assert len(first) == 2 and len(second) == 2 and len(third) == 1
    assert len({u.id for u in first + second + third}) == 5


@pytest.mark.asyncio
async def test_create_admin_user(db_session) -> None:
    result = await create_admin_user(
        db_session, email="New.Admin@test.com", password="admin-password", first_name="Root"
    )
    assert result.ok
    assert result.user.role == Role.ADMIN
    assert result.user.email == "new.admin@test.com"
    assert result.user.email_verified is True

    dup = await create_admin_user(
        db_session, email="new.admin@test.com", password="admin-password", first_name="Root"
    )
    assert dup.error is AuthErrorCode.DUPLICATE_EMAIL


@pytest.mark.asyncio
async def test_set_active_reports_no_change(db_session, make_user) -> None:
    await make_user("flip@test.com")
    user = await get_user_by_email(db_session, "flip@test.com")
    assert await set_active(db_session, user, True) is False
    assert await set_active(db_session, user, False) is True
    assert user.is_active is False
