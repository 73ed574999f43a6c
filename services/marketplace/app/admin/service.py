"""
Admin domain — pure business logic (zero FastAPI imports).
"""
from __future__ import annotations

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from shared.constants import Role

from app.auth.constants import AuthErrorCode, AuthProvider
from app.auth.models import User
from app.auth.service import AccountResolution, get_user_by_email, insert_user
from app.auth.utils import hash_password, normalize_email


async def create_admin_user(
    session: AsyncSession,
    *,
    email: str,
    password: str,
    first_name: str,
    last_name: str = "",
) -> AccountResolution:
    """
    Create a user with the admin role.

    Guards: email uniqueness. Happy path last.
    """
    if await get_user_by_email(session, email) is not None:
        return AccountResolution(error=AuthErrorCode.DUPLICATE_EMAIL)

    user = User(
        email=normalize_email(email),
        password_hash=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        role=Role.ADMIN,
        auth_provider=AuthProvider.EMAIL,
        email_verified=True,
    )
    return await insert_user(session, user)


def _contains_pattern(term: str) -> str:
    """LIKE pattern matching term literally anywhere in the value."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


async def list_users(
    session: AsyncSession,
    *,
    page: int,
    size: int,
    role: Role | None = None,
    auth_provider: AuthProvider | None = None,
    is_active: bool | None = None,
    search: str | None = None,
) -> tuple[list[User], int]:
    """
    Paginated user listing with optional exact filters, newest first.

    Returns (users, total_count).
    """
    base = sa.select(User)
    count_base = sa.select(sa.func.count()).select_from(User)

    filters = []
    if role is not None:
        filters.append(User.role == role)
    if auth_provider is not None:
        filters.append(User.auth_provider == auth_provider)
    if is_active is not None:
        filters.append(User.is_active == is_active)
    if search:
        pattern = _contains_pattern(search)
        filters.append(
            sa.or_(
                User.first_name.ilike(pattern, escape="\\"),
                User.last_name.ilike(pattern, escape="\\"),
                User.email.ilike(pattern, escape="\\"),
            )
        )

    for f in filters:
        base = base.where(f)
        count_base = count_base.where(f)

    total_result = await session.execute(count_base)
    total = total_result.scalar_one()

    offset = (page - 1) * size
    query = base.order_by(User.created_at.desc(), User.id).offset(offset).limit(size)
    result = await session.execute(query)
    users = list(result.scalars().all())

    return users, total


async def set_role(session: AsyncSession, user: User, role: Role) -> User:
    """Write an already-authorized role change."""
    user.role = role
    await session.flush()
    return user


async def set_active(session: AsyncSession, user: User, active: bool) -> bool:
    """Flip is_active. Returns False when the account is already in that state."""
    if user.is_active == active:
        return False
    user.is_active = active
    await session.flush()
    return True
