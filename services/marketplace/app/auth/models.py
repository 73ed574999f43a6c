"""
Marketplace — SQLAlchemy ORM model for user accounts.

Tables owned by this module:
  - users    Credential store: login identifiers, role, auth provider links

Role and auth_provider are stored as VARCHAR with CHECK constraints rather
than native PostgreSQL enums, so an out-of-range value is rejected by the
database itself and the same DDL runs on SQLite in tests.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from shared.constants import Role
from shared.database.postgres import Base

from app.auth.constants import AuthProvider


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _values(enum_cls: type) -> list[str]:
    return [member.value for member in enum_cls]


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        sa.CheckConstraint(
            "auth_provider <> 'google' OR google_id IS NOT NULL",
            name="ck_users_google_provider_has_google_id",
        ),
        sa.CheckConstraint(
            "auth_provider <> 'both' OR (google_id IS NOT NULL AND password_hash IS NOT NULL)",
            name="ck_users_both_provider_has_credentials",
        ),
    )

    # ── Primary key ──────────────────────────────────────────────────────────
    id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid(),
        primary_key=True,
        default=uuid.uuid4,
    )

    # ── Authentication identifiers ────────────────────────────────────────────
    # Stored trimmed + lower-cased; lookups are case-insensitive as well.
    email: Mapped[str] = mapped_column(
        sa.String(255), unique=True, nullable=False, index=True
    )
    # nullable: Google-only accounts have no password
    password_hash: Mapped[str | None] = mapped_column(
        sa.String(255), nullable=True
    )
    # Google "sub" claim; set on first Google sign-in or when linking
    google_id: Mapped[str | None] = mapped_column(
        sa.String(255), unique=True, nullable=True, index=True
    )

    # ── Profile fields ────────────────────────────────────────────────────────
    first_name: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(
        sa.String(100), nullable=False, default="", server_default=sa.text("''")
    )

    # ── Account category and auth links ───────────────────────────────────────
    # Set once at creation; only an admin may change it afterwards.
    role: Mapped[Role] = mapped_column(
        sa.Enum(
            Role,
            name="ck_users_role",
            native_enum=False,
            create_constraint=True,
            length=20,
            values_callable=_values,
        ),
        nullable=False,
        index=True,
    )
    auth_provider: Mapped[AuthProvider] = mapped_column(
        sa.Enum(
            AuthProvider,
            name="ck_users_auth_provider",
            native_enum=False,
            create_constraint=True,
            length=20,
            values_callable=_values,
        ),
        nullable=False,
        default=AuthProvider.EMAIL,
        server_default=sa.text("'email'"),
        index=True,
    )

    # ── Account flags ─────────────────────────────────────────────────────────
    is_active: Mapped[bool] = mapped_column(
        sa.Boolean(),
        nullable=False,
        default=True,
        server_default=sa.true(),
        index=True,
    )
    # True for Google-created accounts (Google vouches for the address)
    email_verified: Mapped[bool] = mapped_column(
        sa.Boolean(),
        nullable=False,
        default=False,
        server_default=sa.false(),
    )
    last_login_at: Mapped[datetime | None] = mapped_column(
        sa.DateTime(timezone=True), nullable=True
    )

    # ── Audit timestamps ──────────────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=_now,
        server_default=sa.func.now(),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=_now,
        server_default=sa.func.now(),
        onupdate=_now,
    )
