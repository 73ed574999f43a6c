"""Marketplace schema: users, services, cart_items

Revision ID: 001
Revises:
Create Date: 2026-10-19

Tables created:
  - users         Accounts: credentials, role, auth provider links
  - services      Listings published by service providers
  - cart_items    Per-user cart line items, one row per (owner, service)

role and auth_provider are VARCHAR columns guarded by CHECK constraints
instead of PostgreSQL ENUM types, so adding a value is a constraint swap
rather than an ALTER TYPE.

Downgrade: drops all tables in reverse dependency order.
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


# ─────────────────────────────────────────────────────────────────────────────
#  UPGRADE
# ─────────────────────────────────────────────────────────────────────────────

def upgrade() -> None:
    # ── 1. users ──────────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("google_id", sa.String(255), nullable=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False, server_default=sa.text("''")),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("auth_provider", sa.String(20), nullable=False, server_default=sa.text("'email'")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("email_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            "role IN ('traveler', 'service_provider', 'admin')",
            name="ck_users_role",
        ),
        sa.CheckConstraint(
            "auth_provider IN ('email', 'google', 'both')",
            name="ck_users_auth_provider",
        ),
        sa.CheckConstraint(
            "auth_provider <> 'google' OR google_id IS NOT NULL",
            name="ck_users_google_provider_has_google_id",
        ),
        sa.CheckConstraint(
            "auth_provider <> 'both' OR (google_id IS NOT NULL AND password_hash IS NOT NULL)",
            name="ck_users_both_provider_has_credentials",
        ),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_google_id", "users", ["google_id"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])
    op.create_index("ix_users_auth_provider", "users", ["auth_provider"])
    op.create_index("ix_users_is_active", "users", ["is_active"])
    op.create_index("ix_users_created_at", "users", ["created_at"])

    # ── 2. services ───────────────────────────────────────────────────────────
    op.create_table(
        "services",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "provider_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("location", sa.String(200), nullable=True),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("price >= 0", name="ck_services_price_non_negative"),
    )
    op.create_index("ix_services_provider_id", "services", ["provider_id"])
    op.create_index("ix_services_created_at", "services", ["created_at"])
    op.create_index("ix_services_category_active", "services", ["category", "is_active"])

    # ── 3. cart_items ─────────────────────────────────────────────────────────
    op.create_table(
        "cart_items",
        sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True),
        sa.Column(
            "owner_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "service_id",
            sa.Uuid(),
            sa.ForeignKey("services.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("owner_id", "service_id", name="uq_cart_items_owner_service"),
        sa.CheckConstraint("quantity >= 1", name="ck_cart_items_quantity_positive"),
    )
    op.create_index("ix_cart_items_owner_id", "cart_items", ["owner_id"])


# ─────────────────────────────────────────────────────────────────────────────
#  DOWNGRADE
# ─────────────────────────────────────────────────────────────────────────────

def downgrade() -> None:
    op.drop_index("ix_cart_items_owner_id", table_name="cart_items")
    op.drop_table("cart_items")

    op.drop_index("ix_services_category_active", table_name="services")
    op.drop_index("ix_services_created_at", table_name="services")
    op.drop_index("ix_services_provider_id", table_name="services")
    op.drop_table("services")

    for index in (
        "ix_users_created_at",
        "ix_users_is_active",
        "ix_users_auth_provider",
        "ix_users_role",
        "ix_users_google_id",
        "ix_users_email",
    ):
        op.drop_index(index, table_name="users")
    op.drop_table("users")
