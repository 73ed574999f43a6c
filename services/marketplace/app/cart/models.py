"""
Marketplace — persisted shopping cart.

Tables owned by this module:
  - cart_items    One row per (owner, service); quantity is always >= 1
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from shared.database.postgres import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


class CartItem(Base):
    __tablename__ = "cart_items"
    __table_args__ = (
        sa.UniqueConstraint("owner_id", "service_id", name="uq_cart_items_owner_service"),
        sa.CheckConstraint("quantity >= 1", name="ck_cart_items_quantity_positive"),
    )

    # Monotonic id doubles as insertion order. SQLite only autoincrements INTEGER keys.
    id: Mapped[int] = mapped_column(
        sa.BigInteger().with_variant(sa.Integer(), "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    service_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid(), sa.ForeignKey("services.id", ondelete="CASCADE"), nullable=False
    )
    quantity: Mapped[int] = mapped_column(
        sa.Integer(), nullable=False, default=1, server_default=sa.text("1")
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_now, server_default=sa.func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=_now,
        server_default=sa.func.now(),
        onupdate=_now,
    )
