"""
Marketplace — service listings published by providers.

Tables owned by this module:
  - services    Bookable offerings; cart line items reference them
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from shared.database.postgres import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Service(Base):
    __tablename__ = "services"
    __table_args__ = (
        sa.CheckConstraint("price >= 0", name="ck_services_price_non_negative"),
        sa.Index("ix_services_category_active", "category", "is_active"),
    )

    id: Mapped[uuid.UUID] = mapped_column(sa.Uuid(), primary_key=True, default=uuid.uuid4)
    provider_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(sa.String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(sa.Text(), nullable=True)
    # e.g. "safari", "lodging", "transfer"
    category: Mapped[str] = mapped_column(sa.String(50), nullable=False)
    location: Mapped[str | None] = mapped_column(sa.String(200), nullable=True)
    price: Mapped[Decimal] = mapped_column(sa.Numeric(12, 2), nullable=False)
    is_active: Mapped[bool] = mapped_column(
        sa.Boolean(), nullable=False, default=True, server_default=sa.true()
    )
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
