"""
Cart domain — Pydantic V2 request/response schemas.

The response mirrors what the storefront's cart context consumes:
{cartItems: [...], itemCount, total}.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.cart.constants import MAX_ITEM_QUANTITY


class _Base(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ── Request ───────────────────────────────────────────────────────────────────

class AddCartItemRequest(_Base):
    service_id: uuid.UUID
    quantity: int = Field(1, ge=1, le=MAX_ITEM_QUANTITY)


class UpdateCartItemRequest(_Base):
    """quantity <= 0 removes the line item."""

    quantity: int = Field(le=MAX_ITEM_QUANTITY)


# ── Response ──────────────────────────────────────────────────────────────────

class CartItemResponse(_Base):
    id: int
    service_id: uuid.UUID
    title: str
    category: str
    price: Decimal
    quantity: int
    subtotal: Decimal
    added_at: datetime


class CartResponse(_Base):
    cart_items: list[CartItemResponse]
    item_count: int   # sum of quantities
    total: Decimal
