"""
Cart domain — request orchestration.

Every operation returns the full cart so the client can replace its state
with the server's after each write.
"""
from __future__ import annotations

import uuid
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.cart import service as svc
from app.cart.schemas import (
    AddCartItemRequest,
    CartItemResponse,
    CartResponse,
    UpdateCartItemRequest,
)
from app.catalog.service import get_active_service
from app.exceptions import CartItemNotFound, ServiceNotFound


async def get_cart(session: AsyncSession, owner_id: uuid.UUID) -> CartResponse:
    rows = await svc.get_cart(session, owner_id)
    items = [
        CartItemResponse(
            id=item.id,
            service_id=service.id,
            title=service.title,
            category=service.category,
            price=service.price,
            quantity=item.quantity,
            subtotal=service.price * item.quantity,
            added_at=item.created_at,
        )
        for item, service in rows
    ]
    return CartResponse(
        cart_items=items,
        item_count=sum(i.quantity for i in items),
        total=sum((i.subtotal for i in items), Decimal("0")),
    )


async def add_item(
    session: AsyncSession,
    owner_id: uuid.UUID,
    body: AddCartItemRequest,
) -> CartResponse:
    if await get_active_service(session, body.service_id) is None:
        raise ServiceNotFound()
    await svc.add_item(session, owner_id, body.service_id, body.quantity)
    return await get_cart(session, owner_id)


async def update_item(
    session: AsyncSession,
    owner_id: uuid.UUID,
    item_id: int,
    body: UpdateCartItemRequest,
) -> CartResponse:
    if not await svc.update_quantity(session, owner_id, item_id, body.quantity):
        raise CartItemNotFound()
    return await get_cart(session, owner_id)


async def remove_item(
    session: AsyncSession,
    owner_id: uuid.UUID,
    item_id: int,
) -> CartResponse:
    await svc.remove_item(session, owner_id, item_id)
    return await get_cart(session, owner_id)


async def clear_cart(session: AsyncSession, owner_id: uuid.UUID) -> CartResponse:
    await svc.clear_cart(session, owner_id)
    return await get_cart(session, owner_id)
