"""
Cart domain — pure business logic (zero FastAPI imports).

Every statement is scoped by owner_id, and the owner id always comes from the
verified access token.  Writes are single statements so concurrent requests
for the same owner cannot lose an increment.
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from app.cart.constants import MAX_ITEM_QUANTITY
from app.cart.models import CartItem
from app.catalog.models import Service

logger = logging.getLogger(__name__)

_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _upsert_insert(session: AsyncSession):
    dialect = session.get_bind().dialect.name
    try:
        return _UPSERT_INSERTS[dialect]
    except KeyError:
        raise RuntimeError(f"Cart upsert is not supported on the {dialect!r} dialect") from None


async def get_cart(
    session: AsyncSession, owner_id: uuid.UUID
) -> list[tuple[CartItem, Service]]:
    """The owner's line items with their listings, in insertion order."""
    result = await session.execute(
        sa.select(CartItem, Service)
        .join(Service, CartItem.service_id == Service.id)
        .where(CartItem.owner_id == owner_id)
        .order_by(CartItem.id)
        # Upserts bypass the identity map; always read the stored quantity.
        .execution_options(populate_existing=True)
    )
    return [row.tuple() for row in result.all()]


async def add_item(
    session: AsyncSession,
    owner_id: uuid.UUID,
    service_id: uuid.UUID,
    quantity: int = 1,
) -> None:
    """
    Insert the line item, or add quantity to the existing one, in one statement.

    The stored quantity never exceeds MAX_ITEM_QUANTITY.
    """
    insert = _upsert_insert(session)
    stmt = insert(CartItem).values(
        owner_id=owner_id,
        service_id=service_id,
        quantity=min(quantity, MAX_ITEM_QUANTITY),
    )
    combined = CartItem.quantity + stmt.excluded.quantity
    stmt = stmt.on_conflict_do_update(
        index_elements=[CartItem.owner_id, CartItem.service_id],
        set_={
            "quantity": sa.case(
                (combined > MAX_ITEM_QUANTITY, MAX_ITEM_QUANTITY),
                else_=combined,
            ),
            "updated_at": datetime.now(timezone.utc),
        },
    )
    await session.execute(stmt)


async def remove_item(session: AsyncSession, owner_id: uuid.UUID, item_id: int) -> bool:
    """Delete the owner's line item. Returns False when nothing matched."""
    result = await session.execute(
        sa.delete(CartItem).where(CartItem.id == item_id, CartItem.owner_id == owner_id)
    )
    return result.rowcount > 0


async def update_quantity(
    session: AsyncSession,
    owner_id: uuid.UUID,
    item_id: int,
    quantity: int,
) -> bool:
    """
    Set the quantity of the owner's line item.

    A quantity of zero or less removes the item instead and always counts as
    matched.  Otherwise returns whether an owned row was updated.
    """
    if quantity <= 0:
        await remove_item(session, owner_id, item_id)
        return True

    result = await session.execute(
        sa.update(CartItem)
        .where(CartItem.id == item_id, CartItem.owner_id == owner_id)
        .values(quantity=min(quantity, MAX_ITEM_QUANTITY), updated_at=datetime.now(timezone.utc))
    )
    return result.rowcount > 0


async def clear_cart(session: AsyncSession, owner_id: uuid.UUID) -> int:
    result = await session.execute(sa.delete(CartItem).where(CartItem.owner_id == owner_id))
    logger.debug("Cleared %d cart item(s) for %s", result.rowcount, owner_id)
    return result.rowcount
