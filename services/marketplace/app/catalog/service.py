"""
Catalog domain — pure business logic (zero FastAPI imports).
"""
from __future__ import annotations

import uuid
from decimal import Decimal

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from app.catalog.models import Service


async def get_active_service(session: AsyncSession, service_id: uuid.UUID) -> Service | None:
    result = await session.execute(
        sa.select(Service).where(Service.id == service_id, Service.is_active.is_(True))
    )
    return result.scalar_one_or_none()


async def list_services(
    session: AsyncSession,
    *,
    category: str | None = None,
    provider_id: uuid.UUID | None = None,
    page: int = 1,
    size: int = 20,
) -> tuple[list[Service], int]:
    """Active listings, newest first."""
    conditions = [Service.is_active.is_(True)]
    if category is not None:
        conditions.append(Service.category == category)
    if provider_id is not None:
        conditions.append(Service.provider_id == provider_id)

    total = await session.scalar(
        sa.select(sa.func.count()).select_from(Service).where(*conditions)
    )
    result = await session.execute(
        sa.select(Service)
        .where(*conditions)
        .order_by(Service.created_at.desc(), Service.id)
        .offset((page - 1) * size)
        .limit(size)
    )
    return list(result.scalars().all()), total or 0


async def create_service(
    session: AsyncSession,
    *,
    provider_id: uuid.UUID,
    title: str,
    category: str,
    price: Decimal,
    description: str | None = None,
    location: str | None = None,
) -> Service:
    service = Service(
        provider_id=provider_id,
        title=title,
        description=description,
        category=category,
        location=location,
        price=price,
    )
    session.add(service)
    await session.flush()
    return service
