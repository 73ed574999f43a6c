"""
Catalog domain — request orchestration.
"""
from __future__ import annotations

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from shared.constants import Role
from shared.models import PaginatedResponse
from shared.models.user import CurrentUser

from app.catalog import service as svc
from app.catalog.schemas import CreateServiceRequest, ServiceResponse
from app.exceptions import ProviderRequired, ServiceNotFound

logger = logging.getLogger(__name__)

_PUBLISHER_ROLES = (Role.SERVICE_PROVIDER, Role.ADMIN)


async def list_services(
    session: AsyncSession,
    *,
    category: str | None,
    provider_id: uuid.UUID | None,
    page: int,
    size: int,
) -> PaginatedResponse[ServiceResponse]:
    services, total = await svc.list_services(
        session, category=category, provider_id=provider_id, page=page, size=size
    )
    return PaginatedResponse[ServiceResponse](
        items=[ServiceResponse.model_validate(s) for s in services],
        total=total,
        page=page,
        page_size=size,
    )


async def get_service(session: AsyncSession, service_id: uuid.UUID) -> ServiceResponse:
    service = await svc.get_active_service(session, service_id)
    if service is None:
        raise ServiceNotFound()
    return ServiceResponse.model_validate(service)


async def create_service(
    session: AsyncSession,
    current_user: CurrentUser,
    body: CreateServiceRequest,
) -> ServiceResponse:
    if current_user.role not in _PUBLISHER_ROLES:
        raise ProviderRequired()
    service = await svc.create_service(
        session, provider_id=current_user.id, **body.model_dump()
    )
    logger.info("Provider %s published service %s", current_user.id, service.id)
    return ServiceResponse.model_validate(service)
