"""
Catalog domain — router.

Routes:
  GET   /api/v1/services              Browse active listings (public)
  GET   /api/v1/services/{service_id} Single listing (public)
  POST  /api/v1/services              Publish a listing (service provider or admin)
"""
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_account
from app.catalog import controller as ctrl
from app.catalog.schemas import CreateServiceRequest, ServiceResponse
from app.database import get_db
from shared.models import PaginatedResponse
from shared.models.user import CurrentUser

router = APIRouter(prefix="/services", tags=["catalog"])


@router.get(
    "",
    response_model=PaginatedResponse[ServiceResponse],
    summary="Browse active service listings",
)
async def list_services(
    category: str | None = Query(None, max_length=50, description="Filter by category"),
    provider_id: uuid.UUID | None = Query(None, alias="providerId", description="Filter by provider"),
    page: int = Query(1, ge=1, description="Page number"),
    size: int = Query(20, ge=1, le=100, description="Items per page"),
    session: AsyncSession = Depends(get_db),
) -> PaginatedResponse[ServiceResponse]:
    return await ctrl.list_services(
        session, category=category, provider_id=provider_id, page=page, size=size
    )


@router.get(
    "/{service_id}",
    response_model=ServiceResponse,
    summary="Get a single service listing",
)
async def get_service(
    service_id: uuid.UUID,
    session: AsyncSession = Depends(get_db),
) -> ServiceResponse:
    return await ctrl.get_service(session, service_id)


@router.post(
    "",
    response_model=ServiceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Publish a new service listing",
)
async def create_service(
    body: CreateServiceRequest,
    current_user: CurrentUser = Depends(get_current_account),
    session: AsyncSession = Depends(get_db),
) -> ServiceResponse:
    return await ctrl.create_service(session, current_user, body)
