"""
Catalog domain — Pydantic V2 request/response schemas.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CreateServiceRequest(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)
    category: str = Field(min_length=1, max_length=50)
    location: str | None = Field(None, max_length=200)
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)


class ServiceResponse(BaseModel):
    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )

    id: uuid.UUID
    provider_id: uuid.UUID
    title: str
    description: str | None
    category: str
    location: str | None
    price: Decimal
    is_active: bool
    created_at: datetime
