"""
Cart domain — router.

Routes:
  GET     /api/v1/cart                  Own cart
  POST    /api/v1/cart/items            Add a service (re-adding increments quantity)
  PATCH   /api/v1/cart/items/{item_id}  Set quantity (<= 0 removes)
  DELETE  /api/v1/cart/items/{item_id}  Remove a line item
  DELETE  /api/v1/cart                  Empty the cart

All routes require a valid Bearer token for an existing, active account; the
owner is always the caller.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_account
from app.cart import controller as ctrl
from app.cart.schemas import AddCartItemRequest, CartResponse, UpdateCartItemRequest
from app.database import get_db
from shared.models.user import CurrentUser

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=CartResponse, summary="Get own cart")
async def get_cart(
    current_user: CurrentUser = Depends(get_current_account),
    session: AsyncSession = Depends(get_db),
) -> CartResponse:
    return await ctrl.get_cart(session, current_user.id)


@router.post(
    "/items",
    response_model=CartResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a service to the cart",
)
async def add_item(
    body: AddCartItemRequest,
    current_user: CurrentUser = Depends(get_current_account),
    session: AsyncSession = Depends(get_db),
) -> CartResponse:
    return await ctrl.add_item(session, current_user.id, body)


@router.patch(
    "/items/{item_id}",
    response_model=CartResponse,
    summary="Change a line item's quantity",
)
async def update_item(
    item_id: int,
    body: UpdateCartItemRequest,
    current_user: CurrentUser = Depends(get_current_account),
    session: AsyncSession = Depends(get_db),
) -> CartResponse:
    return await ctrl.update_item(session, current_user.id, item_id, body)


@router.delete(
    "/items/{item_id}",
    response_model=CartResponse,
    summary="Remove a line item",
)
async def remove_item(
    item_id: int,
    current_user: CurrentUser = Depends(get_current_account),
    session: AsyncSession = Depends(get_db),
) -> CartResponse:
    return await ctrl.remove_item(session, current_user.id, item_id)


@router.delete("", response_model=CartResponse, summary="Empty the cart")
async def clear_cart(
    current_user: CurrentUser = Depends(get_current_account),
    session: AsyncSession = Depends(get_db),
) -> CartResponse:
    return await ctrl.clear_cart(session, current_user.id)
