"""
Cart routes

All rows are scoped to the session user; touching another user's row
returns 404 and leaves it alone.
"""
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from printhaus.api.deps import get_current_user
from printhaus.core.database import get_db
from printhaus.models.user import User
from printhaus.schemas.cart import (
    CartItemCreate,
    CartItemResponse,
    CartItemUpdate,
    CartLineView,
    CartSummary,
    MessageResponse,
)
from printhaus.services.cart_service import CartService
from printhaus.services.pricing import compute_cart_totals

router = APIRouter()


@router.get("", response_model=List[CartLineView])
async def get_cart(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Cart rows joined with product and design details."""
    return await CartService(db).get_cart_view(user.id)


@router.get("/summary", response_model=CartSummary)
async def get_cart_summary(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    lines = await CartService(db).get_cart_view(user.id)
    totals = compute_cart_totals(lines)
    return CartSummary(
        items=lines,
        item_count=totals.item_count,
        subtotal=float(totals.subtotal),
        shipping=float(totals.shipping),
        total=float(totals.total),
        amount_to_free_shipping=float(totals.amount_to_free_shipping),
    )


@router.post("", response_model=CartItemResponse, status_code=status.HTTP_200_OK)
async def add_to_cart(
    item_data: CartItemCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await CartService(db).add_to_cart(user.id, item_data)


@router.put("/{item_id}", response_model=MessageResponse)
async def update_cart_item(
    item_id: int,
    update_data: CartItemUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await CartService(db).update_cart_item(user.id, item_id, update_data.quantity)
    return MessageResponse(message="Cart item updated")


@router.delete("/{item_id}", response_model=MessageResponse)
async def remove_from_cart(
    item_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await CartService(db).remove_from_cart(user.id, item_id)
    return MessageResponse(message="Item removed from cart")


@router.delete("", response_model=MessageResponse)
async def clear_cart(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await CartService(db).clear_cart(user.id)
    return MessageResponse(message="Cart cleared")
