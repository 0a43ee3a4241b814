"""
Order routes

Checkout is server-authoritative: the body only carries the shipping
address and notes; prices and totals come from the cart snapshot.
"""
from typing import List
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from printhaus.api.deps import get_current_user
from printhaus.core.config import settings
from printhaus.core.database import get_db
from printhaus.core.rate_limit import get_account_key, limiter
from printhaus.models.user import User
from printhaus.schemas.order import OrderCreate, OrderResponse
from printhaus.services.order_service import OrderService

router = APIRouter()


@router.post("", response_model=OrderResponse, status_code=status.HTTP_200_OK)
@limiter.limit(settings.RATE_LIMIT_CHECKOUT, key_func=get_account_key)
async def create_order(
    request: Request,
    order_data: OrderCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Turn the current cart into a pending order and empty the cart."""
    return await OrderService(db).checkout(user.id, order_data)


@router.get("", response_model=List[OrderResponse])
async def list_orders(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await OrderService(db).get_orders_by_user(user.id)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await OrderService(db).get_order(user.id, order_id)
