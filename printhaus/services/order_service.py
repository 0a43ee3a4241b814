"""
Order Service

Checkout turns the caller's cart into an order in a single transaction:
the order, its items, the design download counters and the cart deletion
commit together or not at all.
"""
import logging
import uuid
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from printhaus.core.config import settings
from printhaus.core.exceptions import EmptyCartError, NotFoundError
from printhaus.core.utils import utcnow
from printhaus.models.artist import Artist
from printhaus.models.design import Design
from printhaus.models.order import Order, OrderItem, OrderStatus, PaymentStatus
from printhaus.models.user import User
from printhaus.schemas.order import OrderCreate
from printhaus.services.cart_service import CartService
from printhaus.services.design_service import DesignService
from printhaus.services.pricing import artist_commission, compute_cart_totals, line_total

logger = logging.getLogger(__name__)

MAX_ORDER_NUMBER_ATTEMPTS = 5


class OrderService:
    """Checkout and order history."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.cart = CartService(db)
        self.designs = DesignService(db)

    @staticmethod
    def generate_order_number() -> str:
        """Generate order number in format PH-YYYYMMDD-XXXXXXXX."""
        return f"{settings.ORDER_NUMBER_PREFIX}-{utcnow().strftime('%Y%m%d')}-{uuid.uuid4().hex[:8].upper()}"

    async def _unique_order_number(self) -> str:
        # The unique index on order_number remains the final guard
        for _ in range(MAX_ORDER_NUMBER_ATTEMPTS):
            candidate = self.generate_order_number()
            exists = await self.db.execute(
                select(func.count(Order.id)).where(Order.order_number == candidate)
            )
            if not exists.scalar_one():
                return candidate
            logger.warning(f"Order number collision on {candidate}, drawing again")
        raise RuntimeError("Could not allocate a unique order number")

    async def _commission_rates(self, design_ids: List[int]) -> Dict[int, Decimal]:
        if not design_ids:
            return {}
        result = await self.db.execute(
            select(Design.id, Artist.commission_rate)
            .join(Artist, Artist.id == Design.artist_id)
            .where(Design.id.in_(design_ids))
        )
        return {
            design_id: Decimal(str(rate if rate is not None else settings.DEFAULT_COMMISSION_RATE))
            for design_id, rate in result.all()
        }

    async def checkout(self, user_id: int, data: OrderCreate) -> Order:
        """
        Create an order from the user's cart.

        1. Lock the user row (per-user checkout mutex) and the cart rows
        2. Empty cart -> EmptyCartError, nothing written
        3. Totals from the snapshot prices only
        4. Snapshot every line into an order item
        5. Bump design download counters, delete the cart, commit

        Any failure rolls the whole unit back: no order, cart untouched.
        """
        try:
            await self.db.execute(
                select(User.id).where(User.id == user_id).with_for_update()
            )
            cart_items = await self.cart.get_cart_items(user_id, lock=True)
            if not cart_items:
                raise EmptyCartError()

            totals = compute_cart_totals(cart_items)
            rates = await self._commission_rates(
                sorted({item.design_id for item in cart_items if item.design_id is not None})
            )

            order = Order(
                user_id=user_id,
                order_number=await self._unique_order_number(),
                status=OrderStatus.PENDING.value,
                total_amount=totals.subtotal,
                shipping_cost=totals.shipping,
                shipping_address=data.shipping_address.model_dump(),
                payment_status=PaymentStatus.PENDING.value,
                notes=data.notes,
            )

            for item in cart_items:
                commission = None
                if item.design_id is not None and item.design_id in rates:
                    commission = artist_commission(
                        line_total(item.price, item.quantity), rates[item.design_id]
                    )
                order.items.append(OrderItem(
                    product_id=item.product_id,
                    design_id=item.design_id,
                    quantity=item.quantity,
                    unit_price=item.price,
                    customization=dict(item.customization or {}),
                    artist_commission=commission,
                ))

            self.db.add(order)
            await self.db.flush()

            for design_id in rates:
                ordered = sum(i.quantity for i in cart_items if i.design_id == design_id)
                await self.designs.increment_download_count(design_id, ordered)

            await self.cart.clear_cart(user_id, commit=False)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            f"Order placed: {order.order_number} user_id={user_id} "
            f"items={len(cart_items)} total={totals.subtotal} shipping={totals.shipping}"
        )
        return await self.get_order(user_id, order.id)

    async def get_orders_by_user(self, user_id: int) -> List[Order]:
        result = await self.db.execute(
            select(Order)
            .options(selectinload(Order.items))
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        return list(result.scalars().all())

    async def get_order(self, user_id: Optional[int], order_id: int) -> Order:
        """
        Fetch an order with its items. Scoped to the user unless user_id
        is None (admin); another user's order is reported as not found.
        """
        query = (
            select(Order)
            .options(selectinload(Order.items))
            .where(Order.id == order_id)
            .execution_options(populate_existing=True)
        )
        if user_id is not None:
            query = query.where(Order.user_id == user_id)
        result = await self.db.execute(query)
        order = result.scalar_one_or_none()
        if not order:
            raise NotFoundError("Order", order_id)
        return order

    async def list_all_orders(self) -> List[Order]:
        result = await self.db.execute(
            select(Order)
            .options(selectinload(Order.items))
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        return list(result.scalars().all())
