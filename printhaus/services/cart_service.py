"""
Cart Service

Every mutation is scoped by (id, user_id) so one user can never touch
another user's rows; a miss is reported as not found.
"""
import logging
from typing import List

from sqlalchemy import select, delete, update
from sqlalchemy.ext.asyncio import AsyncSession

from printhaus.core.exceptions import NotFoundError, ValidationError
from printhaus.core.utils import to_money
from printhaus.models.cart import CartItem
from printhaus.models.catalog import Product
from printhaus.models.design import Design
from printhaus.schemas.cart import CartItemCreate, CartLineView, CartCustomization
from printhaus.services.pricing import line_total

logger = logging.getLogger(__name__)

# CartCustomization field -> CustomizationOptions field
OPTION_FIELDS = {
    "color": "colors",
    "size": "sizes",
    "material": "materials",
    "quantity": "quantities",
}


def validate_customization(product: Product, customization: CartCustomization) -> None:
    """Picked values must be among the product's offered options."""
    options = product.customization_options or {}
    errors = []
    for field, option_field in OPTION_FIELDS.items():
        value = getattr(customization, field)
        if value is None:
            continue
        allowed = options.get(option_field) or []
        if value not in allowed:
            errors.append({
                "field": f"customization.{field}",
                "message": f"'{value}' is not offered for this product",
                "allowed": allowed,
            })
    if errors:
        raise ValidationError("Invalid customization", details={"errors": errors})


class CartService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add_to_cart(self, user_id: int, data: CartItemCreate) -> CartItem:
        """
        Add a line to the user's cart.

        The price is snapshotted from the catalog (product base price plus
        the design's price). Adding the same product twice makes two rows.
        """
        product = await self.db.get(Product, data.product_id)
        if not product or not product.is_active:
            raise NotFoundError("Product", data.product_id)

        price = to_money(product.base_price)
        if data.design_id is not None:
            design = await self.db.get(Design, data.design_id)
            if not design or not design.is_public:
                raise NotFoundError("Design", data.design_id)
            price = to_money(price + to_money(design.price))

        validate_customization(product, data.customization)

        item = CartItem(
            user_id=user_id,
            product_id=product.id,
            design_id=data.design_id,
            quantity=data.quantity,
            customization=data.customization.model_dump(exclude_none=True),
            price=price,
        )
        self.db.add(item)
        await self.db.commit()
        await self.db.refresh(item)

        logger.info(f"Cart add: user_id={user_id} product_id={product.id} qty={data.quantity}")
        return item

    async def get_cart_items(self, user_id: int, lock: bool = False) -> List[CartItem]:
        query = select(CartItem).where(CartItem.user_id == user_id).order_by(CartItem.id)
        if lock:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_cart_view(self, user_id: int) -> List[CartLineView]:
        """
        Cart rows joined with product and design in one query.

        Outer joins keep a row visible even if its product or design is
        gone; the display fields are then None.
        """
        result = await self.db.execute(
            select(
                CartItem,
                Product.name,
                Product.image_url,
                Design.title,
                Design.image_url,
            )
            .outerjoin(Product, Product.id == CartItem.product_id)
            .outerjoin(Design, Design.id == CartItem.design_id)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.id)
        )

        lines = []
        for item, product_name, product_image, design_title, design_image in result.all():
            lines.append(CartLineView(
                id=item.id,
                product_id=item.product_id,
                design_id=item.design_id,
                quantity=item.quantity,
                customization=item.customization or {},
                price=float(item.price),
                line_total=float(line_total(item.price, item.quantity)),
                product_name=product_name,
                product_image_url=product_image,
                design_title=design_title,
                design_image_url=design_image,
                created_at=item.created_at,
            ))
        return lines

    async def update_cart_item(self, user_id: int, item_id: int, quantity: int) -> None:
        if quantity < 1:
            raise ValidationError(
                "Quantity must be at least 1",
                details={"errors": [{"field": "quantity", "message": "must be >= 1"}]},
            )

        result = await self.db.execute(
            update(CartItem)
            .where(CartItem.id == item_id, CartItem.user_id == user_id)
            .values(quantity=quantity)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise NotFoundError("Cart item", item_id)
        await self.db.commit()

    async def remove_from_cart(self, user_id: int, item_id: int) -> None:
        result = await self.db.execute(
            delete(CartItem).where(CartItem.id == item_id, CartItem.user_id == user_id)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise NotFoundError("Cart item", item_id)
        await self.db.commit()

    async def clear_cart(self, user_id: int, commit: bool = True) -> int:
        """Delete every cart row of the user. Returns how many were removed."""
        result = await self.db.execute(delete(CartItem).where(CartItem.user_id == user_id))
        if commit:
            await self.db.commit()
        return result.rowcount or 0
