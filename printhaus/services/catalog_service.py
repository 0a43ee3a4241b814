"""
Catalog Service

Categories and base products. Products are never hard-deleted since cart
and order lines reference them; deactivation hides them from the shop.
"""
import logging
from typing import Optional, List

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from printhaus.core.exceptions import ConflictError, NotFoundError, ValidationError
from printhaus.models.catalog import Category, Product
from printhaus.schemas.catalog import CategoryCreate, CategoryUpdate, ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)


class CatalogService:
    def __init__(self, db: AsyncSession):
        self.db = db

    # ============================================================
    # Categories
    # ============================================================

    async def get_all_categories(self) -> List[Category]:
        result = await self.db.execute(
            select(Category).order_by(Category.sort_order, Category.id)
        )
        return list(result.scalars().all())

    async def get_category(self, category_id: int) -> Optional[Category]:
        return await self.db.get(Category, category_id)

    async def get_category_by_slug(self, slug: str) -> Optional[Category]:
        result = await self.db.execute(select(Category).where(Category.slug == slug))
        return result.scalar_one_or_none()

    async def create_category(self, data: CategoryCreate) -> Category:
        if await self.get_category_by_slug(data.slug):
            raise ConflictError(f"Category slug '{data.slug}' already exists", code="slug_taken")

        category = Category(**data.model_dump())
        self.db.add(category)
        await self.db.commit()
        await self.db.refresh(category)
        logger.info(f"Category created: {category.slug}")
        return category

    async def update_category(self, category_id: int, data: CategoryUpdate) -> Category:
        category = await self.get_category(category_id)
        if not category:
            raise NotFoundError("Category", category_id)

        updates = data.model_dump(exclude_unset=True)
        new_slug = updates.get("slug")
        if new_slug and new_slug != category.slug and await self.get_category_by_slug(new_slug):
            raise ConflictError(f"Category slug '{new_slug}' already exists", code="slug_taken")

        for field, value in updates.items():
            if value is None and field in ("name", "slug", "sort_order"):
                continue
            setattr(category, field, value)

        await self.db.commit()
        await self.db.refresh(category)
        return category

    async def delete_category(self, category_id: int) -> None:
        category = await self.get_category(category_id)
        if not category:
            raise NotFoundError("Category", category_id)

        in_use = await self.db.execute(
            select(func.count(Product.id)).where(Product.category_id == category_id)
        )
        if in_use.scalar_one():
            raise ConflictError("Category still has products", code="category_in_use")

        await self.db.delete(category)
        await self.db.commit()
        logger.info(f"Category deleted: id={category_id}")

    # ============================================================
    # Products
    # ============================================================

    async def get_all_products(self, include_inactive: bool = False) -> List[Product]:
        query = select(Product).order_by(Product.id)
        if not include_inactive:
            query = query.where(Product.is_active.is_(True))
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_products_by_category(self, category_id: int) -> List[Product]:
        result = await self.db.execute(
            select(Product)
            .where(Product.category_id == category_id, Product.is_active.is_(True))
            .order_by(Product.id)
        )
        return list(result.scalars().all())

    async def get_product(self, product_id: int) -> Optional[Product]:
        return await self.db.get(Product, product_id)

    async def _require_category(self, category_id: int) -> None:
        if not await self.get_category(category_id):
            raise ValidationError(
                "Unknown category",
                details={"errors": [{"field": "category_id", "message": "Category does not exist"}]},
            )

    async def create_product(self, data: ProductCreate) -> Product:
        await self._require_category(data.category_id)

        product = Product(
            name=data.name,
            description=data.description,
            category_id=data.category_id,
            base_price=data.base_price,
            image_url=data.image_url,
            customization_options=data.customization_options.model_dump(),
            is_active=data.is_active,
        )
        self.db.add(product)
        await self.db.commit()
        await self.db.refresh(product)
        logger.info(f"Product created: id={product.id} name={product.name!r}")
        return product

    async def update_product(self, product_id: int, data: ProductUpdate) -> Product:
        product = await self.get_product(product_id)
        if not product:
            raise NotFoundError("Product", product_id)

        updates = data.model_dump(exclude_unset=True)
        if updates.get("category_id") is not None:
            await self._require_category(updates["category_id"])

        for field, value in updates.items():
            if value is None and field in ("name", "category_id", "base_price", "is_active"):
                continue
            setattr(product, field, value)

        await self.db.commit()
        await self.db.refresh(product)
        return product

    async def deactivate_product(self, product_id: int) -> Product:
        product = await self.get_product(product_id)
        if not product:
            raise NotFoundError("Product", product_id)

        product.is_active = False
        await self.db.commit()
        await self.db.refresh(product)
        logger.info(f"Product deactivated: id={product_id}")
        return product
