"""
Catalog seed data

Runs at startup when SEED_ON_STARTUP is set and the catalog is empty.
"""
import logging
from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from printhaus.models.catalog import Category, Product

logger = logging.getLogger(__name__)

SEED_CATEGORIES = [
    {
        "name": "Custom T-Shirts",
        "slug": "t-shirts",
        "description": "Personalized t-shirts with DTF printing",
        "image_url": "https://images.unsplash.com/photo-1521572163474-6864f9cf17ab?w=300",
        "sort_order": 1,
    },
    {
        "name": "Laser Engraved",
        "slug": "laser-engraved",
        "description": "Precision laser engraving on wood and acrylic",
        "image_url": "https://images.unsplash.com/photo-1586023492125-27b2c045efd7?w=300",
        "sort_order": 2,
    },
    {
        "name": "Vinyl Stickers",
        "slug": "vinyl-stickers",
        "description": "Custom vinyl decals and stickers",
        "image_url": "https://images.unsplash.com/photo-1611532736597-de2d4265fba3?w=300",
        "sort_order": 3,
    },
    {
        "name": "Keychains",
        "slug": "keychains",
        "description": "Custom keychains in various materials",
        "image_url": "https://images.unsplash.com/photo-1578662996442-48f60103fc96?w=300",
        "sort_order": 4,
    },
    {
        "name": "Phone Cases",
        "slug": "phone-cases",
        "description": "Custom printed smartphone cases",
        "image_url": "https://images.unsplash.com/photo-1592899677977-9c10ca588bbd?w=300",
        "sort_order": 5,
    },
]

# Keyed by category slug instead of id so seeding works on any sequence state
SEED_PRODUCTS = [
    {
        "name": "Classic Cotton T-Shirt",
        "description": "100% cotton, available in multiple colors",
        "category": "t-shirts",
        "base_price": Decimal("24.99"),
        "image_url": "https://images.unsplash.com/photo-1521572163474-6864f9cf17ab?w=400",
        "customization_options": {"colors": ["white", "black", "blue", "red"], "sizes": ["S", "M", "L", "XL"]},
    },
    {
        "name": "Premium Wooden Plaque",
        "description": "High-quality wood with precision laser engraving",
        "category": "laser-engraved",
        "base_price": Decimal("39.99"),
        "image_url": "https://images.unsplash.com/photo-1586023492125-27b2c045efd7?w=400",
        "customization_options": {"sizes": ["Small", "Medium", "Large"], "materials": ["Oak", "Pine", "Walnut"]},
    },
    {
        "name": "Vinyl Sticker Pack",
        "description": "Durable vinyl stickers, weatherproof",
        "category": "vinyl-stickers",
        "base_price": Decimal("12.99"),
        "image_url": "https://images.unsplash.com/photo-1611532736597-de2d4265fba3?w=400",
        "customization_options": {"quantities": ["5-pack", "10-pack", "25-pack"]},
    },
    {
        "name": "Custom Keychain",
        "description": "Personalized keychains in various materials",
        "category": "keychains",
        "base_price": Decimal("8.99"),
        "image_url": "https://images.unsplash.com/photo-1578662996442-48f60103fc96?w=400",
        "customization_options": {"materials": ["Acrylic", "Wood", "Metal"]},
    },
]


async def seed_catalog(db: AsyncSession) -> bool:
    """Insert the starter catalog. Returns False when categories already exist."""
    existing = await db.execute(select(func.count(Category.id)))
    if existing.scalar_one():
        logger.info("Catalog already present, skipping seed")
        return False

    categories = {}
    for data in SEED_CATEGORIES:
        category = Category(**data)
        db.add(category)
        categories[data["slug"]] = category
    await db.flush()

    for data in SEED_PRODUCTS:
        fields = {k: v for k, v in data.items() if k != "category"}
        db.add(Product(category_id=categories[data["category"]].id, **fields))

    await db.commit()
    logger.info(f"Seeded {len(SEED_CATEGORIES)} categories and {len(SEED_PRODUCTS)} products")
    return True
