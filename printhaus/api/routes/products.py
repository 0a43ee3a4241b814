"""
Product routes - public catalog browsing
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from printhaus.core.database import get_db
from printhaus.core.exceptions import NotFoundError
from printhaus.schemas.catalog import ProductResponse
from printhaus.services.catalog_service import CatalogService

router = APIRouter()


@router.get("", response_model=List[ProductResponse])
async def list_products(
    category: Optional[str] = Query(None, description="Category slug"),
    db: AsyncSession = Depends(get_db),
):
    """Active products, optionally narrowed to one category."""
    service = CatalogService(db)
    if category:
        found = await service.get_category_by_slug(category)
        if not found:
            raise NotFoundError("Category", category)
        return await service.get_products_by_category(found.id)
    return await service.get_all_products()


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, db: AsyncSession = Depends(get_db)):
    product = await CatalogService(db).get_product(product_id)
    if not product or not product.is_active:
        raise NotFoundError("Product", product_id)
    return product
