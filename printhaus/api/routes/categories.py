"""
Category routes
"""
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from printhaus.core.database import get_db
from printhaus.schemas.catalog import CategoryResponse
from printhaus.services.catalog_service import CatalogService

router = APIRouter()


@router.get("", response_model=List[CategoryResponse])
async def list_categories(db: AsyncSession = Depends(get_db)):
    """All categories in display order."""
    return await CatalogService(db).get_all_categories()
