"""
Admin routes

Everything here requires user_type == admin.
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from printhaus.api.deps import get_current_admin
from printhaus.core.database import get_db
from printhaus.core.exceptions import BusinessRuleError
from printhaus.models.artist import Artist
from printhaus.models.catalog import Product
from printhaus.models.design import Design
from printhaus.models.order import Order, OrderStatus
from printhaus.models.user import User
from printhaus.schemas.admin import AdminStats
from printhaus.schemas.artist import AdminArtistUpdate, ArtistWithUserResponse
from printhaus.schemas.cart import MessageResponse
from printhaus.schemas.catalog import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
)
from printhaus.schemas.order import OrderResponse
from printhaus.schemas.user import AdminUserCreate, AdminUserUpdate, BlockUserRequest, UserResponse
from printhaus.services.artist_service import ArtistService
from printhaus.services.catalog_service import CatalogService
from printhaus.services.order_service import OrderService
from printhaus.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


async def _count(db: AsyncSession, column, *conditions) -> int:
    query = select(func.count(column))
    if conditions:
        query = query.where(*conditions)
    result = await db.execute(query)
    return result.scalar_one()


@router.get("/stats", response_model=AdminStats)
async def get_stats(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    revenue = await db.execute(
        select(func.coalesce(func.sum(Order.total_amount), 0))
        .where(Order.status != OrderStatus.CANCELLED.value)
    )
    return AdminStats(
        total_users=await _count(db, User.id),
        total_artists=await _count(db, Artist.id),
        verified_artists=await _count(db, Artist.id, Artist.is_verified.is_(True)),
        total_products=await _count(db, Product.id),
        active_products=await _count(db, Product.id, Product.is_active.is_(True)),
        total_designs=await _count(db, Design.id),
        total_orders=await _count(db, Order.id),
        pending_orders=await _count(db, Order.id, Order.status == OrderStatus.PENDING.value),
        total_revenue=float(revenue.scalar_one() or 0),
    )


# ============================================================
# Users
# ============================================================

@router.get("/users", response_model=List[UserResponse])
async def list_users(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await UserService(db).list_users()


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: AdminUserCreate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    user = await UserService(db).create_user(
        email=data.email,
        password=data.password,
        first_name=data.first_name,
        last_name=data.last_name,
        user_type=data.user_type.value,
    )
    logger.info(f"Admin {admin.id} created user {user.id}")
    return user


@router.put("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    data: AdminUserUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await UserService(db).update_user(
        user_id,
        email=data.email,
        first_name=data.first_name,
        last_name=data.last_name,
        user_type=data.user_type.value if data.user_type else None,
        password=data.password,
    )


@router.put("/users/{user_id}/block", response_model=UserResponse)
async def block_user(
    user_id: int,
    data: BlockUserRequest,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    if user_id == admin.id and data.is_blocked:
        raise BusinessRuleError("You cannot block your own account", code="self_block")
    user = await UserService(db).set_blocked(user_id, data.is_blocked)
    logger.info(f"Admin {admin.id} set is_blocked={data.is_blocked} on user {user_id}")
    return user


# ============================================================
# Artists
# ============================================================

@router.get("/artists", response_model=List[ArtistWithUserResponse])
async def list_artists(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """Every profile, verified or not."""
    return await ArtistService(db).list_all_artists()


@router.put("/artists/{artist_id}", response_model=ArtistWithUserResponse)
async def update_artist(
    artist_id: int,
    data: AdminArtistUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    service = ArtistService(db)
    await service.admin_update_artist(artist_id, data)
    logger.info(f"Admin {admin.id} updated artist {artist_id}")
    return await service.get_artist_with_user(artist_id)


# ============================================================
# Products
# ============================================================

@router.get("/products", response_model=List[ProductResponse])
async def list_products(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """All products including inactive ones."""
    return await CatalogService(db).get_all_products(include_inactive=True)


@router.post("/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    data: ProductCreate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await CatalogService(db).create_product(data)


@router.put("/products/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    data: ProductUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await CatalogService(db).update_product(product_id, data)


@router.delete("/products/{product_id}", response_model=MessageResponse)
async def delete_product(
    product_id: int,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """Soft delete: the product is deactivated, order history keeps pointing at it."""
    await CatalogService(db).deactivate_product(product_id)
    return MessageResponse(message="Product deactivated")


# ============================================================
# Categories
# ============================================================

@router.get("/categories", response_model=List[CategoryResponse])
async def list_categories(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await CatalogService(db).get_all_categories()


@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    data: CategoryCreate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await CatalogService(db).create_category(data)


@router.put("/categories/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: int,
    data: CategoryUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await CatalogService(db).update_category(category_id, data)


@router.delete("/categories/{category_id}", response_model=MessageResponse)
async def delete_category(
    category_id: int,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    await CatalogService(db).delete_category(category_id)
    return MessageResponse(message="Category deleted")


# ============================================================
# Orders
# ============================================================

@router.get("/orders", response_model=List[OrderResponse])
async def list_orders(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await OrderService(db).list_all_orders()
