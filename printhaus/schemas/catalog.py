"""
Category and product schemas
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator


class CustomizationOptions(BaseModel):
    """Choices a buyer may pick from when adding a product to the cart."""
    colors: List[str] = Field(default_factory=list)
    sizes: List[str] = Field(default_factory=list)
    materials: List[str] = Field(default_factory=list)
    quantities: List[str] = Field(default_factory=list)

    class Config:
        extra = "forbid"


class CategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: Optional[str] = None
    image_url: Optional[str] = None
    sort_order: int = 0


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, min_length=1, max_length=100, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: Optional[str] = None
    image_url: Optional[str] = None
    sort_order: Optional[int] = None


class CategoryResponse(CategoryBase):
    id: int

    class Config:
        from_attributes = True


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    category_id: int
    base_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    image_url: Optional[str] = None
    customization_options: CustomizationOptions = Field(default_factory=CustomizationOptions)


class ProductCreate(ProductBase):
    is_active: bool = True


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    category_id: Optional[int] = None
    base_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    image_url: Optional[str] = None
    customization_options: Optional[CustomizationOptions] = None
    is_active: Optional[bool] = None


class ProductResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    category_id: int
    base_price: float
    image_url: Optional[str] = None
    customization_options: CustomizationOptions = Field(default_factory=CustomizationOptions)
    is_active: bool
    created_at: Optional[datetime] = None

    @field_validator("customization_options", mode="before")
    @classmethod
    def default_options(cls, v):
        return v or {}

    class Config:
        from_attributes = True
