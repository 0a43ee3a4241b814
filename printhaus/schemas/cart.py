"""
Cart schemas
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class CartCustomization(BaseModel):
    color: Optional[str] = Field(None, max_length=50)
    size: Optional[str] = Field(None, max_length=50)
    material: Optional[str] = Field(None, max_length=50)
    quantity: Optional[str] = Field(None, max_length=50)
    text: Optional[str] = Field(None, max_length=200)

    class Config:
        extra = "forbid"


class CartItemCreate(BaseModel):
    # Any client-sent price is ignored: the line price is taken from the catalog
    product_id: int
    design_id: Optional[int] = None
    quantity: int = Field(1, ge=1, le=999)
    customization: CartCustomization = Field(default_factory=CartCustomization)


class CartItemUpdate(BaseModel):
    quantity: int = Field(..., ge=1, le=999)


class CartItemResponse(BaseModel):
    id: int
    user_id: int
    product_id: int
    design_id: Optional[int] = None
    quantity: int
    customization: CartCustomization = Field(default_factory=CartCustomization)
    price: float
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CartLineView(BaseModel):
    """A cart row joined with the product and design it points at."""
    id: int
    product_id: int
    design_id: Optional[int] = None
    quantity: int
    customization: CartCustomization = Field(default_factory=CartCustomization)
    price: float
    line_total: float
    product_name: Optional[str] = None
    product_image_url: Optional[str] = None
    design_title: Optional[str] = None
    design_image_url: Optional[str] = None
    created_at: Optional[datetime] = None


class CartSummary(BaseModel):
    items: List[CartLineView]
    item_count: int
    subtotal: float
    shipping: float
    total: float
    amount_to_free_shipping: float


class MessageResponse(BaseModel):
    message: str
