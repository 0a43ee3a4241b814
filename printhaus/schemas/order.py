"""
Order schemas
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, EmailStr, Field, computed_field

from printhaus.schemas.cart import CartCustomization


class ShippingAddress(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    address: str = Field(..., min_length=1, max_length=500)
    city: str = Field(..., min_length=1, max_length=100)
    zip_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(..., min_length=2, max_length=100)


class OrderCreate(BaseModel):
    # Totals are computed server-side; extra client fields are dropped
    shipping_address: ShippingAddress
    notes: Optional[str] = Field(None, max_length=2000)


class OrderItemResponse(BaseModel):
    id: int
    product_id: Optional[int] = None
    design_id: Optional[int] = None
    quantity: int
    unit_price: float
    customization: CartCustomization = Field(default_factory=CartCustomization)
    artist_commission: Optional[float] = None

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    id: int
    user_id: Optional[int] = None
    order_number: str
    status: str
    total_amount: float
    shipping_cost: float
    shipping_address: ShippingAddress
    payment_status: str
    notes: Optional[str] = None
    items: List[OrderItemResponse]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def grand_total(self) -> float:
        return round(self.total_amount + self.shipping_cost, 2)

    class Config:
        from_attributes = True
