"""
Admin dashboard schemas
"""
from pydantic import BaseModel


class AdminStats(BaseModel):
    total_users: int
    total_artists: int
    verified_artists: int
    total_products: int
    active_products: int
    total_designs: int
    total_orders: int
    pending_orders: int
    total_revenue: float
