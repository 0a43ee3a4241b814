from printhaus.models.user import User, UserType
from printhaus.models.artist import Artist
from printhaus.models.catalog import Category, Product
from printhaus.models.design import Design
from printhaus.models.cart import CartItem
from printhaus.models.order import Order, OrderItem, OrderStatus, PaymentStatus

__all__ = [
    "User",
    "UserType",
    "Artist",
    "Category",
    "Product",
    "Design",
    "CartItem",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentStatus",
]
