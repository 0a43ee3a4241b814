"""
Order models

An order is an immutable snapshot of the cart at checkout time. Status
changes past pending belong to fulfillment and are not driven here.
"""
import enum

from sqlalchemy import Column, Integer, String, DateTime, Text, JSON, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from printhaus.core.database import Base
from printhaus.core.utils import utcnow


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    order_number = Column(String(32), unique=True, index=True, nullable=False)
    status = Column(String(20), nullable=False, default=OrderStatus.PENDING.value, index=True)

    # Sum of item lines; shipping is charged on top
    total_amount = Column(Numeric(10, 2), nullable=False)
    shipping_cost = Column(Numeric(10, 2), nullable=False, default=0)

    # {"name", "email", "address", "city", "zip_code", "country"}
    shipping_address = Column(JSON, nullable=False)
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value)
    notes = Column(Text)

    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    user = relationship("User", back_populates="orders")
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("total_amount >= 0", name="ck_orders_total_amount"),
    )


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True, index=True)
    design_id = Column(Integer, ForeignKey("designs.id", ondelete="SET NULL"), nullable=True, index=True)

    # Snapshot of the cart line at checkout
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    customization = Column(JSON, default=dict)
    artist_commission = Column(Numeric(10, 2))

    order = relationship("Order", back_populates="items")
    product = relationship("Product")
    design = relationship("Design")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_order_items_quantity"),
        CheckConstraint("unit_price >= 0", name="ck_order_items_unit_price"),
    )
