"""
Cart model

price is a snapshot taken when the line is added; later catalog price
changes do not touch it. Products are retired by deactivation; the
product foreign key refuses deletes while cart lines point at it.
"""
from sqlalchemy import Column, Integer, DateTime, JSON, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from printhaus.core.database import Base
from printhaus.core.utils import utcnow


class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False, index=True)
    design_id = Column(Integer, ForeignKey("designs.id", ondelete="SET NULL"), nullable=True, index=True)
    quantity = Column(Integer, nullable=False, default=1)
    # {"color": ..., "size": ..., "material": ..., "text": ...}
    customization = Column(JSON, default=dict)
    price = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    # Relationships
    user = relationship("User", back_populates="cart_items")
    product = relationship("Product")
    design = relationship("Design")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_cart_items_quantity"),
        CheckConstraint("price >= 0", name="ck_cart_items_price"),
    )
