"""
Catalog models: categories and customizable base products
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, JSON, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from printhaus.core.database import Base
from printhaus.core.utils import utcnow


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    slug = Column(String(100), unique=True, index=True, nullable=False)
    description = Column(Text)
    image_url = Column(String)
    sort_order = Column(Integer, nullable=False, default=0)

    products = relationship("Product", back_populates="category")


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    base_price = Column(Numeric(10, 2), nullable=False)
    image_url = Column(String)
    # {"colors": [...], "sizes": [...], "materials": [...], "quantities": [...]}
    customization_options = Column(JSON, default=dict)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    category = relationship("Category", back_populates="products")

    __table_args__ = (
        CheckConstraint("base_price >= 0", name="ck_products_base_price"),
    )
