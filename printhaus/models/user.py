"""
User model

user_type drives authorization: customer < artist < admin.
"""
import enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship

from printhaus.core.database import Base
from printhaus.core.utils import utcnow


class UserType(str, enum.Enum):
    CUSTOMER = "customer"
    ARTIST = "artist"
    ADMIN = "admin"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    first_name = Column(String(100))
    last_name = Column(String(100))
    profile_image_url = Column(String)
    user_type = Column(String(20), nullable=False, default=UserType.CUSTOMER.value)
    is_blocked = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    artist = relationship("Artist", back_populates="user", uselist=False)
    cart_items = relationship("CartItem", back_populates="user", cascade="all, delete-orphan")
    orders = relationship("Order", back_populates="user")

    @property
    def is_admin(self) -> bool:
        return self.user_type == UserType.ADMIN.value
