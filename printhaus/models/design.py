"""
Design model - artwork an artist offers for printing on products
"""
from decimal import Decimal

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, JSON, Numeric, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship

from printhaus.core.database import Base
from printhaus.core.utils import utcnow


class Design(Base):
    __tablename__ = "designs"

    id = Column(Integer, primary_key=True, index=True)
    artist_id = Column(Integer, ForeignKey("artists.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    image_url = Column(String, nullable=False)
    file_url = Column(String)
    tags = Column(JSON, default=list)
    price = Column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    is_public = Column(Boolean, nullable=False, default=True)
    download_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)

    artist = relationship("Artist", back_populates="designs")

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_designs_price"),
        Index("ix_designs_public_created", "is_public", "created_at"),
    )
