"""
Artist profile model

One profile per user, enforced by the unique constraint on user_id.
"""
from decimal import Decimal

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, JSON, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from printhaus.core.database import Base
from printhaus.core.utils import utcnow


class Artist(Base):
    __tablename__ = "artists"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)
    bio = Column(Text)
    specialty = Column(String(255))
    # {"website": ..., "instagram": ..., "twitter": ..., "behance": ...}
    social_links = Column(JSON, default=dict)
    portfolio_url = Column(String)
    is_verified = Column(Boolean, nullable=False, default=False, index=True)
    commission_rate = Column(Numeric(5, 2), nullable=False, default=Decimal("0.30"))

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    user = relationship("User", back_populates="artist")
    designs = relationship("Design", back_populates="artist")

    __table_args__ = (
        CheckConstraint("commission_rate >= 0 AND commission_rate <= 1", name="ck_artists_commission_rate"),
    )
