"""
Artist schemas
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from printhaus.schemas.user import UserResponse


class SocialLinks(BaseModel):
    website: Optional[str] = Field(None, max_length=500)
    instagram: Optional[str] = Field(None, max_length=255)
    twitter: Optional[str] = Field(None, max_length=255)
    behance: Optional[str] = Field(None, max_length=500)

    class Config:
        extra = "forbid"


class ArtistCreate(BaseModel):
    bio: Optional[str] = Field(None, max_length=5000)
    specialty: Optional[str] = Field(None, max_length=255)
    social_links: SocialLinks = Field(default_factory=SocialLinks)
    portfolio_url: Optional[str] = None


class ArtistUpdate(BaseModel):
    bio: Optional[str] = Field(None, max_length=5000)
    specialty: Optional[str] = Field(None, max_length=255)
    social_links: Optional[SocialLinks] = None
    portfolio_url: Optional[str] = Field(None, max_length=500)


class AdminArtistUpdate(BaseModel):
    bio: Optional[str] = Field(None, max_length=5000)
    specialty: Optional[str] = Field(None, max_length=255)
    is_verified: Optional[bool] = None
    commission_rate: Optional[Decimal] = Field(None, ge=0, le=1)


class ArtistResponse(BaseModel):
    id: int
    user_id: int
    bio: Optional[str] = None
    specialty: Optional[str] = None
    social_links: SocialLinks = Field(default_factory=SocialLinks)
    portfolio_url: Optional[str] = None
    is_verified: bool
    commission_rate: float
    created_at: Optional[datetime] = None

    @field_validator("social_links", mode="before")
    @classmethod
    def default_social_links(cls, v):
        return v or {}

    class Config:
        from_attributes = True


class ArtistWithUserResponse(ArtistResponse):
    user: Optional[UserResponse] = None
