"""
Design schemas
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator


class DesignCreate(BaseModel):
    """Form fields of a design upload; the image travels as a file part."""
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    price: Decimal = Field(Decimal("0.00"), ge=0, max_digits=10, decimal_places=2)
    tags: List[str] = Field(default_factory=list, max_length=20)
    is_public: bool = True

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v):
        seen = []
        for tag in v:
            tag = tag.strip().lower()
            if tag and tag not in seen:
                seen.append(tag)
        return seen


class DesignResponse(BaseModel):
    id: int
    artist_id: int
    title: str
    description: Optional[str] = None
    image_url: str
    file_url: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    price: float
    is_public: bool
    download_count: int
    created_at: Optional[datetime] = None

    @field_validator("tags", mode="before")
    @classmethod
    def default_tags(cls, v):
        return v or []

    class Config:
        from_attributes = True
