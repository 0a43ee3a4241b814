"""
User schemas
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from printhaus.models.user import UserType


class UserBase(BaseModel):
    email: EmailStr
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)


class UserCreate(UserBase):
    password: str = Field(..., min_length=8, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower()


class UserLogin(BaseModel):
    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower()


class UserResponse(UserBase):
    id: int
    profile_image_url: Optional[str] = None
    user_type: str
    is_blocked: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    """Session cookies are set as well; the token in the body is for API clients."""
    user: UserResponse
    access_token: str
    token_type: str = "bearer"
    csrf_token: str


class AdminUserCreate(UserCreate):
    user_type: UserType = UserType.CUSTOMER


class AdminUserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    user_type: Optional[UserType] = None
    password: Optional[str] = Field(None, min_length=8, max_length=128)


class BlockUserRequest(BaseModel):
    is_blocked: bool
