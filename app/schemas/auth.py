from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional

from app.schemas.base import CamelModel


class UserCreate(CamelModel):
    """Schema for creating a back-office user."""

    email: EmailStr
    password: str = Field(..., min_length=8)
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class UserResponse(CamelModel):
    id: int
    email: EmailStr
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_active: bool
    is_superuser: bool
    created_at: Optional[datetime] = None


class AuthMeResponse(CamelModel):
    user: UserResponse


class Token(CamelModel):
    access_token: str
    token_type: str = "bearer"


class TokenData(BaseModel):
    """Data encoded in JWT token."""

    user_id: Optional[int] = None
    email: Optional[str] = None


class LoginRequest(CamelModel):
    email: EmailStr
    password: str
