# src/auth/schemas.py

from datetime import datetime
from pydantic import BaseModel, EmailStr, Field

from src.models.models import UserType


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    name: str = Field(..., min_length=1, max_length=200)
    user_type: UserType = UserType.USER


class UserResponse(BaseModel):
    """User info returned by the auth endpoints. Never carries the password hash."""
    id: int
    email: str
    name: str
    user_type: UserType
    created_at: datetime

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    user: UserResponse
    access_token: str
    token_type: str = "bearer"
