"""Authentication schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    """Request schema for login."""

    email: EmailStr
    password: str = Field(min_length=1)


class RegisterRequest(BaseModel):
    """Request schema for user registration."""

    email: EmailStr
    password: str = Field(min_length=6)
    name: str | None = None


class UserResponse(BaseModel):
    """Response schema for user info."""

    id: UUID
    email: str
    name: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    """Envelope returned by login, register and logout."""

    success: bool
    message: str
    data: UserResponse | None = None


class CurrentUserResponse(BaseModel):
    """Response schema for the session's user."""

    data: UserResponse
